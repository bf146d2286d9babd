from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal

from ledgerflow.utils.dates import ensure_aware


def _not_blank(v: Optional[str]) -> Optional[str]:
    if v is None:
        raise ValueError("must not be null")
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


class CustomerCreate(BaseModel):
    name: str
    phone: str

    @field_validator("name", "phone")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    class Config:
        extra = "forbid"


class CustomerUpdate(BaseModel):
    """Partial update. Balance is only ever changed by recording a transaction."""
    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name", "phone")
    @classmethod
    def strip_text(cls, v: Optional[str]) -> Optional[str]:
        return _not_blank(v)

    class Config:
        extra = "forbid"


class Customer(BaseModel):
    id: int
    name: str
    phone: str
    balance: Decimal = Decimal("0")
    created_at: datetime
    last_transaction: datetime

    @field_validator("created_at", "last_transaction")
    @classmethod
    def aware_timestamps(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @property
    def status(self) -> str:
        """Positive balance: the customer will give. Negative: the customer will get."""
        if self.balance > 0:
            return "Will Give"
        if self.balance < 0:
            return "Will Get"
        return "Settled"

    class Config:
        from_attributes = True
