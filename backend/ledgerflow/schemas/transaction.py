from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from decimal import Decimal
from enum import Enum

from ledgerflow.utils.dates import ensure_aware


class TransactionType(str, Enum):
    """Credit: the business gave value, balance goes up. Debit: the customer paid, balance goes down."""
    CREDIT = "credit"
    DEBIT = "debit"


CENT = Decimal("0.01")


def _positive(v: Optional[Decimal]) -> Optional[Decimal]:
    if v is None:
        raise ValueError("must not be null")
    if not v.is_finite() or v <= 0:
        raise ValueError("must be a positive amount")
    # balances are stored with 2 decimal places
    if v.quantize(CENT) != v:
        raise ValueError("must have at most 2 decimal places")
    return v


class TransactionCreate(BaseModel):
    customer_id: int
    amount: Decimal
    type: TransactionType = TransactionType.DEBIT  # anything not a credit reduces the balance
    description: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v: Decimal) -> Decimal:
        return _positive(v)

    @field_validator("date")
    @classmethod
    def aware_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_aware(v) if v is not None else v

    class Config:
        extra = "forbid"


class TransactionUpdate(BaseModel):
    """
    Direct edit of a recorded transaction.

    Does NOT recompute running balances of later transactions or the
    customer's balance; use reconciliation to find the resulting drift.
    """
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    description: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator("amount")
    @classmethod
    def positive_amount(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        return _positive(v)

    @field_validator("type", "date")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("date")
    @classmethod
    def aware_date(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    class Config:
        extra = "forbid"


class Transaction(BaseModel):
    id: int
    customer_id: int
    type: TransactionType
    amount: Decimal
    description: str = ""
    date: datetime
    running_balance: Decimal

    @field_validator("date")
    @classmethod
    def aware_date(cls, v: datetime) -> datetime:
        return ensure_aware(v)

    @property
    def delta(self) -> Decimal:
        """Signed effect of this transaction on the customer's balance."""
        return self.amount if self.type == TransactionType.CREDIT else -self.amount

    class Config:
        from_attributes = True
