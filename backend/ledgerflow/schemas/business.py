from pydantic import BaseModel
from typing import Optional
from decimal import Decimal


class BusinessProfile(BaseModel):
    """Static business metadata. Simple key-value state, not part of the ledger."""
    name: str = "LedgerFlow"
    owner: str = ""
    phone: str = ""
    address: str = ""


class BusinessUpdate(BaseModel):
    name: Optional[str] = None
    owner: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    class Config:
        extra = "forbid"


class BusinessTotals(BaseModel):
    total_to_receive: Decimal = Decimal("0")
    total_to_pay: Decimal = Decimal("0")
    customer_count: int = 0

    @property
    def net_balance(self) -> Decimal:
        return self.total_to_receive - self.total_to_pay


class BusinessData(BusinessProfile):
    """Profile plus the totals derived from the current customer snapshot."""
    total_to_receive: Decimal
    total_to_pay: Decimal
    customer_count: int
    net_balance: Decimal
