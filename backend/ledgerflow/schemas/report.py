from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path

from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction, TransactionType


class ReportKind(str, Enum):
    OUTSTANDING = "outstanding"
    SUMMARY = "summary"
    TRANSACTIONS = "transactions"


class ReportRequest(BaseModel):
    """
    Everything a report needs. Customers and transactions are a snapshot
    taken by the caller; the generator never reads the stores itself.
    """
    kind: str
    start_date: date | datetime
    end_date: date | datetime
    customers: List[Customer] = Field(default_factory=list)
    transactions: List[Transaction] = Field(default_factory=list)
    format: str = "pdf"


class OutstandingRow(BaseModel):
    name: str
    phone: str
    amount: Decimal  # absolute balance
    status: str  # "Will Give" | "Will Get"


class TransactionRow(BaseModel):
    date: datetime
    customer_name: str
    description: str
    type: TransactionType
    amount: Decimal
    running_balance: Decimal

    @property
    def type_label(self) -> str:
        return "Credit" if self.type == TransactionType.CREDIT else "Debit"

    @property
    def sign(self) -> str:
        return "+" if self.type == TransactionType.CREDIT else "-"


class SummaryStats(BaseModel):
    customer_count: int
    outstanding_count: int
    total_to_receive: Decimal
    total_to_pay: Decimal
    net_balance: Decimal

    @property
    def net_status(self) -> str:
        if self.net_balance > 0:
            return "Positive"
        if self.net_balance < 0:
            return "Negative"
        return "Balanced"


class ReportData(BaseModel):
    """Structured report content, independent of how it gets rendered."""
    kind: ReportKind
    business_name: str = "LedgerFlow"
    start: datetime
    end: datetime
    generated_on: date
    outstanding: List[OutstandingRow] = Field(default_factory=list)
    summary: Optional[SummaryStats] = None
    transactions: List[TransactionRow] = Field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.outstanding) + len(self.transactions)


class ReportResult(BaseModel):
    file_name: str
    path: Path
    data: ReportData
