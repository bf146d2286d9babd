from sqlalchemy import Column, Integer, String, Numeric, DateTime
from ledgerflow.db.base import Base


class TransactionRow(Base):
    __tablename__ = "transactions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    # No foreign key: deleting a customer leaves its transactions in place
    customer_id = Column(Integer, nullable=False, index=True)
    type = Column(String(16), nullable=False)  # credit | debit
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(String(512), nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    running_balance = Column(Numeric(14, 2), nullable=False)
