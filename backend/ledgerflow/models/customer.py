from sqlalchemy import Column, Integer, String, Numeric, DateTime
from ledgerflow.db.base import Base


class CustomerRow(Base):
    __tablename__ = "customers"
    # AUTOINCREMENT: SQLite must never hand out the id of a deleted customer again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(64), nullable=False)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    last_transaction = Column(DateTime(timezone=True), nullable=False)
