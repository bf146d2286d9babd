"""SQLAlchemy-backed repositories. Same contract as the in-memory ones."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session, sessionmaker

from ledgerflow.models.customer import CustomerRow
from ledgerflow.models.transaction import TransactionRow
from ledgerflow.repositories.base import CustomerRepository, TransactionRepository
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction

logger = logging.getLogger(__name__)


class _SqlStore:
    row = None
    model = None

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _session(self) -> Session:
        return self._session_factory()

    def _to_model(self, row):
        return self.model.model_validate(row)

    def _columns(self, record) -> Dict[str, Any]:
        return record.model_dump(mode="python")

    def all(self) -> List:
        db = self._session()
        try:
            rows = db.query(self.row).order_by(self.row.id).all()
            return [self._to_model(r) for r in rows]
        finally:
            db.close()

    def get(self, record_id: int) -> Optional[Any]:
        db = self._session()
        try:
            row = db.get(self.row, record_id)
            return self._to_model(row) if row is not None else None
        finally:
            db.close()

    def add(self, fields: Dict[str, Any]):
        db = self._session()
        try:
            # validate through the model before touching the table (id is a placeholder)
            draft = self.model.model_validate({**fields, "id": 0})
            columns = self._columns(draft)
            columns.pop("id")
            row = self.row(**columns)
            db.add(row)
            db.commit()
            db.refresh(row)
            return self._to_model(row)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def save(self, record):
        db = self._session()
        try:
            row = db.get(self.row, record.id)
            if row is None:
                raise KeyError(record.id)
            for key, value in self._columns(record).items():
                setattr(row, key, value)
            db.commit()
            db.refresh(row)
            return self._to_model(row)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def remove(self, record_id: int) -> bool:
        db = self._session()
        try:
            row = db.get(self.row, record_id)
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def seed(self, records) -> int:
        """Insert snapshot records with their original ids. Only used on an empty table."""
        db = self._session()
        try:
            count = 0
            for record in records:
                record = self.model.model_validate(record)
                db.add(self.row(**self._columns(record)))
                count += 1
            db.commit()
            logger.info(f"Seeded {count} rows into {self.row.__tablename__}")
            return count
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def is_empty(self) -> bool:
        db = self._session()
        try:
            return db.query(self.row.id).first() is None
        finally:
            db.close()


class SqlCustomerRepository(_SqlStore, CustomerRepository):
    row = CustomerRow
    model = Customer


class SqlTransactionRepository(_SqlStore, TransactionRepository):
    row = TransactionRow
    model = Transaction

    def _columns(self, record) -> Dict[str, Any]:
        columns = record.model_dump(mode="python")
        columns["type"] = record.type.value
        return columns

    def for_customer(self, customer_id: int) -> List[Transaction]:
        db = self._session()
        try:
            rows = (
                db.query(TransactionRow)
                .filter(TransactionRow.customer_id == customer_id)
                .order_by(TransactionRow.id)
                .all()
            )
            return [self._to_model(r) for r in rows]
        finally:
            db.close()
