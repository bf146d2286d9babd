"""In-memory repositories. Data lives for the process lifetime only."""
from typing import Any, Dict, Iterable, List, Optional

from ledgerflow.repositories.base import CustomerRepository, TransactionRepository
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction


class _InMemoryStore:
    model = None

    def __init__(self, records: Iterable = ()):
        self._records: Dict[int, Any] = {}
        self._last_id = 0
        for record in records:
            record = self.model.model_validate(record)
            if record.id in self._records:
                raise ValueError(f"Duplicate {self.model.__name__} id {record.id} in seed data")
            self._records[record.id] = record
            self._last_id = max(self._last_id, record.id)

    def all(self) -> List:
        return [r.model_copy(deep=True) for r in self._records.values()]

    def get(self, record_id: int) -> Optional[Any]:
        record = self._records.get(record_id)
        return record.model_copy(deep=True) if record is not None else None

    def add(self, fields: Dict[str, Any]):
        # high-water mark: deleting the newest record must not free its id
        self._last_id += 1
        record = self.model.model_validate({**fields, "id": self._last_id})
        self._records[record.id] = record
        return record.model_copy(deep=True)

    def save(self, record):
        if record.id not in self._records:
            raise KeyError(record.id)
        self._records[record.id] = record.model_copy(deep=True)
        return record.model_copy(deep=True)

    def remove(self, record_id: int) -> bool:
        return self._records.pop(record_id, None) is not None


class InMemoryCustomerRepository(_InMemoryStore, CustomerRepository):
    model = Customer


class InMemoryTransactionRepository(_InMemoryStore, TransactionRepository):
    model = Transaction

    def for_customer(self, customer_id: int) -> List[Transaction]:
        return [t.model_copy(deep=True) for t in self._records.values() if t.customer_id == customer_id]
