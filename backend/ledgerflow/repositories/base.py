"""
Storage interface the ledger services depend on.

Repositories are synchronous and every method is a single step: a service
calling one never observes a half-applied change, because nothing yields
to the event loop inside a repository call. Every record returned is a
copy; mutating it does not touch the store.

Ids are assigned by the repository, start at 1 and are never reused, even
after the record holding the highest id is deleted.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction


class CustomerRepository(ABC):
    @abstractmethod
    def all(self) -> List[Customer]:
        """All customers in insertion order."""

    @abstractmethod
    def get(self, customer_id: int) -> Optional[Customer]:
        ...

    @abstractmethod
    def add(self, fields: Dict[str, Any]) -> Customer:
        """Store a new customer under the next id and return it."""

    @abstractmethod
    def save(self, customer: Customer) -> Customer:
        """Replace an existing customer record."""

    @abstractmethod
    def remove(self, customer_id: int) -> bool:
        ...

    def close(self) -> None:
        pass


class TransactionRepository(ABC):
    @abstractmethod
    def all(self) -> List[Transaction]:
        """All transactions in insertion order."""

    @abstractmethod
    def get(self, transaction_id: int) -> Optional[Transaction]:
        ...

    @abstractmethod
    def for_customer(self, customer_id: int) -> List[Transaction]:
        ...

    @abstractmethod
    def add(self, fields: Dict[str, Any]) -> Transaction:
        ...

    @abstractmethod
    def save(self, transaction: Transaction) -> Transaction:
        ...

    @abstractmethod
    def remove(self, transaction_id: int) -> bool:
        ...

    def close(self) -> None:
        pass
