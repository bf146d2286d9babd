from ledgerflow.repositories.base import CustomerRepository, TransactionRepository
from ledgerflow.repositories.memory import InMemoryCustomerRepository, InMemoryTransactionRepository
from ledgerflow.repositories.sql import SqlCustomerRepository, SqlTransactionRepository

__all__ = [
    "CustomerRepository",
    "TransactionRepository",
    "InMemoryCustomerRepository",
    "InMemoryTransactionRepository",
    "SqlCustomerRepository",
    "SqlTransactionRepository",
]
