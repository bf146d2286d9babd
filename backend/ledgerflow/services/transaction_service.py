"""
Transaction recorder: the transaction log and the balance-mutation protocol.

Recording a transaction reads the customer's balance, applies the signed
amount, stamps the result on the transaction as its running balance and
writes the new balance back to the customer. That read-compute-write runs
under a lock keyed by customer id, so two concurrent creates for the same
customer can never both start from the same balance.

Editing or deleting a recorded transaction does NOT recompute the running
balance of later transactions, nor the customer's balance. Drift caused by
such edits is reported by services.reconciliation, never repaired silently.
"""
import asyncio
import logging
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, Dict, List

from ledgerflow.core.audit import AuditLog
from ledgerflow.core.exceptions import NotFound, ValidationError
from ledgerflow.repositories.base import TransactionRepository
from ledgerflow.schemas.common import parse_input
from ledgerflow.schemas.transaction import Transaction, TransactionCreate, TransactionType, TransactionUpdate
from ledgerflow.services.customer_service import CustomerService
from ledgerflow.utils.dates import utcnow

logger = logging.getLogger(__name__)


def newest_first(transactions: List[Transaction]) -> List[Transaction]:
    # stable: transactions sharing a timestamp keep their recorded order
    return sorted(transactions, key=lambda t: t.date, reverse=True)


class TransactionService:
    def __init__(self, repository: TransactionRepository, customers: CustomerService, latency: float = 0.0):
        self._repo = repository
        self._customers = customers
        self._latency = latency
        self._lock = asyncio.Lock()
        self._customer_locks: Dict[int, asyncio.Lock] = {}
        self._lock_users: Dict[int, int] = {}

    async def _pause(self):
        if self._latency:
            await asyncio.sleep(self._latency)

    @asynccontextmanager
    async def _customer_lock(self, customer_id: int):
        """Hold the lock for one customer id; the entry is dropped once nobody holds or waits on it."""
        lock = self._customer_locks.get(customer_id)
        if lock is None:
            lock = self._customer_locks[customer_id] = asyncio.Lock()
        self._lock_users[customer_id] = self._lock_users.get(customer_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[customer_id] -= 1
            if not self._lock_users[customer_id]:
                del self._lock_users[customer_id]
                del self._customer_locks[customer_id]

    def _discard(self, transaction: Transaction) -> None:
        # no await: nothing can observe the log between the append and this removal
        self._repo.remove(transaction.id)
        logger.warning(f"Transaction {transaction.id} rolled back")

    async def list(self) -> List[Transaction]:
        await self._pause()
        return newest_first(self._repo.all())

    async def get(self, transaction_id: int) -> Transaction:
        await self._pause()
        transaction = self._repo.get(transaction_id)
        if transaction is None:
            raise NotFound("Transaction", transaction_id)
        return transaction

    async def list_for_customer(self, customer_id: int) -> List[Transaction]:
        await self._pause()
        return newest_first(self._repo.for_customer(customer_id))

    async def recent(self, limit: int = 10) -> List[Transaction]:
        if limit < 0:
            raise ValidationError("limit must not be negative", field="limit")
        await self._pause()
        return newest_first(self._repo.all())[:limit]

    async def create(self, data: Any) -> Transaction:
        """
        Record a transaction and move the customer's balance.

        Raises:
            ValidationError: customer_id or amount missing, amount not positive, unknown type
            NotFound: the customer does not exist (or vanished before the balance was written)
        """
        payload = parse_input(TransactionCreate, data)

        async with self._customer_lock(payload.customer_id):
            customer = await self._customers.get(payload.customer_id)

            delta = payload.amount if payload.type == TransactionType.CREDIT else -payload.amount
            new_balance = customer.balance + delta

            await self._pause()
            async with self._lock:
                transaction = self._repo.add({
                    "customer_id": payload.customer_id,
                    "type": payload.type,
                    "amount": payload.amount,
                    "description": payload.description or "",
                    "date": payload.date or utcnow(),
                    "running_balance": new_balance,
                })

            # set_balance writes last, so if it is cancelled or raises the balance was not touched
            try:
                updated = await self._customers.set_balance(payload.customer_id, new_balance)
            except BaseException:
                self._discard(transaction)
                raise
            if updated is None:
                # customer deleted mid-flight
                self._discard(transaction)
                raise NotFound("Customer", payload.customer_id)

        logger.info(
            f"Transaction {transaction.id} recorded: customer={transaction.customer_id} "
            f"{transaction.type.value} {transaction.amount} -> balance {new_balance}"
        )
        AuditLog.log_action("create", "transaction", transaction.id, changes={
            "customer_id": transaction.customer_id,
            "type": transaction.type.value,
            "amount": transaction.amount,
            "running_balance": transaction.running_balance,
        })
        return transaction

    async def update(self, transaction_id: int, data: Any) -> Transaction:
        """Edit a recorded transaction in place. Running balances are not recomputed."""
        changes = parse_input(TransactionUpdate, data).model_dump(exclude_unset=True)
        await self._pause()
        async with self._lock:
            current = self._repo.get(transaction_id)
            if current is None:
                raise NotFound("Transaction", transaction_id)
            transaction = self._repo.save(current.model_copy(update=changes))
        AuditLog.log_action("update", "transaction", transaction_id, changes={
            k: (v.value if isinstance(v, TransactionType) else v) for k, v in changes.items()
        })
        return transaction

    async def delete(self, transaction_id: int) -> bool:
        """Remove a recorded transaction. Neither later running balances nor the customer's balance change."""
        await self._pause()
        async with self._lock:
            if not self._repo.remove(transaction_id):
                raise NotFound("Transaction", transaction_id)
        AuditLog.log_action("delete", "transaction", transaction_id)
        return True

    async def total_for_customer(self, customer_id: int) -> Decimal:
        """Sum of signed deltas over the customer's transactions."""
        transactions = await self.list_for_customer(customer_id)
        return sum((t.delta for t in transactions), Decimal("0"))
