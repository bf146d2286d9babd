"""
Customer ledger: customer records and their balances.

Balances are never edited directly by callers. The only way a balance
changes is TransactionService.create -> set_balance.
"""
import asyncio
import logging
from decimal import Decimal
from typing import Any, List, Optional

from ledgerflow.core.audit import AuditLog
from ledgerflow.core.exceptions import NotFound
from ledgerflow.repositories.base import CustomerRepository
from ledgerflow.schemas.common import parse_input
from ledgerflow.schemas.customer import Customer, CustomerCreate, CustomerUpdate
from ledgerflow.utils.dates import utcnow

logger = logging.getLogger(__name__)


class CustomerService:
    def __init__(self, repository: CustomerRepository, latency: float = 0.0):
        self._repo = repository
        self._latency = latency
        # one writer at a time on the customer store
        self._lock = asyncio.Lock()

    async def _pause(self):
        """Simulated I/O latency; lets other tasks interleave between operations."""
        if self._latency:
            await asyncio.sleep(self._latency)

    async def list(self) -> List[Customer]:
        await self._pause()
        return self._repo.all()

    async def get(self, customer_id: int) -> Customer:
        await self._pause()
        customer = self._repo.get(customer_id)
        if customer is None:
            raise NotFound("Customer", customer_id)
        return customer

    async def search(self, query: str | None) -> List[Customer]:
        """Case-insensitive match on name, substring match on phone. Blank query returns all."""
        customers = await self.list()
        if not query or not query.strip():
            return customers
        q = query.strip()
        return [
            c for c in customers
            if q.lower() in c.name.lower() or q in c.phone
        ]

    async def create(self, data: Any) -> Customer:
        payload = parse_input(CustomerCreate, data)
        await self._pause()
        async with self._lock:
            now = utcnow()
            customer = self._repo.add({
                "name": payload.name,
                "phone": payload.phone,
                "balance": Decimal("0"),
                "created_at": now,
                "last_transaction": now,
            })
        logger.info(f"Customer {customer.id} created")
        AuditLog.log_action("create", "customer", customer.id, changes={"name": customer.name})
        return customer

    async def update(self, customer_id: int, data: Any) -> Customer:
        changes = parse_input(CustomerUpdate, data).model_dump(exclude_unset=True)
        await self._pause()
        async with self._lock:
            current = self._repo.get(customer_id)
            if current is None:
                raise NotFound("Customer", customer_id)
            customer = self._repo.save(current.model_copy(update=changes))
        AuditLog.log_action("update", "customer", customer_id, changes=changes)
        return customer

    async def delete(self, customer_id: int) -> bool:
        """Remove the customer. Its transactions are left in place."""
        await self._pause()
        async with self._lock:
            if not self._repo.remove(customer_id):
                raise NotFound("Customer", customer_id)
        logger.info(f"Customer {customer_id} deleted")
        AuditLog.log_action("delete", "customer", customer_id)
        return True

    async def set_balance(self, customer_id: int, new_balance: Decimal) -> Optional[Customer]:
        """
        Privileged: only TransactionService calls this.

        Returns None without raising when the customer no longer exists;
        the caller decides whether that is an error.
        """
        await self._pause()
        async with self._lock:
            current = self._repo.get(customer_id)
            if current is None:
                logger.warning(f"set_balance ignored: customer {customer_id} does not exist")
                return None
            customer = self._repo.save(current.model_copy(update={
                "balance": Decimal(str(new_balance)),
                "last_transaction": utcnow(),
            }))
        AuditLog.log_balance_change(customer_id, current.balance, customer.balance)
        return customer
