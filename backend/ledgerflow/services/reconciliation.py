"""
Read-only reconciliation of the ledger invariants.

Replays each customer's transactions in date order from a zero balance and
reports every place the stored data disagrees with the replay:

- a transaction whose stamped running balance is not the replayed one
- a customer whose balance is not the sum of its transaction deltas

Nothing is repaired here. Transaction edits and deletes are allowed to
leave drift behind; this is how it gets found.
"""
from decimal import Decimal
from itertools import groupby
from typing import Iterable, List, Optional

from pydantic import BaseModel

from ledgerflow.core.audit import AuditLog
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction


class Discrepancy(BaseModel):
    customer_id: int
    transaction_id: Optional[int] = None  # None: the customer balance itself is off
    expected: Decimal
    actual: Decimal

    @property
    def description(self) -> str:
        if self.transaction_id is None:
            return f"customer {self.customer_id} balance {self.actual} != replayed {self.expected}"
        return (
            f"transaction {self.transaction_id} running balance {self.actual} "
            f"!= replayed {self.expected}"
        )


def chronological(transactions: Iterable[Transaction]) -> List[Transaction]:
    return sorted(transactions, key=lambda t: (t.date, t.id))


def reconcile_customer(customer: Customer, transactions: Iterable[Transaction]) -> List[Discrepancy]:
    found = []
    running = Decimal("0")
    for t in chronological(t for t in transactions if t.customer_id == customer.id):
        running += t.delta
        if t.running_balance != running:
            found.append(Discrepancy(
                customer_id=customer.id,
                transaction_id=t.id,
                expected=running,
                actual=t.running_balance,
            ))
    if customer.balance != running:
        found.append(Discrepancy(customer_id=customer.id, expected=running, actual=customer.balance))
    for d in found:
        AuditLog.log_inconsistency(customer.id, d.description)
    return found


def reconcile_all(customers: Iterable[Customer], transactions: Iterable[Transaction]) -> List[Discrepancy]:
    by_customer = {}
    ordered = sorted(transactions, key=lambda t: t.customer_id)
    for customer_id, group in groupby(ordered, key=lambda t: t.customer_id):
        by_customer[customer_id] = list(group)

    found = []
    for customer in customers:
        found.extend(reconcile_customer(customer, by_customer.get(customer.id, [])))
    return found
