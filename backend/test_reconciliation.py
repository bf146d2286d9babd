"""Reconciliation: replaying the log finds drift and never repairs it."""
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from ledgerflow.services.reconciliation import reconcile_all, reconcile_customer

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_seed_snapshot_is_consistent(seeded_ledger):
    assert await seeded_ledger.reconcile() == []


@pytest.mark.asyncio
async def test_edit_leaves_drift_that_reconciliation_reports(ledger):
    customer = await ledger.customers.create({"name": "Asha", "phone": "1"})
    first = await ledger.transactions.create({"customer_id": customer.id, "type": "credit", "amount": 100, "date": T0})
    second = await ledger.transactions.create(
        {"customer_id": customer.id, "type": "credit", "amount": 50, "date": T0 + timedelta(hours=1)}
    )

    await ledger.transactions.update(first.id, {"amount": 120})
    found = await ledger.reconcile()

    by_txn = {d.transaction_id: d for d in found}
    assert by_txn[first.id].expected == Decimal("120")
    assert by_txn[first.id].actual == Decimal("100")
    assert by_txn[second.id].expected == Decimal("170")
    assert by_txn[None].expected == Decimal("170")
    assert by_txn[None].actual == Decimal("150")
    # reporting only: nothing was changed
    assert (await ledger.customers.get(customer.id)).balance == Decimal("150")


@pytest.mark.asyncio
async def test_delete_leaves_drift(ledger):
    customer = await ledger.customers.create({"name": "Asha", "phone": "1"})
    first = await ledger.transactions.create({"customer_id": customer.id, "type": "credit", "amount": 100, "date": T0})
    await ledger.transactions.delete(first.id)

    found = await ledger.reconcile()

    assert len(found) == 1
    assert found[0].transaction_id is None
    assert "balance 100" in found[0].description


@pytest.mark.asyncio
async def test_reconcile_customer_ignores_other_customers(seeded_ledger):
    customers, transactions = await seeded_ledger.snapshot()
    rajesh = next(c for c in customers if c.id == 1)

    assert reconcile_customer(rajesh, transactions) == []
    assert reconcile_all([], transactions) == []
