"""BusinessAggregator: totals over a customer snapshot and the business profile."""
import random
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledgerflow.core.exceptions import ValidationError
from ledgerflow.schemas.customer import Customer
from ledgerflow.services.business_service import BusinessAggregator

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_customer(customer_id: int, balance) -> Customer:
    return Customer(
        id=customer_id,
        name=f"Customer {customer_id}",
        phone=str(9000000000 + customer_id),
        balance=Decimal(str(balance)),
        created_at=NOW,
        last_transaction=NOW,
    )


def test_totals_split_positive_and_negative_balances():
    totals = BusinessAggregator.get_totals([make_customer(1, 500), make_customer(2, -200)])

    assert totals.total_to_receive == Decimal("500")
    assert totals.total_to_pay == Decimal("200")
    assert totals.net_balance == Decimal("300")
    assert totals.customer_count == 2


def test_totals_of_no_customers():
    totals = BusinessAggregator.get_totals([])
    assert (totals.total_to_receive, totals.total_to_pay, totals.customer_count) == (0, 0, 0)


def test_settled_customers_count_but_add_nothing():
    customers = [make_customer(1, 0), make_customer(2, "12.50"), make_customer(3, 0)]

    totals = BusinessAggregator.get_totals(customers)

    assert totals.customer_count == 3
    assert totals.total_to_receive == Decimal("12.50")
    assert totals.total_to_pay == 0
    assert BusinessAggregator.outstanding_count(customers) == 1


def test_net_balance_equals_sum_of_balances():
    rng = random.Random(7)
    for _ in range(50):
        customers = [
            make_customer(i, Decimal(rng.randint(-100000, 100000)) / 100)
            for i in range(1, rng.randint(1, 30))
        ]
        totals = BusinessAggregator.get_totals(customers)
        assert totals.total_to_receive - totals.total_to_pay == sum((c.balance for c in customers), Decimal("0"))


@pytest.mark.asyncio
async def test_business_data_combines_profile_and_totals(seeded_ledger):
    data = await seeded_ledger.business.get_business_data()

    assert data.name == "LedgerFlow"
    assert data.customer_count == 4
    assert data.total_to_receive == Decimal("1350.50")
    assert data.total_to_pay == Decimal("800")
    assert data.net_balance == Decimal("550.50")


@pytest.mark.asyncio
async def test_business_data_follows_new_transactions(ledger):
    customer = await ledger.customers.create({"name": "Asha", "phone": "1"})
    await ledger.transactions.create({"customer_id": customer.id, "type": "credit", "amount": 40})

    data = await ledger.business.get_business_data()

    assert data.total_to_receive == Decimal("40")


def test_update_profile_merges_fields(ledger):
    ledger.business.update_business_data({"owner": "Ravi", "address": "MG Road"})
    profile = ledger.business.update_business_data({"name": "Ravi Stores"})

    assert profile.name == "Ravi Stores"
    assert profile.owner == "Ravi"
    assert profile.address == "MG Road"


def test_update_profile_rejects_unknown_fields(ledger):
    with pytest.raises(ValidationError):
        ledger.business.update_business_data({"balance": 10})
