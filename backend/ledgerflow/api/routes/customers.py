"""Customers: CRUD, search and per-customer transaction history."""
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query

from ledgerflow.api.deps import get_ledger
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction
from ledgerflow.services.ledger import Ledger

router = APIRouter()


@router.get("", response_model=List[Customer])
async def list_customers(
    search: str | None = Query(None, description="Match on name (case-insensitive) or phone"),
    ledger: Ledger = Depends(get_ledger),
):
    if search:
        return await ledger.customers.search(search)
    return await ledger.customers.list()


@router.post("", response_model=Customer, status_code=201)
async def create_customer(data: Dict[str, Any] = Body(...), ledger: Ledger = Depends(get_ledger)):
    """New customers always start settled (balance 0)."""
    return await ledger.customers.create(data)


@router.get("/{customer_id}", response_model=Customer)
async def get_customer(customer_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.customers.get(customer_id)


@router.patch("/{customer_id}", response_model=Customer)
async def update_customer(customer_id: int, data: Dict[str, Any] = Body(...), ledger: Ledger = Depends(get_ledger)):
    """Update name/phone. Balance cannot be set here."""
    return await ledger.customers.update(customer_id, data)


@router.delete("/{customer_id}", response_model=dict)
async def delete_customer(customer_id: int, ledger: Ledger = Depends(get_ledger)):
    """Delete the customer. Their transactions stay in the log."""
    await ledger.customers.delete(customer_id)
    return {"message": f"Deleted customer {customer_id}", "id": customer_id}


@router.get("/{customer_id}/transactions", response_model=List[Transaction])
async def list_customer_transactions(customer_id: int, ledger: Ledger = Depends(get_ledger)):
    """Customer detail view: 404 for an unknown customer, newest transaction first."""
    await ledger.customers.get(customer_id)
    return await ledger.transactions.list_for_customer(customer_id)
