"""Transactions: the log and the only way to move a customer's balance."""
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query

from ledgerflow.api.deps import get_ledger
from ledgerflow.schemas.transaction import Transaction
from ledgerflow.services.ledger import Ledger

router = APIRouter()


@router.get("", response_model=List[Transaction])
async def list_transactions(ledger: Ledger = Depends(get_ledger)):
    """All transactions, newest first."""
    return await ledger.transactions.list()


@router.get("/recent", response_model=List[Transaction])
async def recent_transactions(
    limit: int = Query(10, description="Number of recent transactions"),
    ledger: Ledger = Depends(get_ledger),
):
    return await ledger.transactions.recent(limit)


@router.post("", response_model=Transaction, status_code=201)
async def create_transaction(data: Dict[str, Any] = Body(...), ledger: Ledger = Depends(get_ledger)):
    """
    Record a credit (customer owes more) or debit (customer paid).
    Returns the transaction stamped with the customer's new running balance.
    """
    return await ledger.transactions.create(data)


@router.get("/{transaction_id}", response_model=Transaction)
async def get_transaction(transaction_id: int, ledger: Ledger = Depends(get_ledger)):
    return await ledger.transactions.get(transaction_id)


@router.patch("/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: int,
    data: Dict[str, Any] = Body(...),
    ledger: Ledger = Depends(get_ledger),
):
    """Edit in place. Running balances and the customer balance are NOT recomputed."""
    return await ledger.transactions.update(transaction_id, data)


@router.delete("/{transaction_id}", response_model=dict)
async def delete_transaction(transaction_id: int, ledger: Ledger = Depends(get_ledger)):
    """Remove from the log. Running balances and the customer balance are NOT recomputed."""
    await ledger.transactions.delete(transaction_id)
    return {"message": f"Deleted transaction {transaction_id}", "id": transaction_id}
