"""Business: profile, dashboard totals and ledger reconciliation."""
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from ledgerflow.api.deps import get_ledger
from ledgerflow.schemas.business import BusinessData, BusinessProfile, BusinessTotals
from ledgerflow.services.ledger import Ledger

router = APIRouter()


@router.get("", response_model=BusinessData)
async def get_business(ledger: Ledger = Depends(get_ledger)):
    """Profile plus totals computed from the current customers."""
    return await ledger.business.get_business_data()


@router.put("", response_model=BusinessProfile)
async def update_business(data: Dict[str, Any] = Body(...), ledger: Ledger = Depends(get_ledger)):
    """Update profile fields (name, owner, phone, address)."""
    return ledger.business.update_business_data(data)


@router.get("/totals", response_model=dict)
async def get_totals(ledger: Ledger = Depends(get_ledger)):
    customers = await ledger.customers.list()
    totals: BusinessTotals = ledger.business.get_totals(customers)
    return {
        "total_to_receive": str(totals.total_to_receive),
        "total_to_pay": str(totals.total_to_pay),
        "net_balance": str(totals.net_balance),
        "customer_count": totals.customer_count,
        "outstanding_count": ledger.business.outstanding_count(customers),
    }


@router.get("/reconcile", response_model=dict)
async def reconcile(ledger: Ledger = Depends(get_ledger)):
    """Check every balance and running balance against a replay of the log. Read-only."""
    discrepancies = await ledger.reconcile()
    return {
        "consistent": not discrepancies,
        "discrepancies": [
            {
                "customer_id": d.customer_id,
                "transaction_id": d.transaction_id,
                "expected": str(d.expected),
                "actual": str(d.actual),
                "description": d.description,
            }
            for d in discrepancies
        ],
    }
