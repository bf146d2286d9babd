"""
Audit logging for ledger mutations.

Every change to a customer record, a balance or the transaction log is
written as one JSON line on the "audit" logger, so a ledger can be
reconstructed or investigated from the log alone.

Amounts are logged as strings to keep Decimal precision.
"""
import logging
import json
from datetime import datetime
from decimal import Decimal
from typing import Any, Optional, Dict

from ledgerflow.utils.dates import utcnow

# Separate logger for audit events (can be shipped to centralized logging)
audit_logger = logging.getLogger("audit")


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


class AuditLog:
    """Central audit logging for ledger events."""

    @staticmethod
    def log_action(
        action: str,  # "create", "update", "delete"
        resource_type: str,  # "customer", "transaction"
        resource_id: int,
        changes: Optional[Dict[str, Any]] = None,
    ):
        """
        Log a record-level mutation.

        Usage:
            AuditLog.log_action("create", "customer", 7, changes={"name": "Asha"})
            AuditLog.log_action("delete", "transaction", 42)
        """
        log_entry = {
            "timestamp": utcnow().isoformat(),
            "event_type": f"{resource_type}.{action}",
            "resource_id": resource_id,
        }

        if changes:
            log_entry["changes"] = _jsonable(changes)

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_balance_change(
        customer_id: int,
        old_balance: Decimal,
        new_balance: Decimal,
        transaction_id: Optional[int] = None,
    ):
        """
        Log a balance mutation applied by the transaction recorder.

        Usage:
            AuditLog.log_balance_change(7, Decimal("0"), Decimal("500"), transaction_id=12)
        """
        log_entry = {
            "timestamp": utcnow().isoformat(),
            "event_type": "customer.balance",
            "customer_id": customer_id,
            "old_balance": str(old_balance),
            "new_balance": str(new_balance),
        }

        if transaction_id is not None:
            log_entry["transaction_id"] = transaction_id

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_report(kind: str, file_name: str, row_count: int):
        log_entry = {
            "timestamp": utcnow().isoformat(),
            "event_type": "report.generated",
            "kind": kind,
            "file_name": file_name,
            "rows": row_count,
        }

        audit_logger.info(json.dumps(log_entry))

    @staticmethod
    def log_inconsistency(customer_id: int, details: str):
        """
        Log a ledger inconsistency (balance or running-balance drift).
        """
        log_entry = {
            "timestamp": utcnow().isoformat(),
            "event_severity": "WARNING",
            "event_type": "ledger.inconsistency",
            "customer_id": customer_id,
            "details": details,
        }

        audit_logger.warning(json.dumps(log_entry))
