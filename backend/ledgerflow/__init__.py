"""LedgerFlow: customer balances, credit/debit transactions and reports for a small business."""

__version__ = "0.1.0"
