from ledgerflow.models.customer import CustomerRow
from ledgerflow.models.transaction import TransactionRow

__all__ = ["CustomerRow", "TransactionRow"]
