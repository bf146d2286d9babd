"""Display formatting collaborator. The ledger core never formats money itself."""
from datetime import datetime
from decimal import Decimal

CURRENCY_SYMBOL = "₹"


def format_currency(amount: Decimal | float | int | None) -> str:
    if amount is None:
        return "-"
    return f"{CURRENCY_SYMBOL} {Decimal(str(amount)):,.2f}"


def format_date(value: datetime) -> str:
    return value.strftime("%d %b, %Y")
