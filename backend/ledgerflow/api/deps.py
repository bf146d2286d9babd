"""FastAPI dependencies: the ledger built in the app lifespan."""
from fastapi import Request

from ledgerflow.services.ledger import Ledger


def get_ledger(request: Request) -> Ledger:
    """The ledger instance owned by the running application."""
    return request.app.state.ledger
