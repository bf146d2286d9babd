"""
LedgerFlow Backend: cash-book ledger for a small business.

ARCHITECTURE:
- Customers: running balance per customer (positive = will give, negative = will get)
- Transactions: credit/debit log; recording one is the only way a balance moves
- Business: totals folded from the customer snapshot
- Reports: outstanding / summary / transaction history as PDF

STORAGE: in-memory by default, seeded from a static snapshot at startup.
Set DATABASE_URL to keep the ledger in a SQL database instead.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ledgerflow.api.routes import business, customers, reports, transactions
from ledgerflow.core.config import settings
from ledgerflow.core.exceptions import BusinessError, LedgerError
from ledgerflow.services.ledger import Ledger, build_ledger

logger = logging.getLogger(__name__)


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(ledger: Ledger | None = None) -> FastAPI:
    """
    Build the API around a ledger.

    Pass a ledger to serve an existing instance (tests do this); otherwise one
    is built from settings at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = ledger is None
        if owned:
            configure_logging()
            logger.info("Building ledger...")
            app.state.ledger = build_ledger(settings)
        else:
            app.state.ledger = ledger
        logger.info("Ledger ready")

        yield

        if owned:
            app.state.ledger.close()
            logger.info("Ledger closed")

    app = FastAPI(
        title="LedgerFlow API",
        description="Customer balances, credit/debit transactions and reports for a small business.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Restrict CORS to specific methods and headers (not wildcards)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=[
            "Content-Type",
            "Accept",
            "Origin",
        ],
        max_age=600,  # Cache preflight for 10 minutes
        expose_headers=["Content-Type", "Content-Disposition"],
    )

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        http_exc = BusinessError.from_ledger_error(exc)
        return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})

    app.include_router(customers.router, prefix="/customers", tags=["customers"])
    app.include_router(transactions.router, prefix="/transactions", tags=["transactions"])
    app.include_router(business.router, prefix="/business", tags=["business"])
    app.include_router(reports.router, prefix="/reports", tags=["reports"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
