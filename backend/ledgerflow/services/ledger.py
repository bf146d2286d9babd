"""
Ledger container: builds the stores and the services wired to them.

Nothing is created at import time. The API lifespan (or a test, or a
script) constructs a Ledger, optionally seeds it, and closes it when done.
"""
import json
import logging
from pathlib import Path
from typing import List, Optional, Tuple

from ledgerflow.core.config import Settings
from ledgerflow.repositories.base import CustomerRepository, TransactionRepository
from ledgerflow.repositories.memory import InMemoryCustomerRepository, InMemoryTransactionRepository
from ledgerflow.schemas.business import BusinessProfile
from ledgerflow.schemas.customer import Customer
from ledgerflow.schemas.transaction import Transaction
from ledgerflow.services.business_service import BusinessAggregator
from ledgerflow.services.customer_service import CustomerService
from ledgerflow.services.pdf_service import PdfReportRenderer
from ledgerflow.services.reconciliation import Discrepancy, reconcile_all
from ledgerflow.services.report_service import ReportGenerator
from ledgerflow.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)


def load_seed(seed_dir: Path) -> Tuple[List[Customer], List[Transaction]]:
    """Read the static snapshot (customers.json, transactions.json). Missing files mean no records."""
    seed_dir = Path(seed_dir)
    customers, transactions = [], []
    customers_file = seed_dir / "customers.json"
    transactions_file = seed_dir / "transactions.json"
    if customers_file.exists():
        customers = [Customer.model_validate(c) for c in json.loads(customers_file.read_text(encoding="utf-8"))]
    if transactions_file.exists():
        transactions = [
            Transaction.model_validate(t) for t in json.loads(transactions_file.read_text(encoding="utf-8"))
        ]
    logger.info(f"Loaded seed snapshot: {len(customers)} customers, {len(transactions)} transactions")
    return customers, transactions


class Ledger:
    def __init__(
        self,
        customer_repository: CustomerRepository,
        transaction_repository: TransactionRepository,
        report_dir: Path,
        profile: Optional[BusinessProfile] = None,
        latency: float = 0.0,
        report_latency: float = 0.0,
        engine=None,
    ):
        self._customer_repository = customer_repository
        self._engine = engine
        self._transaction_repository = transaction_repository
        profile = profile or BusinessProfile()

        self.customers = CustomerService(customer_repository, latency=latency)
        self.transactions = TransactionService(transaction_repository, self.customers, latency=latency)
        self.business = BusinessAggregator(self.customers, profile=profile)
        self.reports = ReportGenerator(
            PdfReportRenderer(),
            output_dir=report_dir,
            profile=self.business.get_profile,
            latency=report_latency,
        )

    @classmethod
    def in_memory(
        cls,
        report_dir: Path,
        customers: List[Customer] = (),
        transactions: List[Transaction] = (),
        **kwargs,
    ) -> "Ledger":
        return cls(
            InMemoryCustomerRepository(customers),
            InMemoryTransactionRepository(transactions),
            report_dir=report_dir,
            **kwargs,
        )

    async def snapshot(self) -> Tuple[List[Customer], List[Transaction]]:
        """Copies of both stores, transactions newest first."""
        customers = await self.customers.list()
        transactions = await self.transactions.list()
        return customers, transactions

    async def reconcile(self) -> List[Discrepancy]:
        customers, transactions = await self.snapshot()
        return reconcile_all(customers, transactions)

    def close(self) -> None:
        self._customer_repository.close()
        self._transaction_repository.close()
        if self._engine is not None:
            self._engine.dispose()


def build_ledger(settings: Settings) -> Ledger:
    """Construct the ledger described by the settings: in-memory by default, SQL when DATABASE_URL is set."""
    profile = BusinessProfile(name=settings.BUSINESS_NAME)
    seed = load_seed(settings.SEED_DIR) if settings.SEED_DATA else ([], [])

    if not settings.DATABASE_URL:
        logger.info("Using in-memory ledger (data does not survive restart)")
        return Ledger.in_memory(
            report_dir=settings.REPORT_OUTPUT_DIR,
            customers=seed[0],
            transactions=seed[1],
            profile=profile,
            latency=settings.simulated_latency,
        )

    from ledgerflow.db.init_db import init_db
    from ledgerflow.db.session import build_engine, build_session_factory
    from ledgerflow.repositories.sql import SqlCustomerRepository, SqlTransactionRepository

    engine = build_engine(settings.DATABASE_URL)
    init_db(engine)
    session_factory = build_session_factory(engine)
    customer_repo = SqlCustomerRepository(session_factory)
    transaction_repo = SqlTransactionRepository(session_factory)
    if customer_repo.is_empty() and transaction_repo.is_empty():
        customer_repo.seed(seed[0])
        transaction_repo.seed(seed[1])

    return Ledger(
        customer_repo,
        transaction_repo,
        report_dir=settings.REPORT_OUTPUT_DIR,
        profile=profile,
        latency=settings.simulated_latency,
        engine=engine,
    )
