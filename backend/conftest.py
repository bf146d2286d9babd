"""
pytest fixtures shared by the ledger tests.

Every test gets its own Ledger: no state leaks between tests.
"""
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from ledgerflow.core.config import settings
from ledgerflow.main import create_app
from ledgerflow.services.ledger import Ledger, load_seed


@pytest.fixture
def report_dir(tmp_path: Path) -> Path:
    return tmp_path / "reports"


@pytest.fixture
def ledger(report_dir: Path) -> Ledger:
    """Empty in-memory ledger."""
    return Ledger.in_memory(report_dir=report_dir)


@pytest.fixture
def seeded_ledger(report_dir: Path) -> Ledger:
    """In-memory ledger seeded from the bundled snapshot."""
    customers, transactions = load_seed(settings.SEED_DIR)
    return Ledger.in_memory(report_dir=report_dir, customers=customers, transactions=transactions)


@pytest.fixture
def client(ledger: Ledger):
    with TestClient(create_app(ledger)) as c:
        yield c


@pytest.fixture
def seeded_client(seeded_ledger: Ledger):
    with TestClient(create_app(seeded_ledger)) as c:
        yield c
