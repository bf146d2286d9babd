"""Create the ledger tables. Run on startup when DATABASE_URL is configured."""
import logging

from sqlalchemy.engine import Engine

from ledgerflow.db.base import Base
from ledgerflow.models import customer, transaction  # noqa: F401 - register models

logger = logging.getLogger(__name__)


def init_db(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    logger.info(f"Ledger tables ready on {engine.url.render_as_string(hide_password=True)}")
