"""Application configuration.

Environment variables override all defaults.
Nothing here is required: with no environment at all the ledger runs
in-memory, seeded from the bundled snapshot.
"""

import os
from pathlib import Path
from typing import List


_BACKEND_DIR = Path(__file__).resolve().parents[2]
_PACKAGE_DIR = Path(__file__).resolve().parents[1]

# Load .env for local development (safe no-op if not installed)
try:
    from dotenv import load_dotenv  # type: ignore

    load_dotenv(dotenv_path=_BACKEND_DIR / ".env", override=False)
except ImportError:
    pass


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"

    # Storage: empty DATABASE_URL keeps everything in memory for the process lifetime
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    SEED_DATA: bool = _env_bool("SEED_DATA", True)
    SEED_DIR: Path = Path(os.getenv("SEED_DIR", str(_PACKAGE_DIR / "data")))

    # Reports
    REPORT_OUTPUT_DIR: Path = Path(os.getenv("REPORT_OUTPUT_DIR", str(_BACKEND_DIR / "reports")))

    # Simulated I/O latency for store operations (milliseconds)
    LEDGER_SIMULATED_LATENCY_MS: int = int(os.getenv("LEDGER_SIMULATED_LATENCY_MS", "0"))

    # Business profile defaults
    BUSINESS_NAME: str = os.getenv("BUSINESS_NAME", "LedgerFlow")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "DEBUG" if DEBUG else "INFO")

    # CORS (specific origins only, no wildcards)
    CORS_ORIGINS: List[str] = [
        o.strip()
        for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
        if o.strip()
    ]

    @property
    def simulated_latency(self) -> float:
        return max(self.LEDGER_SIMULATED_LATENCY_MS, 0) / 1000.0


settings = Settings()
