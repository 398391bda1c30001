"""Application configuration, read from the .env file and the environment."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# .env lives in the project root
_env_path = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(_env_path)

# SQLite database file is created under backend/ unless overridden
DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    "sqlite:///" + str(Path(__file__).resolve().parents[1] / "tickets.db"),
)

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# Load reference categories, users and sample tickets on startup
SEED_ON_STARTUP: bool = os.getenv("SEED_ON_STARTUP", "false").lower() in {"1", "true", "yes"}

# Ticket list paging bounds
DEFAULT_PAGE_SIZE: int = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
MAX_PAGE_SIZE: int = int(os.getenv("MAX_PAGE_SIZE", "100"))
