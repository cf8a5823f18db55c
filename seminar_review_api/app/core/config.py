"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for all fields so the
engine runs out of the box against a local SQLite file.  Override
them via environment variables before importing this module.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Seminar Review API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE") or None

    # Path to the SQLite database backing the record store.  Relative
    # paths are resolved against the project root by the ``db`` module.
    database_url: str = os.getenv("DATABASE_URL", "seminar_review.db")

    # ``sqlite`` persists every committed mutation; ``memory`` keeps
    # records for the lifetime of the process only.
    store_backend: str = os.getenv("STORE_BACKEND", "sqlite").lower()


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.
settings = Settings()
