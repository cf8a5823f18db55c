"""
Dependency injection container.

``ServiceContainer`` builds the repositories and services over one
record store and one lock registry, so every service in a process sees
the same state and serializes writes on the same keys.  Construct it
once per process (the FastAPI app keeps it on ``app.state``) or once
per test.
"""

import logging
from typing import Optional

from .core.config import Settings, settings as default_settings
from .core.locks import KeyedLocks
from .core.store import InMemoryRecordStore, RecordStore, SqliteRecordStore
from .repositories import (
    AwardRepository,
    EvaluationRepository,
    RegistrationRepository,
    SessionRepository,
    UserRepository,
)
from .schemas import ENTITY_MODELS
from .services.auth_service import AuthService
from .services.award_service import AwardService
from .services.evaluation_service import EvaluationService
from .services.registration_service import RegistrationService
from .services.report_service import ReportService
from .services.session_service import SessionService
from .services.user_service import UserService

logger = logging.getLogger(__name__)


def build_store(config: Optional[Settings] = None) -> RecordStore:
    """Create the record store selected by ``config.store_backend``."""
    config = config or default_settings
    if config.store_backend == "memory":
        logger.info("Using in-memory record store")
        return InMemoryRecordStore()
    if config.store_backend != "sqlite":
        raise ValueError(f"Unknown store backend: {config.store_backend}")
    logger.info("Using SQLite record store at %s", config.database_url)
    return SqliteRecordStore(ENTITY_MODELS, config.database_url)


class ServiceContainer:
    """Holds one instance of every repository and service."""

    def __init__(self, store: Optional[RecordStore] = None) -> None:
        self.store = store if store is not None else build_store()
        self.locks = KeyedLocks()

        self.session_repository = SessionRepository(self.store)
        self.registration_repository = RegistrationRepository(self.store)
        self.evaluation_repository = EvaluationRepository(self.store)
        self.award_repository = AwardRepository(self.store)
        self.user_repository = UserRepository(self.store)

        self.sessions = SessionService(
            self.session_repository, self.registration_repository, self.locks
        )
        self.registrations = RegistrationService(self.registration_repository, self.sessions)
        self.evaluations = EvaluationService(self.evaluation_repository, self.locks)
        self.awards = AwardService(
            self.registration_repository, self.evaluations, self.award_repository
        )
        self.reports = ReportService(
            self.session_repository, self.registration_repository, self.evaluation_repository
        )
        self.users = UserService(self.user_repository)
        self.auth = AuthService()
