"""
Repositories: one typed query facade per entity over the record store.
"""

from .award_repository import AwardRepository
from .evaluation_repository import EvaluationRepository
from .registration_repository import RegistrationRepository
from .session_repository import SessionRepository
from .user_repository import UserRepository

__all__ = [
    "AwardRepository",
    "EvaluationRepository",
    "RegistrationRepository",
    "SessionRepository",
    "UserRepository",
]
