"""
Pydantic schema definitions for entities and API payloads.

Each domain (sessions, registrations, evaluations, awards, users)
defines its own models.  ``ENTITY_MODELS`` maps the record store's
entity type names to the stored model classes.
"""

from .award import Award
from .enums import AwardType, RegistrationStatus, Role, SessionStatus, SessionType
from .evaluation import Evaluation, ScoreSummary
from .registration import Registration
from .session import Session
from .user import User

SESSION = "session"
REGISTRATION = "registration"
EVALUATION = "evaluation"
AWARD = "award"
USER = "user"

ENTITY_MODELS = {
    SESSION: Session,
    REGISTRATION: Registration,
    EVALUATION: Evaluation,
    AWARD: Award,
    USER: User,
}

__all__ = [
    "Award",
    "AwardType",
    "ENTITY_MODELS",
    "Evaluation",
    "Registration",
    "RegistrationStatus",
    "Role",
    "ScoreSummary",
    "Session",
    "SessionStatus",
    "SessionType",
    "User",
]
