"""
Enumerations shared by the entity schemas.

Members are ``str`` enums so they serialise to their names in JSON
documents and API payloads.
"""

from enum import Enum


class SessionType(str, Enum):
    ORAL = "ORAL"
    POSTER = "POSTER"


class SessionStatus(str, Enum):
    OPEN = "OPEN"
    FULL = "FULL"
    CLOSED = "CLOSED"
    # Registration requires coordinator approval
    REQUIRES_APPROVAL = "REQUIRES_APPROVAL"


class RegistrationStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class AwardType(str, Enum):
    BEST_ORAL = "BEST_ORAL"
    BEST_POSTER = "BEST_POSTER"
    PEOPLES_CHOICE = "PEOPLES_CHOICE"


class Role(str, Enum):
    GUEST = "GUEST"
    STUDENT = "STUDENT"
    EVALUATOR = "EVALUATOR"
    COORDINATOR = "COORDINATOR"
