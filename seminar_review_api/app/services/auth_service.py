"""
Role-based permissions.

Each role is granted a fixed set of permissions; coordinators may do
everything.  Students and evaluators inherit the guest permissions.
Identifying *who* is acting is left to the caller layer.
"""

from typing import Dict, FrozenSet, Optional

from ..schemas.enums import Role

VIEW_SCHEDULE = "VIEW_SCHEDULE"
VIEW_SESSIONS = "VIEW_SESSIONS"
REGISTER = "REGISTER"
UPLOAD_FILE = "UPLOAD_FILE"
VIEW_OWN_REGISTRATION = "VIEW_OWN_REGISTRATION"
VIEW_ASSIGNED_PRESENTATIONS = "VIEW_ASSIGNED_PRESENTATIONS"
EVALUATE = "EVALUATE"
SAVE_DRAFT = "SAVE_DRAFT"
SUBMIT_EVALUATION = "SUBMIT_EVALUATION"

_GUEST: FrozenSet[str] = frozenset({VIEW_SCHEDULE, VIEW_SESSIONS})

PERMISSIONS: Dict[Role, FrozenSet[str]] = {
    Role.GUEST: _GUEST,
    Role.STUDENT: _GUEST | {REGISTER, UPLOAD_FILE, VIEW_OWN_REGISTRATION},
    Role.EVALUATOR: _GUEST | {VIEW_ASSIGNED_PRESENTATIONS, EVALUATE, SAVE_DRAFT, SUBMIT_EVALUATION},
}


class AuthService:
    """Answers whether a role may perform an action."""

    @staticmethod
    def has_permission(role: Optional[Role], permission: Optional[str]) -> bool:
        if not permission or not permission.strip():
            return False
        if role == Role.COORDINATOR:
            return True
        return permission in PERMISSIONS.get(role or Role.GUEST, _GUEST)
