"""
Report endpoints for API v1.

Read-only statistics for coordinators.  The data is returned as JSON;
rendering it as CSV or printable reports is left to clients.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.core.security import get_container, require_roles
from seminar_review_api.app.schemas.enums import Role
from seminar_review_api.app.schemas.user import User


router = APIRouter(dependencies=[Depends(require_roles(Role.COORDINATOR))])


@router.get("/registrations")
def registration_statistics(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    return container.reports.registration_statistics()


@router.get("/evaluations")
def evaluation_summary(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    return container.reports.evaluation_summary()


@router.get("/sessions")
def session_attendance(container: ServiceContainer = Depends(get_container)) -> Dict[str, Any]:
    return container.reports.session_attendance()
