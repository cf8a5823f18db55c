"""
Registration endpoints for API v1.

Students submit and maintain their own registrations; coordinators
review them and place them into sessions.  Placement, capacity and
type checks are performed by ``RegistrationService``.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from seminar_review_api.app.api.v1.errors import to_http_exception
from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.core.security import get_container, require_permission, require_roles
from seminar_review_api.app.schemas.enums import RegistrationStatus, Role
from seminar_review_api.app.schemas.registration import (
    BoardAssignment,
    FilePathUpdate,
    Registration,
    RegistrationCreate,
    RegistrationUpdate,
    SessionAssignment,
)
from seminar_review_api.app.schemas.user import User
from seminar_review_api.app.services.auth_service import REGISTER, UPLOAD_FILE


router = APIRouter()

_students_and_coordinators = require_roles(Role.STUDENT, Role.COORDINATOR)
_coordinators = require_roles(Role.COORDINATOR)


def _owned(container: ServiceContainer, registration_id: int, user: User) -> Registration:
    """Load a registration and check that ``user`` may act on it.

    Coordinators may act on any registration, students only on their own.
    """
    try:
        registration = container.registrations.require(registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e
    if user.role != Role.COORDINATOR and registration.student_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your registration")
    return registration


@router.post("/", response_model=Registration, status_code=status.HTTP_201_CREATED)
def register(
    payload: RegistrationCreate,
    current_user: User = Depends(require_permission(REGISTER)),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    """Submit a registration.

    A student always registers for themselves; coordinators must name
    the ``student_id``.
    """
    data = payload.model_dump()
    if current_user.role == Role.STUDENT:
        data["student_id"] = current_user.id
    try:
        return container.registrations.register(Registration(**data))
    except ValueError as e:
        raise to_http_exception(e) from e


@router.get("/", response_model=List[Registration])
def list_registrations(
    status_filter: Optional[RegistrationStatus] = Query(None, alias="status"),
    session_id: Optional[int] = Query(None),
    unassigned: bool = Query(False, description="Only approved registrations without a session"),
    current_user: User = Depends(_students_and_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> List[Registration]:
    """List registrations.  Students only see their own."""
    service = container.registrations
    if current_user.role == Role.STUDENT:
        registrations = service.by_student(current_user.id)
    elif unassigned:
        registrations = service.unassigned()
    elif session_id is not None:
        registrations = service.by_session(session_id)
    elif status_filter is not None:
        registrations = service.by_status(status_filter)
    else:
        registrations = service.list_all()
    if status_filter is not None:
        registrations = [r for r in registrations if r.status == status_filter]
    if session_id is not None:
        registrations = [r for r in registrations if r.session_id == session_id]
    return registrations


@router.get("/{registration_id}", response_model=Registration)
def get_registration(
    registration_id: int,
    current_user: User = Depends(_students_and_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    return _owned(container, registration_id, current_user)


@router.put("/{registration_id}", response_model=Registration)
def update_registration(
    registration_id: int,
    payload: RegistrationUpdate,
    current_user: User = Depends(_students_and_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    existing = _owned(container, registration_id, current_user)
    try:
        return container.registrations.update(
            Registration(id=registration_id, student_id=existing.student_id, **payload.model_dump())
        )
    except ValueError as e:
        raise to_http_exception(e) from e


@router.post("/{registration_id}/approve", response_model=Registration)
def approve_registration(
    registration_id: int,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    try:
        return container.registrations.approve(registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.post("/{registration_id}/reject", response_model=Registration)
def reject_registration(
    registration_id: int,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    try:
        return container.registrations.reject(registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.post("/{registration_id}/cancel", response_model=Registration)
def cancel_registration(
    registration_id: int,
    current_user: User = Depends(_students_and_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    """Withdraw a registration, releasing its session slot if it holds one."""
    _owned(container, registration_id, current_user)
    try:
        return container.registrations.cancel(registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.put("/{registration_id}/session", response_model=Registration)
def assign_to_session(
    registration_id: int,
    payload: SessionAssignment,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    """Place a registration into a session, moving it if it already holds one.

    Fails with HTTP 409 if the session is full or not open, or if the
    presentation type does not match the session type.
    """
    try:
        return container.registrations.assign_to_session(registration_id, payload.session_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.delete("/{registration_id}/session", response_model=Registration)
def unassign_from_session(
    registration_id: int,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    try:
        return container.registrations.unassign_from_session(registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.put("/{registration_id}/file", response_model=Registration)
def update_file_path(
    registration_id: int,
    payload: FilePathUpdate,
    current_user: User = Depends(require_permission(UPLOAD_FILE)),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    _owned(container, registration_id, current_user)
    try:
        return container.registrations.update_file_path(registration_id, payload.file_path)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.put("/{registration_id}/board", response_model=Registration)
def assign_board(
    registration_id: int,
    payload: BoardAssignment,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Registration:
    try:
        return container.registrations.assign_board(registration_id, payload.board_id)
    except ValueError as e:
        raise to_http_exception(e) from e
