"""
Session endpoints for API v1.

Anyone may browse the schedule; creating, editing, re-statusing and
deleting sessions is reserved for coordinators.  Capacity and status
rules are enforced by ``SessionService``.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from seminar_review_api.app.api.v1.errors import to_http_exception
from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.core.security import get_container, require_roles
from seminar_review_api.app.schemas.enums import Role, SessionStatus, SessionType
from seminar_review_api.app.schemas.session import Session, SessionCreate, SessionStatusUpdate
from seminar_review_api.app.schemas.user import User


router = APIRouter()


@router.get("/", response_model=List[Session])
def list_sessions(
    date: Optional[dt.date] = Query(None),
    type: Optional[SessionType] = Query(None),
    status_filter: Optional[SessionStatus] = Query(None, alias="status"),
    available: bool = Query(False, description="Only sessions that still accept presentations"),
    container: ServiceContainer = Depends(get_container),
) -> List[Session]:
    """List sessions, optionally filtered by date, type or status.

    With ``available=true`` only OPEN sessions with free slots are
    returned (narrowed by ``type`` if given).
    """
    service = container.sessions
    if available:
        return service.available(type)
    sessions = service.filter(date, type)
    if status_filter is not None:
        sessions = [s for s in sessions if s.status == status_filter]
    return sessions


@router.get("/{session_id}", response_model=Session)
def get_session(
    session_id: int,
    container: ServiceContainer = Depends(get_container),
) -> Session:
    try:
        return container.sessions.require(session_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.post("/", response_model=Session, status_code=status.HTTP_201_CREATED)
def create_session(
    payload: SessionCreate,
    current_user: User = Depends(require_roles(Role.COORDINATOR)),
    container: ServiceContainer = Depends(get_container),
) -> Session:
    """Create a session.  The registered counter always starts at zero."""
    try:
        return container.sessions.create(Session(**payload.model_dump()))
    except ValueError as e:
        raise to_http_exception(e) from e


@router.put("/{session_id}", response_model=Session)
def update_session(
    session_id: int,
    payload: SessionCreate,
    current_user: User = Depends(require_roles(Role.COORDINATOR)),
    container: ServiceContainer = Depends(get_container),
) -> Session:
    try:
        return container.sessions.update(Session(id=session_id, **payload.model_dump()))
    except ValueError as e:
        raise to_http_exception(e) from e


@router.patch("/{session_id}/status", response_model=Session)
def change_session_status(
    session_id: int,
    payload: SessionStatusUpdate,
    current_user: User = Depends(require_roles(Role.COORDINATOR)),
    container: ServiceContainer = Depends(get_container),
) -> Session:
    try:
        return container.sessions.change_status(session_id, payload.status)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_session(
    session_id: int,
    confirmed: bool = Query(False, description="Delete even if registrations reference the session"),
    current_user: User = Depends(require_roles(Role.COORDINATOR)),
    container: ServiceContainer = Depends(get_container),
) -> Response:
    """Delete a session.

    A session that registrations still point at is only deleted with
    ``confirmed=true``; otherwise the request fails with HTTP 409.
    """
    try:
        deleted = container.sessions.delete_with_confirmation(session_id, confirmed)
    except ValueError as e:
        raise to_http_exception(e) from e
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Session {session_id} has registrations; pass confirmed=true to delete it",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
