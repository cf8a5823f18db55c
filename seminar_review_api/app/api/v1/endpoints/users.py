"""
User endpoints for API v1.

Coordinators manage the user directory.  While no coordinator exists
yet, anyone may create users so that the first coordinator can be set
up on a fresh store.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from seminar_review_api.app.api.v1.errors import to_http_exception
from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.core.security import get_container, get_current_user, require_roles
from seminar_review_api.app.schemas.enums import Role
from seminar_review_api.app.schemas.user import User, UserCreate


router = APIRouter()

_coordinators = require_roles(Role.COORDINATOR)


@router.post("/", response_model=User, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: UserCreate,
    current_user: User = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
) -> User:
    bootstrapping = container.users.count_by_role(Role.COORDINATOR) == 0
    if not bootstrapping and current_user.role != Role.COORDINATOR:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
    try:
        return container.users.create_user(User(**payload.model_dump()))
    except ValueError as e:
        raise to_http_exception(e) from e


@router.get("/", response_model=List[User])
def list_users(
    role: Optional[Role] = Query(None),
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> List[User]:
    if role is not None:
        return container.users.by_role(role)
    return container.users.list_all()


@router.get("/me", response_model=User)
def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    """Return the acting user; a guest when no ``X-User-Id`` header is sent."""
    return current_user


@router.get("/{user_id}", response_model=User)
def get_user(
    user_id: int,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> User:
    try:
        return container.users.require(user_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Response:
    try:
        container.users.delete(user_id)
    except ValueError as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)
