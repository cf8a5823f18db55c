"""
Request dependencies for identifying the acting user and gating roles.

The acting user is identified by the ``X-User-Id`` header and looked
up in the user store.  Requests without the header act as a guest.
Authentication of that identity (passwords, tokens) happens in front
of this API and is not implemented here.
"""

from typing import Callable, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from ..container import ServiceContainer
from ..schemas.enums import Role
from ..schemas.user import User

GUEST_USER = User(id=None, username="guest", name="Guest", role=Role.GUEST)


def get_container(request: Request) -> ServiceContainer:
    """Dependency returning the process-wide service container."""
    return request.app.state.container


def get_current_user(
    x_user_id: Optional[int] = Header(None),
    container: ServiceContainer = Depends(get_container),
) -> User:
    """Dependency that resolves the acting user.

    Raises HTTP 401 if the header names a user that does not exist.
    """
    if x_user_id is None:
        return GUEST_USER
    user = container.users.get(x_user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Unknown user {x_user_id}",
        )
    return user


def require_roles(*roles: Role) -> Callable[..., User]:
    """Dependency factory to enforce that the acting user has one of ``roles``.

    Use it in endpoints via ``Depends(require_roles(Role.COORDINATOR))``.
    A user outside ``roles`` gets HTTP 403.
    """

    def _role_dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _role_dependency


def require_permission(permission: str) -> Callable[..., User]:
    """Dependency factory checking ``permission`` against the role table.

    Unlike ``require_roles`` the allowed roles come from
    ``AuthService.PERMISSIONS``; coordinators always pass.
    """

    def _permission_dependency(
        current_user: User = Depends(get_current_user),
        container: ServiceContainer = Depends(get_container),
    ) -> User:
        if not container.auth.has_permission(current_user.role, permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission {permission}",
            )
        return current_user

    return _permission_dependency
