"""
Business logic for users.

Users of every role are one record type; this service validates and
stores them.  Credentials are not handled here.
"""

import logging
from typing import List, Optional

from ..core.exceptions import NotFoundError, ValidationError
from ..repositories import UserRepository
from ..schemas.enums import Role
from ..schemas.user import User


class UserService:
    """Service for managing students, evaluators and coordinators."""

    def __init__(self, users: UserRepository) -> None:
        self.users = users

    def get(self, user_id: Optional[int]) -> Optional[User]:
        return self.users.find_by_id(user_id)

    def require(self, user_id: Optional[int]) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("user", user_id)
        return user

    def by_username(self, username: str) -> Optional[User]:
        return self.users.find_by_username(username)

    def list_all(self) -> List[User]:
        return self.users.find_all()

    def by_role(self, role: Role) -> List[User]:
        return self.users.find_by_role(role)

    def count_by_role(self, role: Role) -> int:
        return self.users.count_by_role(role)

    def create_user(self, user: User) -> User:
        """Validate and store a new user; usernames are unique."""
        logger = logging.getLogger(__name__)
        if user.username is None or not user.username.strip():
            raise ValidationError("username", "Username is required")
        if user.name is None or not user.name.strip():
            raise ValidationError("name", "Name is required")
        if user.role is None:
            raise ValidationError("role", "Role is required")
        username = user.username.strip()
        if self.users.exists_by_username(username):
            raise ValidationError("username", f"Username {username} is already taken")
        created = self.users.save(user.model_copy(update={"id": None, "username": username}))
        logger.info("User %s created with role %s", created.username, created.role.value)
        return created

    def delete(self, user_id: int) -> bool:
        self.require(user_id)
        return self.users.delete(user_id)
