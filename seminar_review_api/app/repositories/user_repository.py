from typing import List, Optional

from ..schemas import USER
from ..schemas.enums import Role
from ..schemas.user import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    entity_type = USER
    model = User

    def find_by_username(self, username: str) -> Optional[User]:
        return self.find_one_by("username", username)

    def find_by_role(self, role: Role) -> List[User]:
        return self.find_by("role", role)

    def count_by_role(self, role: Role) -> int:
        return self.count_by("role", role)

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None
