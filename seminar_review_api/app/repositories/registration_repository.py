from typing import List, Optional

from ..schemas import REGISTRATION
from ..schemas.enums import RegistrationStatus
from ..schemas.registration import Registration
from .base import BaseRepository


class RegistrationRepository(BaseRepository[Registration]):
    entity_type = REGISTRATION
    model = Registration

    def find_by_student(self, student_id: Optional[int]) -> List[Registration]:
        return self.find_by("student_id", student_id)

    def find_by_session(self, session_id: Optional[int]) -> List[Registration]:
        if session_id is None:
            return []
        return self.find_by("session_id", session_id)

    def find_by_status(self, status: RegistrationStatus) -> List[Registration]:
        return self.find_by("status", status)

    def find_unassigned(self) -> List[Registration]:
        """Approved registrations still waiting for a session."""
        return self.find_where(
            lambda r: r.status == RegistrationStatus.APPROVED and r.session_id is None
        )

    def find_by_board(self, session_id: int, board_id: str) -> List[Registration]:
        return self.find_where(lambda r: r.session_id == session_id and r.board_id == board_id)

    def count_by_session(self, session_id: int) -> int:
        return self.count_by("session_id", session_id)

    def count_by_status(self, status: RegistrationStatus) -> int:
        return self.count_by("status", status)

    def exists_by_student(self, student_id: int) -> bool:
        return self.count_by("student_id", student_id) > 0
