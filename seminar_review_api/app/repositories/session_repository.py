import datetime as dt
from typing import List, Optional

from ..schemas import SESSION
from ..schemas.enums import SessionStatus, SessionType
from ..schemas.session import Session
from .base import BaseRepository


class SessionRepository(BaseRepository[Session]):
    entity_type = SESSION
    model = Session

    def find_by_date(self, date: Optional[dt.date]) -> List[Session]:
        if date is None:
            return []
        return self.find_by("date", date)

    def find_by_type(self, session_type: Optional[SessionType]) -> List[Session]:
        if session_type is None:
            return []
        return self.find_by("type", session_type)

    def find_by_status(self, status: Optional[SessionStatus]) -> List[Session]:
        if status is None:
            return []
        return self.find_by("status", status)

    def find_available(self, session_type: Optional[SessionType] = None) -> List[Session]:
        """Open sessions with at least one free slot, optionally of one type."""
        return self.find_where(
            lambda s: s.has_available_slots() and (session_type is None or s.type == session_type)
        )
