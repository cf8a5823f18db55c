"""
Business logic for presentation sessions.

``SessionService`` owns the session lifecycle and the capacity
bookkeeping.  The ``registered`` counter and the OPEN/FULL status are
maintained only here: every increment or decrement runs under the
session's lock and re-derives the status, so ``registered`` never
exceeds ``capacity`` and a session is FULL exactly when it is at
capacity.  Coordinators may still override a session to CLOSED or
REQUIRES_APPROVAL; those states are never reopened by a decrement.
"""

import datetime as dt
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..core.exceptions import CapacityError, NotFoundError, ValidationError
from ..core.locks import KeyedLocks
from ..repositories import RegistrationRepository, SessionRepository
from ..schemas.enums import SessionStatus, SessionType
from ..schemas.session import Session

logger = logging.getLogger(__name__)

# Statuses a coordinator sets directly; OPEN/FULL follow the counter.
_OVERRIDE_STATUSES = {SessionStatus.CLOSED, SessionStatus.REQUIRES_APPROVAL}


class SessionService:
    """Service for managing sessions and their capacity."""

    def __init__(
        self,
        sessions: SessionRepository,
        registrations: RegistrationRepository,
        locks: Optional[KeyedLocks] = None,
    ) -> None:
        self.sessions = sessions
        self.registrations = registrations
        self.locks = locks or KeyedLocks()

    @contextmanager
    def locked(self, *session_ids: Optional[int]) -> Iterator[None]:
        """Serialize counter writes for the given sessions."""
        with self.locks.hold(*(("session", sid) for sid in session_ids if sid is not None)):
            yield

    # Queries

    def get(self, session_id: Optional[int]) -> Optional[Session]:
        return self.sessions.find_by_id(session_id)

    def require(self, session_id: Optional[int]) -> Session:
        session = self.sessions.find_by_id(session_id)
        if session is None:
            raise NotFoundError("session", session_id)
        return session

    def list_all(self) -> List[Session]:
        return self.sessions.find_all()

    def available(self, session_type: Optional[SessionType] = None) -> List[Session]:
        return self.sessions.find_available(session_type)

    def by_date(self, date: dt.date) -> List[Session]:
        return self.sessions.find_by_date(date)

    def by_type(self, session_type: SessionType) -> List[Session]:
        return self.sessions.find_by_type(session_type)

    def by_status(self, status: SessionStatus) -> List[Session]:
        return self.sessions.find_by_status(status)

    def filter(
        self,
        date: Optional[dt.date] = None,
        session_type: Optional[SessionType] = None,
    ) -> List[Session]:
        return self.sessions.find_where(
            lambda s: (date is None or s.date == date)
            and (session_type is None or s.type == session_type)
        )

    def has_available_slots(self, session_id: Optional[int]) -> bool:
        session = self.sessions.find_by_id(session_id)
        return session is not None and session.has_available_slots()

    def has_registrations(self, session_id: int) -> bool:
        return self.registrations.count_by_session(session_id) > 0

    def registration_count(self, session_id: int) -> int:
        return self.registrations.count_by_session(session_id)

    def count(self) -> int:
        return self.sessions.count()

    def count_by_status(self, status: SessionStatus) -> int:
        return self.sessions.count_by("status", status)

    def count_by_type(self, session_type: SessionType) -> int:
        return self.sessions.count_by("type", session_type)

    # Create / update

    def create(self, session: Session) -> Session:
        """Validate and store a new session.

        The id is always allocated by the store and ``registered``
        starts at zero.  A requested CLOSED or REQUIRES_APPROVAL status
        is kept; anything else starts OPEN.
        """
        self._validate(session)
        status = session.status if session.status in _OVERRIDE_STATUSES else SessionStatus.OPEN
        new_session = session.model_copy(update={"id": None, "registered": 0, "status": status})
        created = self.sessions.save(new_session)
        logger.info(
            "Session %s created (%s, %s, capacity %s)",
            created.id, created.type.value, created.venue, created.capacity,
        )
        return created

    def update(self, session: Session) -> Session:
        """Replace the editable fields of an existing session.

        ``registered`` is engine-managed and is taken from the stored
        record, not from ``session``.  Capacity may not drop below the
        current number of registrations; OPEN/FULL is re-derived from
        the new capacity.
        """
        if session.id is None:
            raise ValidationError("id", "Session id is required")
        with self.locked(session.id):
            existing = self.require(session.id)
            self._validate(session)
            if session.capacity < existing.registered:
                raise ValidationError(
                    "capacity",
                    f"Capacity {session.capacity} is below the {existing.registered} "
                    "presentations already registered",
                )
            requested = session.status or existing.status
            updated = session.model_copy(
                update={
                    "registered": existing.registered,
                    "status": self._derive_status(requested, existing.registered, session.capacity),
                }
            )
            saved = self.sessions.save(updated)
        logger.info("Session %s updated", saved.id)
        return saved

    def change_status(self, session_id: int, status: SessionStatus) -> Session:
        """Coordinator override of a session's status.

        CLOSED and REQUIRES_APPROVAL are set as given.  OPEN on a
        session that is at capacity becomes FULL.  FULL cannot be set by
        hand on a session that still has free slots.
        """
        if status is None:
            raise ValidationError("status", "Session status is required")
        with self.locked(session_id):
            session = self.require(session_id)
            if status == SessionStatus.FULL and session.registered < session.capacity:
                raise ValidationError(
                    "status", "A session becomes FULL only when its capacity is reached"
                )
            session.status = self._derive_status(status, session.registered, session.capacity)
            saved = self.sessions.save(session)
        logger.info("Session %s status set to %s", session_id, saved.status.value)
        return saved

    # Delete

    def delete(self, session_id: int) -> bool:
        """Delete a session that no registration references.

        Returns ``False`` without deleting if registrations point at it.
        """
        return self.delete_with_confirmation(session_id, confirmed=False)

    def delete_with_confirmation(self, session_id: int, confirmed: bool) -> bool:
        """Delete a session, requiring ``confirmed`` if it has registrations.

        A confirmed delete leaves the referencing registrations with a
        dangling ``session_id``; reconciling them is up to the caller.
        """
        with self.locked(session_id):
            self.require(session_id)
            referenced = self.registration_count(session_id)
            if referenced and not confirmed:
                logger.warning(
                    "Refusing to delete session %s: %s registrations reference it",
                    session_id, referenced,
                )
                return False
            self.sessions.delete(session_id)
        if referenced:
            logger.warning(
                "Session %s deleted with %s registrations still referencing it",
                session_id, referenced,
            )
        else:
            logger.info("Session %s deleted", session_id)
        return True

    # Capacity management

    def increment_registered(self, session_id: int) -> Session:
        """Take one slot of an open session.

        The availability check and the increment happen under the same
        lock; an increment on a session that is not OPEN or has no free
        slot raises ``CapacityError``.  Reaching capacity sets FULL.
        """
        with self.locked(session_id):
            session = self.require(session_id)
            if not session.has_available_slots():
                raise CapacityError(
                    f"Session {session_id} is full or not open for registration"
                )
            session.registered += 1
            if session.registered >= session.capacity:
                session.status = SessionStatus.FULL
            saved = self.sessions.save(session)
        logger.debug("Session %s registered %s/%s", session_id, saved.registered, saved.capacity)
        return saved

    def try_increment(self, session_id: int) -> bool:
        """Like ``increment_registered`` but reports a full session as ``False``."""
        try:
            self.increment_registered(session_id)
        except CapacityError:
            return False
        return True

    def decrement_registered(self, session_id: int) -> Session:
        """Release one slot; the counter never drops below zero.

        A FULL session that falls below capacity becomes OPEN again.
        CLOSED and REQUIRES_APPROVAL sessions keep their status.
        """
        with self.locked(session_id):
            session = self.require(session_id)
            if session.registered <= 0:
                return session
            session.registered -= 1
            if session.status == SessionStatus.FULL and session.registered < session.capacity:
                session.status = SessionStatus.OPEN
            saved = self.sessions.save(session)
        logger.debug("Session %s registered %s/%s", session_id, saved.registered, saved.capacity)
        return saved

    # Helpers

    @staticmethod
    def _derive_status(status: SessionStatus, registered: int, capacity: int) -> SessionStatus:
        if status in _OVERRIDE_STATUSES:
            return status
        return SessionStatus.FULL if registered >= capacity else SessionStatus.OPEN

    @staticmethod
    def _validate(session: Session) -> None:
        if session is None:
            raise ValidationError("session", "Session cannot be empty")
        if session.date is None:
            raise ValidationError("date", "Session date is required")
        if session.start_time is None:
            raise ValidationError("start_time", "Session start time is required")
        if session.end_time is None:
            raise ValidationError("end_time", "Session end time is required")
        if session.venue is None or not session.venue.strip():
            raise ValidationError("venue", "Session venue is required")
        if session.type is None:
            raise ValidationError("type", "Session type is required")
        if session.capacity is None or session.capacity <= 0:
            raise ValidationError("capacity", "Session capacity must be positive")
        if session.start_time >= session.end_time:
            raise ValidationError("start_time", "Start time must be before end time")
