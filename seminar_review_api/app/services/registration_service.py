"""
Business logic for presentation registrations.

``RegistrationService`` handles the registration lifecycle (register,
approve, reject, cancel) and session assignment.  Every change of a
registration's ``session_id`` goes through ``SessionService`` so that
a session's ``registered`` count always equals the number of
registrations pointing at it.

Assigning a PENDING registration to a session approves it as a side
effect; approval and rejection on their own never touch session
counts.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from ..core.exceptions import CapacityError, NotFoundError, TypeMismatchError, ValidationError
from ..repositories import RegistrationRepository
from ..schemas.enums import RegistrationStatus, SessionType
from ..schemas.registration import Registration
from .session_service import SessionService

logger = logging.getLogger(__name__)

# Fields a student or coordinator may edit through ``update``.  Boards
# go through ``assign_board`` so their per-session uniqueness holds.
_EDITABLE_FIELDS = (
    "research_title",
    "abstract_text",
    "supervisor_name",
    "presentation_type",
    "file_path",
)


class RegistrationService:
    """Service for managing registrations and their session assignment."""

    def __init__(self, registrations: RegistrationRepository, session_service: SessionService) -> None:
        self.registrations = registrations
        self.session_service = session_service

    # Queries

    def get(self, registration_id: Optional[int]) -> Optional[Registration]:
        return self.registrations.find_by_id(registration_id)

    def require(self, registration_id: Optional[int]) -> Registration:
        registration = self.registrations.find_by_id(registration_id)
        if registration is None:
            raise NotFoundError("registration", registration_id)
        return registration

    def list_all(self) -> List[Registration]:
        return self.registrations.find_all()

    def by_student(self, student_id: int) -> List[Registration]:
        return self.registrations.find_by_student(student_id)

    def by_session(self, session_id: int) -> List[Registration]:
        return self.registrations.find_by_session(session_id)

    def by_status(self, status: RegistrationStatus) -> List[Registration]:
        return self.registrations.find_by_status(status)

    def pending(self) -> List[Registration]:
        return self.by_status(RegistrationStatus.PENDING)

    def approved(self) -> List[Registration]:
        return self.by_status(RegistrationStatus.APPROVED)

    def unassigned(self) -> List[Registration]:
        return self.registrations.find_unassigned()

    def count(self) -> int:
        return self.registrations.count()

    def count_by_status(self, status: RegistrationStatus) -> int:
        return self.registrations.count_by_status(status)

    def has_student_registered(self, student_id: int) -> bool:
        return self.registrations.exists_by_student(student_id)

    # Lifecycle

    def register(self, registration: Registration) -> Registration:
        """Create a PENDING registration.

        Client-supplied ``id``, ``session_id``, ``board_id``, ``status``
        and ``created_at`` are discarded: a new registration is always
        unassigned, pending and stamped now.
        """
        self._validate(registration)
        new_registration = registration.model_copy(
            update={
                "id": None,
                "session_id": None,
                "board_id": None,
                "status": RegistrationStatus.PENDING,
                "created_at": datetime.now(),
            }
        )
        created = self.registrations.save(new_registration)
        logger.info(
            "Registration %s created for student %s (%s)",
            created.id, created.student_id, created.presentation_type.value,
        )
        return created

    def update(self, registration: Registration) -> Registration:
        """Edit the descriptive fields of a registration.

        Session, board, status, student and creation time are kept from
        the stored record.  Changing the presentation type of a registration
        that holds a session of the other type fails with
        ``TypeMismatchError``.
        """
        if registration.id is None:
            raise ValidationError("id", "Registration id is required")
        with self._locked(registration.id):
            existing = self.require(registration.id)
            candidate = existing.model_copy(
                update={name: getattr(registration, name) for name in _EDITABLE_FIELDS}
            )
            self._validate(candidate)
            if candidate.session_id is not None:
                session = self.session_service.get(candidate.session_id)
                if session is not None and session.type != candidate.presentation_type:
                    raise TypeMismatchError(
                        f"Registration {existing.id} holds a {session.type.value} session and "
                        f"cannot become {candidate.presentation_type.value}"
                    )
            saved = self.registrations.save(candidate)
        logger.info("Registration %s updated", saved.id)
        return saved

    def approve(self, registration_id: int) -> Registration:
        return self._set_status(registration_id, RegistrationStatus.APPROVED)

    def reject(self, registration_id: int) -> Registration:
        return self._set_status(registration_id, RegistrationStatus.REJECTED)

    def cancel(self, registration_id: int) -> Registration:
        """Cancel a registration, releasing its session slot if it held one."""
        with self._locked(registration_id):
            registration = self.require(registration_id)
            held = registration.session_id
            with self.session_service.locked(held):
                self._release(registration)
                registration.status = RegistrationStatus.CANCELLED
                saved = self.registrations.save(registration)
        logger.info("Registration %s cancelled (released session %s)", registration_id, held)
        return saved

    # Session assignment

    def assign_to_session(self, registration_id: int, session_id: int) -> Registration:
        """Assign a registration to a session.

        Fails with ``NotFoundError`` for unknown ids, ``CapacityError``
        if the session is not OPEN or has no free slot, and
        ``TypeMismatchError`` if the presentation types differ.  A
        registration moving from another session releases that slot
        first.  A PENDING registration is approved by the assignment.
        """
        with self._locked(registration_id):
            registration = self.require(registration_id)
            previous = registration.session_id
            with self.session_service.locked(previous, session_id):
                session = self.session_service.require(session_id)

                if previous == session_id:
                    # Already holds this slot; no count change.
                    return self._approve_if_pending(registration)

                if registration.status in (RegistrationStatus.CANCELLED, RegistrationStatus.REJECTED):
                    raise ValidationError(
                        "status",
                        f"A {registration.status.value.lower()} registration cannot be assigned",
                    )
                if not session.has_available_slots():
                    logger.warning(
                        "Assignment of registration %s rejected: session %s is %s (%s/%s)",
                        registration_id, session_id, session.status.value,
                        session.registered, session.capacity,
                    )
                    raise CapacityError(f"Session {session_id} is full or not open for registration")
                if registration.presentation_type != session.type:
                    raise TypeMismatchError(
                        f"Presentation type {registration.presentation_type.value} does not match "
                        f"session type {session.type.value}"
                    )

                self._release(registration)
                self.session_service.increment_registered(session_id)
                registration.session_id = session_id
                saved = self._approve_if_pending(registration)
        logger.info(
            "Registration %s assigned to session %s (previously %s)",
            registration_id, session_id, previous,
        )
        return saved

    def unassign_from_session(self, registration_id: int) -> Registration:
        """Release the registration's session slot without changing its status."""
        with self._locked(registration_id):
            registration = self.require(registration_id)
            held = registration.session_id
            if held is None:
                return registration
            with self.session_service.locked(held):
                self._release(registration)
                saved = self.registrations.save(registration)
        logger.info("Registration %s unassigned from session %s", registration_id, held)
        return saved

    # Files and boards

    def update_file_path(self, registration_id: int, file_path: Optional[str]) -> Registration:
        with self._locked(registration_id):
            registration = self.require(registration_id)
            registration.file_path = file_path.strip() if file_path and file_path.strip() else None
            saved = self.registrations.save(registration)
        logger.info("Registration %s file path set to %s", registration_id, saved.file_path)
        return saved

    def assign_board(self, registration_id: int, board_id: str) -> Registration:
        """Assign a poster board; board ids are unique within one session.

        This is the only way to set ``board_id``; ``update`` leaves it alone.
        """
        with self._locked(registration_id):
            registration = self.require(registration_id)
            if registration.presentation_type != SessionType.POSTER:
                raise ValidationError("board_id", "Boards can only be assigned to poster presentations")
            if board_id is None or not board_id.strip():
                raise ValidationError("board_id", "Board id is required")
            board_id = board_id.strip()
            # The session lock keeps two posters from claiming one board at once.
            with self.session_service.locked(registration.session_id):
                if registration.session_id is not None:
                    taken = [
                        other
                        for other in self.registrations.find_by_board(registration.session_id, board_id)
                        if other.id != registration.id
                    ]
                    if taken:
                        raise ValidationError(
                            "board_id",
                            f"Board {board_id} is already taken in session {registration.session_id}",
                        )
                registration.board_id = board_id
                saved = self.registrations.save(registration)
        logger.info("Registration %s assigned board %s", registration_id, board_id)
        return saved

    # Helpers

    @contextmanager
    def _locked(self, registration_id: int) -> Iterator[None]:
        # Always taken before any session lock.
        with self.session_service.locks.hold(("registration", registration_id)):
            yield

    def _set_status(self, registration_id: int, status: RegistrationStatus) -> Registration:
        with self._locked(registration_id):
            registration = self.require(registration_id)
            registration.status = status
            saved = self.registrations.save(registration)
        logger.info("Registration %s set to %s", registration_id, status.value)
        return saved

    def _approve_if_pending(self, registration: Registration) -> Registration:
        if registration.status == RegistrationStatus.PENDING:
            registration.status = RegistrationStatus.APPROVED
        return self.registrations.save(registration)

    def _release(self, registration: Registration) -> None:
        """Give back the held slot and clear the assignment in place.

        The caller must hold the session lock and save ``registration``.
        A session deleted with confirmation leaves a dangling id, which
        is simply cleared.
        """
        held = registration.session_id
        if held is None:
            return
        if self.session_service.get(held) is not None:
            self.session_service.decrement_registered(held)
        registration.session_id = None
        registration.board_id = None

    @staticmethod
    def _validate(registration: Registration) -> None:
        if registration is None:
            raise ValidationError("registration", "Registration cannot be empty")
        if registration.student_id is None:
            raise ValidationError("student_id", "Student id is required")

        title = registration.research_title
        if title is None or not title.strip():
            raise ValidationError("research_title", "Research title is required")
        if len(title) > Registration.MAX_TITLE_LENGTH:
            raise ValidationError(
                "research_title",
                f"Research title exceeds maximum length of {Registration.MAX_TITLE_LENGTH}",
            )

        abstract = registration.abstract_text
        if abstract is None or not abstract.strip():
            raise ValidationError("abstract_text", "Abstract is required")
        if len(abstract) > Registration.MAX_ABSTRACT_LENGTH:
            raise ValidationError(
                "abstract_text",
                f"Abstract exceeds maximum length of {Registration.MAX_ABSTRACT_LENGTH}",
            )

        if registration.supervisor_name is None or not registration.supervisor_name.strip():
            raise ValidationError("supervisor_name", "Supervisor name is required")
        if registration.presentation_type is None:
            raise ValidationError("presentation_type", "Presentation type is required")
        if registration.board_id and registration.presentation_type != SessionType.POSTER:
            raise ValidationError("board_id", "Only poster presentations have a board")
