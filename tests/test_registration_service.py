"""Tests for registration validation, session assignment and cancellation."""
import logging
import threading

import pytest

from seminar_review_api.app.core.exceptions import (
    CapacityError,
    NotFoundError,
    TypeMismatchError,
    ValidationError,
)
from seminar_review_api.app.schemas import Registration, RegistrationStatus, SessionStatus, SessionType
from tests.helpers import make_registration, make_session


def _registration(**overrides) -> Registration:
    fields = dict(
        student_id=7,
        research_title="Federated learning on edge devices",
        abstract_text="An abstract.",
        supervisor_name="Dr. Tan",
        presentation_type=SessionType.POSTER,
    )
    fields.update(overrides)
    return Registration(**fields)


def test_register_starts_pending_and_unassigned(container) -> None:
    created = container.registrations.register(
        _registration(id=5, session_id=3, status=RegistrationStatus.APPROVED)
    )
    assert created.id == 1
    assert created.session_id is None
    assert created.status == RegistrationStatus.PENDING
    assert created.created_at is not None


def test_abstract_length_limit(container) -> None:
    container.registrations.register(_registration(abstract_text="a" * 1000))
    with pytest.raises(ValidationError) as exc:
        container.registrations.register(_registration(abstract_text="a" * 1001))
    assert exc.value.field == "abstract_text"
    assert container.registrations.count() == 1


def test_title_length_limit(container) -> None:
    with pytest.raises(ValidationError) as exc:
        container.registrations.register(_registration(research_title="t" * 201))
    assert exc.value.field == "research_title"


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"student_id": None}, "student_id"),
        ({"research_title": " "}, "research_title"),
        ({"abstract_text": None}, "abstract_text"),
        ({"supervisor_name": ""}, "supervisor_name"),
        ({"presentation_type": None}, "presentation_type"),
        ({"research_title": None, "supervisor_name": None}, "research_title"),
    ],
)
def test_validation_reports_first_failing_field(container, overrides, field) -> None:
    with pytest.raises(ValidationError) as exc:
        container.registrations.register(_registration(**overrides))
    assert exc.value.field == field


def test_assignment_approves_and_takes_a_slot(container) -> None:
    session = make_session(container, SessionType.ORAL, capacity=2)
    registration = make_registration(container, SessionType.ORAL)

    assigned = container.registrations.assign_to_session(registration.id, session.id)
    assert assigned.session_id == session.id
    assert assigned.status == RegistrationStatus.APPROVED
    assert container.sessions.get(session.id).registered == 1


def test_type_mismatch_leaves_state_untouched(container) -> None:
    session = make_session(container, SessionType.ORAL)
    registration = make_registration(container, SessionType.POSTER)

    with pytest.raises(TypeMismatchError):
        container.registrations.assign_to_session(registration.id, session.id)
    assert container.sessions.get(session.id).registered == 0
    assert container.registrations.get(registration.id).session_id is None


def test_assignment_to_full_session_fails(container) -> None:
    session = make_session(container, capacity=1)
    first = make_registration(container, student_id=1)
    second = make_registration(container, student_id=2)
    container.registrations.assign_to_session(first.id, session.id)

    with pytest.raises(CapacityError):
        container.registrations.assign_to_session(second.id, session.id)
    assert container.registrations.get(second.id).status == RegistrationStatus.PENDING


def test_assignment_unknown_ids(container) -> None:
    session = make_session(container)
    registration = make_registration(container)
    with pytest.raises(NotFoundError):
        container.registrations.assign_to_session(registration.id, 999)
    with pytest.raises(NotFoundError):
        container.registrations.assign_to_session(999, session.id)


def test_moving_between_sessions_releases_the_old_slot(container) -> None:
    first = make_session(container, capacity=1)
    second = make_session(container, capacity=1, venue="Hall B")
    registration = make_registration(container)

    container.registrations.assign_to_session(registration.id, first.id)
    assert container.sessions.get(first.id).status == SessionStatus.FULL

    moved = container.registrations.assign_to_session(registration.id, second.id)
    assert moved.session_id == second.id
    old = container.sessions.get(first.id)
    new = container.sessions.get(second.id)
    assert (old.registered, old.status) == (0, SessionStatus.OPEN)
    assert (new.registered, new.status) == (1, SessionStatus.FULL)


def test_reassigning_to_the_same_session_changes_nothing(container) -> None:
    session = make_session(container, capacity=1)
    registration = make_registration(container)
    container.registrations.assign_to_session(registration.id, session.id)

    again = container.registrations.assign_to_session(registration.id, session.id)
    assert again.session_id == session.id
    assert container.sessions.get(session.id).registered == 1


def test_cancel_releases_the_slot(container) -> None:
    session = make_session(container, capacity=1)
    registration = make_registration(container)
    container.registrations.assign_to_session(registration.id, session.id)

    cancelled = container.registrations.cancel(registration.id)
    assert cancelled.status == RegistrationStatus.CANCELLED
    assert cancelled.session_id is None
    released = container.sessions.get(session.id)
    assert (released.registered, released.status) == (0, SessionStatus.OPEN)


def test_cancelled_registration_cannot_be_assigned(container) -> None:
    session = make_session(container)
    registration = make_registration(container)
    container.registrations.cancel(registration.id)
    with pytest.raises(ValidationError) as exc:
        container.registrations.assign_to_session(registration.id, session.id)
    assert exc.value.field == "status"


def test_unassign_keeps_status(container) -> None:
    session = make_session(container)
    registration = make_registration(container)
    container.registrations.assign_to_session(registration.id, session.id)

    unassigned = container.registrations.unassign_from_session(registration.id)
    assert unassigned.session_id is None
    assert unassigned.status == RegistrationStatus.APPROVED
    assert container.sessions.get(session.id).registered == 0
    assert [r.id for r in container.registrations.unassigned()] == [registration.id]


def test_cancel_after_confirmed_session_delete(container) -> None:
    session = make_session(container)
    registration = make_registration(container)
    container.registrations.assign_to_session(registration.id, session.id)
    container.sessions.delete_with_confirmation(session.id, confirmed=True)

    cancelled = container.registrations.cancel(registration.id)
    assert cancelled.session_id is None


def test_update_cannot_switch_type_while_holding_a_session(container) -> None:
    session = make_session(container, SessionType.ORAL)
    registration = make_registration(container, SessionType.ORAL)
    container.registrations.assign_to_session(registration.id, session.id)

    with pytest.raises(TypeMismatchError):
        container.registrations.update(
            registration.model_copy(update={"presentation_type": SessionType.POSTER})
        )


def test_update_edits_descriptive_fields_only(container) -> None:
    registration = make_registration(container)
    updated = container.registrations.update(
        registration.model_copy(
            update={"research_title": "New title", "status": RegistrationStatus.APPROVED, "student_id": 9}
        )
    )
    assert updated.research_title == "New title"
    assert updated.status == RegistrationStatus.PENDING
    assert updated.student_id == registration.student_id


def test_file_path_blank_clears(container) -> None:
    registration = make_registration(container)
    assert container.registrations.update_file_path(registration.id, " slides.pdf ").file_path == "slides.pdf"
    assert container.registrations.update_file_path(registration.id, "   ").file_path is None


def test_poster_boards_are_unique_per_session(container) -> None:
    session = make_session(container, SessionType.POSTER)
    first = make_registration(container, SessionType.POSTER, student_id=1)
    second = make_registration(container, SessionType.POSTER, student_id=2)
    oral = make_registration(container, SessionType.ORAL, student_id=3)
    container.registrations.assign_to_session(first.id, session.id)
    container.registrations.assign_to_session(second.id, session.id)

    assert container.registrations.assign_board(first.id, "B1").board_id == "B1"
    with pytest.raises(ValidationError):
        container.registrations.assign_board(second.id, "B1")
    with pytest.raises(ValidationError):
        container.registrations.assign_board(oral.id, "B2")


def test_update_never_sets_a_board(container) -> None:
    session = make_session(container, SessionType.POSTER)
    first = make_registration(container, SessionType.POSTER, student_id=1)
    second = make_registration(container, SessionType.POSTER, student_id=2)
    container.registrations.assign_to_session(first.id, session.id)
    container.registrations.assign_to_session(second.id, session.id)
    container.registrations.assign_board(first.id, "B1")

    stored = container.registrations.get(second.id)
    updated = container.registrations.update(stored.model_copy(update={"board_id": "B1"}))
    assert updated.board_id is None
    boards = [r.board_id for r in container.registrations.by_session(session.id) if r.board_id]
    assert boards == ["B1"]


def test_register_discards_client_board(container) -> None:
    created = container.registrations.register(_registration(board_id="B9"))
    assert created.board_id is None


def test_approve_does_not_overwrite_a_concurrent_assignment(container, monkeypatch) -> None:
    session = make_session(container)
    registration = make_registration(container)
    service = container.registrations
    original_require = service.require
    assigner = threading.Thread(target=service.assign_to_session, args=(registration.id, session.id))
    started = []

    def require_then_assign(registration_id):
        found = original_require(registration_id)
        if not started:
            # Another thread tries to assign while approve holds its copy.
            started.append(True)
            assigner.start()
            assigner.join(timeout=0.2)
        return found

    monkeypatch.setattr(service, "require", require_then_assign)
    service.approve(registration.id)
    assigner.join()

    stored = service.get(registration.id)
    assert stored.session_id == session.id
    assert stored.status == RegistrationStatus.APPROVED
    assert container.sessions.get(session.id).registered == len(service.by_session(session.id)) == 1


def test_file_path_change_is_logged(container, caplog) -> None:
    registration = make_registration(container)
    with caplog.at_level(logging.INFO, logger="seminar_review_api"):
        container.registrations.update_file_path(registration.id, "slides.pdf")
    assert f"Registration {registration.id} file path set to slides.pdf" in caplog.text
