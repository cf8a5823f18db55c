"""Tests for session validation, capacity bookkeeping and status rules."""
import datetime as dt

import pytest

from seminar_review_api.app.core.exceptions import CapacityError, NotFoundError, ValidationError
from seminar_review_api.app.schemas import Session, SessionStatus, SessionType
from tests.helpers import make_registration, make_session


def _session(**overrides) -> Session:
    fields = dict(
        date=dt.date(2026, 3, 10),
        start_time=dt.time(9, 0),
        end_time=dt.time(11, 0),
        venue="Hall A",
        type=SessionType.ORAL,
        capacity=3,
    )
    fields.update(overrides)
    return Session(**fields)


def test_create_allocates_id_and_resets_counter(container) -> None:
    created = container.sessions.create(_session(id=99, registered=2))
    assert created.id == 1
    assert created.registered == 0
    assert created.status == SessionStatus.OPEN


def test_create_keeps_closed_but_not_full(container) -> None:
    closed = container.sessions.create(_session(status=SessionStatus.CLOSED))
    full = container.sessions.create(_session(status=SessionStatus.FULL))
    assert closed.status == SessionStatus.CLOSED
    assert full.status == SessionStatus.OPEN


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"date": None}, "date"),
        ({"start_time": None}, "start_time"),
        ({"end_time": None}, "end_time"),
        ({"venue": "  "}, "venue"),
        ({"type": None}, "type"),
        ({"capacity": 0}, "capacity"),
        ({"start_time": dt.time(11, 0)}, "start_time"),
    ],
)
def test_create_reports_offending_field(container, overrides, field) -> None:
    with pytest.raises(ValidationError) as exc:
        container.sessions.create(_session(**overrides))
    assert exc.value.field == field
    assert container.sessions.count() == 0


def test_first_failing_field_is_reported(container) -> None:
    with pytest.raises(ValidationError) as exc:
        container.sessions.create(_session(date=None, venue=None, capacity=-1))
    assert exc.value.field == "date"


def test_increment_to_capacity_sets_full(container) -> None:
    session = make_session(container, capacity=2)
    container.sessions.increment_registered(session.id)
    full = container.sessions.increment_registered(session.id)
    assert full.registered == 2
    assert full.status == SessionStatus.FULL
    assert not container.sessions.has_available_slots(session.id)


def test_increment_past_capacity_fails(container) -> None:
    session = make_session(container, capacity=1)
    container.sessions.increment_registered(session.id)
    with pytest.raises(CapacityError):
        container.sessions.increment_registered(session.id)
    assert container.sessions.try_increment(session.id) is False
    assert container.sessions.get(session.id).registered == 1


def test_increment_on_closed_session_fails(container) -> None:
    session = make_session(container)
    container.sessions.change_status(session.id, SessionStatus.CLOSED)
    with pytest.raises(CapacityError):
        container.sessions.increment_registered(session.id)


def test_decrement_reopens_full_session_and_floors_at_zero(container) -> None:
    session = make_session(container, capacity=1)
    container.sessions.increment_registered(session.id)
    reopened = container.sessions.decrement_registered(session.id)
    assert reopened.status == SessionStatus.OPEN
    assert reopened.registered == 0
    assert container.sessions.decrement_registered(session.id).registered == 0


def test_decrement_keeps_closed_status(container) -> None:
    session = make_session(container, capacity=1)
    container.sessions.increment_registered(session.id)
    container.sessions.change_status(session.id, SessionStatus.CLOSED)
    assert container.sessions.decrement_registered(session.id).status == SessionStatus.CLOSED


def test_change_status_cannot_force_full_with_free_slots(container) -> None:
    session = make_session(container, capacity=2)
    with pytest.raises(ValidationError) as exc:
        container.sessions.change_status(session.id, SessionStatus.FULL)
    assert exc.value.field == "status"


def test_reopening_a_session_at_capacity_yields_full(container) -> None:
    session = make_session(container, capacity=1)
    container.sessions.increment_registered(session.id)
    container.sessions.change_status(session.id, SessionStatus.CLOSED)
    assert container.sessions.change_status(session.id, SessionStatus.OPEN).status == SessionStatus.FULL


def test_update_keeps_counter_and_rejects_capacity_below_it(container) -> None:
    session = make_session(container, capacity=2)
    container.sessions.increment_registered(session.id)

    updated = container.sessions.update(session.model_copy(update={"venue": "Hall B", "registered": 0}))
    assert updated.venue == "Hall B"
    assert updated.registered == 1

    with pytest.raises(ValidationError) as exc:
        container.sessions.update(updated.model_copy(update={"capacity": 0}))
    assert exc.value.field == "capacity"


def test_update_shrinking_to_counter_sets_full(container) -> None:
    session = make_session(container, capacity=3)
    container.sessions.increment_registered(session.id)
    updated = container.sessions.update(session.model_copy(update={"capacity": 1}))
    assert updated.status == SessionStatus.FULL


def test_update_unknown_session(container) -> None:
    with pytest.raises(NotFoundError):
        container.sessions.update(_session(id=42))


def test_delete_requires_confirmation_when_referenced(container) -> None:
    session = make_session(container)
    registration = make_registration(container)
    container.registrations.assign_to_session(registration.id, session.id)

    assert container.sessions.delete(session.id) is False
    assert container.sessions.get(session.id) is not None
    assert container.sessions.delete_with_confirmation(session.id, confirmed=True) is True
    assert container.sessions.get(session.id) is None


def test_available_filters_by_type(container) -> None:
    oral = make_session(container, SessionType.ORAL, capacity=1)
    poster = make_session(container, SessionType.POSTER)
    container.sessions.increment_registered(oral.id)

    assert [s.id for s in container.sessions.available()] == [poster.id]
    assert container.sessions.available(SessionType.ORAL) == []
    assert container.sessions.count_by_type(SessionType.POSTER) == 1


def test_deleted_session_ids_are_not_reused(container) -> None:
    make_session(container)
    doomed = make_session(container, venue="Hall B")
    registration = make_registration(container)
    container.registrations.assign_to_session(registration.id, doomed.id)
    container.sessions.delete_with_confirmation(doomed.id, confirmed=True)

    fresh = make_session(container, venue="Hall C")
    assert fresh.id == doomed.id + 1
    assert container.sessions.registration_count(fresh.id) == 0
    assert container.sessions.delete(fresh.id) is True
