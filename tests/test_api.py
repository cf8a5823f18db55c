"""End-to-end tests of the HTTP API against an in-memory container."""
import pytest
from fastapi.testclient import TestClient

from seminar_review_api.app.main import create_app

SESSION_PAYLOAD = {
    "date": "2026-03-10",
    "start_time": "09:00",
    "end_time": "11:00",
    "venue": "Hall A",
    "type": "ORAL",
    "capacity": 1,
}


def _as(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


def _registration_payload(title: str = "Graph neural networks for timetabling") -> dict:
    return {
        "research_title": title,
        "abstract_text": "We schedule seminars with learned heuristics.",
        "supervisor_name": "Dr. Lee",
        "presentation_type": "ORAL",
    }


@pytest.fixture
def client(container) -> TestClient:
    return TestClient(create_app(container))


@pytest.fixture
def users(client) -> dict:
    """Bootstrap a coordinator, then let them create a student and an evaluator."""
    coordinator = client.post("/api/v1/users/", json={"username": "coord", "name": "Coordinator", "role": "COORDINATOR"})
    assert coordinator.status_code == 201
    coordinator_id = coordinator.json()["id"]
    student = client.post(
        "/api/v1/users/",
        json={"username": "stud", "name": "Student", "role": "STUDENT", "student_number": "S1"},
        headers=_as(coordinator_id),
    )
    evaluator = client.post(
        "/api/v1/users/",
        json={"username": "eval", "name": "Evaluator", "role": "EVALUATOR"},
        headers=_as(coordinator_id),
    )
    return {
        "coordinator": coordinator_id,
        "student": student.json()["id"],
        "evaluator": evaluator.json()["id"],
    }


def test_guest_identity_and_unknown_user(client) -> None:
    assert client.get("/api/v1/users/me").json()["role"] == "GUEST"
    assert client.get("/api/v1/users/me", headers=_as(42)).status_code == 401


def test_user_creation_requires_coordinator_after_bootstrap(client, users) -> None:
    response = client.post("/api/v1/users/", json={"username": "x", "name": "X", "role": "COORDINATOR"})
    assert response.status_code == 403
    duplicate = client.post(
        "/api/v1/users/",
        json={"username": "stud", "name": "Again", "role": "STUDENT"},
        headers=_as(users["coordinator"]),
    )
    assert duplicate.status_code == 422
    assert duplicate.json()["detail"]["field"] == "username"


def test_session_management_is_coordinator_only(client, users) -> None:
    assert client.post("/api/v1/sessions/", json=SESSION_PAYLOAD).status_code == 403
    assert client.post("/api/v1/sessions/", json=SESSION_PAYLOAD, headers=_as(users["student"])).status_code == 403

    created = client.post("/api/v1/sessions/", json=SESSION_PAYLOAD, headers=_as(users["coordinator"]))
    assert created.status_code == 201
    assert created.json()["registered"] == 0
    assert created.json()["status"] == "OPEN"

    listed = client.get("/api/v1/sessions/", params={"type": "ORAL"})
    assert [s["id"] for s in listed.json()] == [created.json()["id"]]


def test_engine_validation_maps_to_422(client, users) -> None:
    response = client.post(
        "/api/v1/sessions/",
        json=dict(SESSION_PAYLOAD, capacity=0),
        headers=_as(users["coordinator"]),
    )
    assert response.status_code == 422
    assert response.json()["detail"] == {"field": "capacity", "message": "Session capacity must be positive"}


def test_registration_flow(client, users) -> None:
    coordinator = _as(users["coordinator"])
    session_id = client.post("/api/v1/sessions/", json=SESSION_PAYLOAD, headers=coordinator).json()["id"]

    first = client.post("/api/v1/registrations/", json=_registration_payload(), headers=_as(users["student"]))
    assert first.status_code == 201
    assert first.json()["student_id"] == users["student"]
    assert first.json()["status"] == "PENDING"
    second = client.post(
        "/api/v1/registrations/",
        json=dict(_registration_payload("Second"), student_id=users["student"]),
        headers=coordinator,
    )

    assigned = client.put(
        f"/api/v1/registrations/{first.json()['id']}/session",
        json={"session_id": session_id},
        headers=coordinator,
    )
    assert assigned.status_code == 200
    assert assigned.json()["status"] == "APPROVED"
    assert client.get(f"/api/v1/sessions/{session_id}").json()["status"] == "FULL"

    overfull = client.put(
        f"/api/v1/registrations/{second.json()['id']}/session",
        json={"session_id": session_id},
        headers=coordinator,
    )
    assert overfull.status_code == 409
    assert overfull.json()["detail"]["error"] == "CapacityError"

    assert client.delete(f"/api/v1/sessions/{session_id}", headers=coordinator).status_code == 409

    cancelled = client.post(f"/api/v1/registrations/{first.json()['id']}/cancel", headers=_as(users["student"]))
    assert cancelled.json()["status"] == "CANCELLED"
    assert client.get(f"/api/v1/sessions/{session_id}").json()["registered"] == 0


def test_students_only_see_their_own_registrations(client, users) -> None:
    other = client.post(
        "/api/v1/users/",
        json={"username": "other", "name": "Other", "role": "STUDENT"},
        headers=_as(users["coordinator"]),
    ).json()["id"]
    mine = client.post("/api/v1/registrations/", json=_registration_payload(), headers=_as(users["student"])).json()

    assert client.get("/api/v1/registrations/", headers=_as(other)).json() == []
    assert client.get(f"/api/v1/registrations/{mine['id']}", headers=_as(other)).status_code == 403
    assert client.get("/api/v1/registrations/", headers=_as(users["coordinator"])).json()[0]["id"] == mine["id"]


def test_evaluation_and_awards_flow(client, users) -> None:
    coordinator = _as(users["coordinator"])
    evaluator = _as(users["evaluator"])
    registration = client.post(
        "/api/v1/registrations/", json=_registration_payload(), headers=_as(users["student"])
    ).json()
    client.post(f"/api/v1/registrations/{registration['id']}/approve", headers=coordinator)

    assignment = {"evaluator_id": users["evaluator"], "registration_id": registration["id"]}
    created = client.post("/api/v1/evaluations/", json=assignment, headers=coordinator)
    assert created.status_code == 201
    assert client.post("/api/v1/evaluations/", json=assignment, headers=coordinator).status_code == 409

    evaluation_id = created.json()["id"]
    invalid = client.put(
        f"/api/v1/evaluations/{evaluation_id}",
        json={"problem_clarity": 26, "methodology": 0, "results": 0, "presentation_quality": 0},
        headers=evaluator,
    )
    assert invalid.status_code == 422
    assert invalid.json()["detail"]["field"] == "problem_clarity"

    scores = {"problem_clarity": 20, "methodology": 18, "results": 22, "presentation_quality": 21}
    draft = client.put(f"/api/v1/evaluations/{evaluation_id}", json=scores, headers=evaluator)
    assert draft.json()["total_score"] == 81
    assert client.post(f"/api/v1/evaluations/{evaluation_id}/submit", headers=evaluator).status_code == 200
    assert client.post(f"/api/v1/evaluations/{evaluation_id}/submit", headers=evaluator).status_code == 409
    assert client.put(f"/api/v1/evaluations/{evaluation_id}", json=scores, headers=evaluator).status_code == 409

    summary = client.get(f"/api/v1/evaluations/registrations/{registration['id']}/score", headers=coordinator)
    assert summary.json()["average"] == pytest.approx(81.0)

    assert client.post("/api/v1/awards/calculate", headers=evaluator).status_code == 403
    awards = client.post("/api/v1/awards/calculate", headers=coordinator).json()
    assert {a["type"] for a in awards} == {"BEST_ORAL", "PEOPLES_CHOICE"}
    best_oral = client.get("/api/v1/awards/", params={"type": "BEST_ORAL"}).json()
    assert [a["registration_id"] for a in best_oral] == [registration["id"]]


def test_reports_are_coordinator_only(client, users) -> None:
    assert client.get("/api/v1/reports/sessions").status_code == 403
    report = client.get("/api/v1/reports/registrations", headers=_as(users["coordinator"]))
    assert report.status_code == 200
    assert report.json()["total_registrations"] == 0
