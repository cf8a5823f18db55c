"""
Evaluation endpoints for API v1.

Coordinators assign evaluators to registrations.  Evaluators then
score their own assignments as drafts and submit them; a submitted
evaluation can no longer be changed.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from seminar_review_api.app.api.v1.errors import to_http_exception
from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.core.security import get_container, require_permission, require_roles
from seminar_review_api.app.schemas.enums import Role
from seminar_review_api.app.schemas.evaluation import (
    Evaluation,
    EvaluationAssign,
    EvaluationScores,
    ScoreSummary,
)
from seminar_review_api.app.schemas.user import User
from seminar_review_api.app.services.auth_service import SAVE_DRAFT, SUBMIT_EVALUATION


router = APIRouter()

_evaluators_and_coordinators = require_roles(Role.EVALUATOR, Role.COORDINATOR)
_coordinators = require_roles(Role.COORDINATOR)


def _own_evaluation(container: ServiceContainer, evaluation_id: int, user: User) -> Evaluation:
    try:
        evaluation = container.evaluations.require(evaluation_id)
    except ValueError as e:
        raise to_http_exception(e) from e
    if user.role != Role.COORDINATOR and evaluation.evaluator_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your evaluation")
    return evaluation


@router.post("/", response_model=Evaluation, status_code=status.HTTP_201_CREATED)
def assign_evaluator(
    payload: EvaluationAssign,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Evaluation:
    """Assign an evaluator to a registration.  Each pair may exist only once."""
    try:
        return container.evaluations.assign_evaluator(payload.evaluator_id, payload.registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.delete("/", status_code=status.HTTP_204_NO_CONTENT)
def remove_assignment(
    evaluator_id: int = Query(...),
    registration_id: int = Query(...),
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Response:
    try:
        removed = container.evaluations.remove_assignment(evaluator_id, registration_id)
    except ValueError as e:
        raise to_http_exception(e) from e
    if not removed:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Evaluator {evaluator_id} is not assigned to registration {registration_id}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/", response_model=List[Evaluation])
def list_evaluations(
    registration_id: Optional[int] = Query(None),
    pending: Optional[bool] = Query(None, description="true: drafts only, false: submitted only"),
    current_user: User = Depends(_evaluators_and_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> List[Evaluation]:
    """List evaluations.  Evaluators only see their own assignments."""
    service = container.evaluations
    if current_user.role == Role.EVALUATOR:
        evaluations = service.by_evaluator(current_user.id)
    elif registration_id is not None:
        evaluations = service.by_registration(registration_id)
    else:
        evaluations = service.list_all()
    if registration_id is not None:
        evaluations = [e for e in evaluations if e.registration_id == registration_id]
    if pending is not None:
        evaluations = [e for e in evaluations if e.submitted != pending]
    return evaluations


@router.get("/registrations/{registration_id}/score", response_model=ScoreSummary)
def get_score_summary(
    registration_id: int,
    current_user: User = Depends(_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> ScoreSummary:
    """Average total score over the submitted evaluations of a registration."""
    return container.evaluations.get_score_summary(registration_id)


@router.get("/{evaluation_id}", response_model=Evaluation)
def get_evaluation(
    evaluation_id: int,
    current_user: User = Depends(_evaluators_and_coordinators),
    container: ServiceContainer = Depends(get_container),
) -> Evaluation:
    return _own_evaluation(container, evaluation_id, current_user)


@router.put("/{evaluation_id}", response_model=Evaluation)
def save_draft(
    evaluation_id: int,
    payload: EvaluationScores,
    current_user: User = Depends(require_permission(SAVE_DRAFT)),
    container: ServiceContainer = Depends(get_container),
) -> Evaluation:
    """Save scores and comments as a draft.

    Each criterion is scored from 0 to 25.  Fails with HTTP 409 once
    the evaluation has been submitted.
    """
    existing = _own_evaluation(container, evaluation_id, current_user)
    draft = Evaluation(
        id=evaluation_id,
        evaluator_id=existing.evaluator_id,
        registration_id=existing.registration_id,
        **payload.model_dump(),
    )
    try:
        return container.evaluations.save_evaluation(draft)
    except ValueError as e:
        raise to_http_exception(e) from e


@router.post("/{evaluation_id}/submit", response_model=Evaluation)
def submit_evaluation(
    evaluation_id: int,
    current_user: User = Depends(require_permission(SUBMIT_EVALUATION)),
    container: ServiceContainer = Depends(get_container),
) -> Evaluation:
    _own_evaluation(container, evaluation_id, current_user)
    try:
        return container.evaluations.submit_evaluation(evaluation_id)
    except ValueError as e:
        raise to_http_exception(e) from e
