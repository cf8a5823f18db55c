"""
Business logic for evaluations.

An evaluation is created when a coordinator assigns an evaluator to a
registration, edited as a draft while ``submitted`` is false and
finalized by ``submit_evaluation``.  There is exactly one evaluation
per (evaluator, registration) pair: the existence check and the insert
run under one lock for that pair.  Submission is one-way; a submitted
evaluation can no longer be saved or removed.
"""

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Iterator, List, Optional

from ..core.exceptions import (
    AlreadySubmittedError,
    DuplicateAssignmentError,
    ImmutableRecordError,
    NotFoundError,
    ValidationError,
)
from ..core.locks import KeyedLocks
from ..repositories import EvaluationRepository
from ..schemas.evaluation import Evaluation, ScoreSummary

logger = logging.getLogger(__name__)

_CRITERION_LABELS = {
    "problem_clarity": "Problem clarity",
    "methodology": "Methodology",
    "results": "Results",
    "presentation_quality": "Presentation quality",
}


class EvaluationService:
    """Service for evaluator assignment and scoring."""

    def __init__(self, evaluations: EvaluationRepository, locks: Optional[KeyedLocks] = None) -> None:
        self.evaluations = evaluations
        self.locks = locks or KeyedLocks()

    @contextmanager
    def _pair_locked(self, evaluator_id: int, registration_id: int) -> Iterator[None]:
        with self.locks.hold(("evaluation", evaluator_id, registration_id)):
            yield

    # Queries

    def get(self, evaluation_id: Optional[int]) -> Optional[Evaluation]:
        return self.evaluations.find_by_id(evaluation_id)

    def require(self, evaluation_id: Optional[int]) -> Evaluation:
        evaluation = self.evaluations.find_by_id(evaluation_id)
        if evaluation is None:
            raise NotFoundError("evaluation", evaluation_id)
        return evaluation

    def list_all(self) -> List[Evaluation]:
        return self.evaluations.find_all()

    def get_evaluation(self, evaluator_id: int, registration_id: int) -> Optional[Evaluation]:
        return self.evaluations.find_by_pair(evaluator_id, registration_id)

    def is_assigned(self, evaluator_id: int, registration_id: int) -> bool:
        return self.evaluations.exists_by_pair(evaluator_id, registration_id)

    def by_evaluator(self, evaluator_id: int) -> List[Evaluation]:
        return self.evaluations.find_by_evaluator(evaluator_id)

    def by_registration(self, registration_id: int) -> List[Evaluation]:
        return self.evaluations.find_by_registration(registration_id)

    def submitted_by_evaluator(self, evaluator_id: int) -> List[Evaluation]:
        return self.evaluations.find_submitted(evaluator_id=evaluator_id)

    def pending_by_evaluator(self, evaluator_id: int) -> List[Evaluation]:
        return self.evaluations.find_pending_by_evaluator(evaluator_id)

    def submitted_by_registration(self, registration_id: int) -> List[Evaluation]:
        return self.evaluations.find_submitted(registration_id=registration_id)

    def count(self) -> int:
        return self.evaluations.count()

    def count_submitted(self) -> int:
        return self.evaluations.count_submitted()

    def count_pending(self) -> int:
        return self.evaluations.count_pending()

    def count_by_evaluator(self, evaluator_id: int) -> int:
        return self.evaluations.count_by("evaluator_id", evaluator_id)

    def count_by_registration(self, registration_id: int) -> int:
        return self.evaluations.count_by("registration_id", registration_id)

    # Scores

    def get_average_score(self, registration_id: int) -> float:
        """Mean total score of the submitted evaluations, ``0.0`` if there are none.

        Use ``get_score_summary`` to tell "no submitted evaluations"
        apart from a genuine zero average.
        """
        return self.get_score_summary(registration_id).average

    def get_score_summary(self, registration_id: int) -> ScoreSummary:
        return self.evaluations.score_summary(registration_id)

    # Assignment

    def assign_evaluator(self, evaluator_id: int, registration_id: int) -> Evaluation:
        """Create the empty draft evaluation that assigns an evaluator."""
        self._require_pair(evaluator_id, registration_id)
        with self._pair_locked(evaluator_id, registration_id):
            if self.evaluations.exists_by_pair(evaluator_id, registration_id):
                raise DuplicateAssignmentError(
                    f"Evaluator {evaluator_id} is already assigned to registration {registration_id}"
                )
            created = self.evaluations.save(
                Evaluation(evaluator_id=evaluator_id, registration_id=registration_id)
            )
        logger.info(
            "Evaluator %s assigned to registration %s (evaluation %s)",
            evaluator_id, registration_id, created.id,
        )
        return created

    def remove_assignment(self, evaluator_id: int, registration_id: int) -> bool:
        """Delete the draft for the pair; returns ``False`` if there is none."""
        with self._pair_locked(evaluator_id, registration_id):
            evaluation = self.evaluations.find_by_pair(evaluator_id, registration_id)
            if evaluation is None:
                return False
            if evaluation.submitted:
                raise ImmutableRecordError(
                    f"Evaluation {evaluation.id} has been submitted and cannot be removed"
                )
            self.evaluations.delete(evaluation.id)
        logger.info("Evaluator %s unassigned from registration %s", evaluator_id, registration_id)
        return True

    # Drafts and submission

    def save_evaluation(self, evaluation: Evaluation) -> Evaluation:
        """Save a draft.

        Scores are validated first.  An existing evaluation keeps its
        evaluator and registration; if it has already been submitted
        the save fails with ``ImmutableRecordError``.  Without an id the
        draft is created for its pair, which must not be assigned yet.
        Drafts are always stored with ``submitted_at`` cleared;
        submitting goes through ``submit_evaluation``.
        """
        if evaluation is None:
            raise ValidationError("evaluation", "Evaluation cannot be empty")
        self._validate_scores(evaluation)

        if evaluation.id is None:
            self._reject_submitted_flag(evaluation)
            self._require_pair(evaluation.evaluator_id, evaluation.registration_id)
            with self._pair_locked(evaluation.evaluator_id, evaluation.registration_id):
                if self.evaluations.exists_by_pair(evaluation.evaluator_id, evaluation.registration_id):
                    raise DuplicateAssignmentError(
                        f"Evaluator {evaluation.evaluator_id} is already assigned to "
                        f"registration {evaluation.registration_id}"
                    )
                saved = self.evaluations.save(
                    evaluation.model_copy(update={"submitted": False, "submitted_at": None})
                )
            logger.info("Draft evaluation %s created", saved.id)
            return saved

        existing = self.require(evaluation.id)
        with self._pair_locked(existing.evaluator_id, existing.registration_id):
            existing = self.require(evaluation.id)
            if existing.submitted:
                raise ImmutableRecordError(
                    f"Evaluation {existing.id} has been submitted and cannot be modified"
                )
            self._reject_submitted_flag(evaluation)
            draft = existing.model_copy(
                update={
                    "problem_clarity": evaluation.problem_clarity,
                    "methodology": evaluation.methodology,
                    "results": evaluation.results,
                    "presentation_quality": evaluation.presentation_quality,
                    "comments": evaluation.comments,
                    "submitted": False,
                    "submitted_at": None,
                }
            )
            saved = self.evaluations.save(draft)
        logger.info("Draft evaluation %s saved (total %s)", saved.id, saved.total_score)
        return saved

    def submit_evaluation(self, evaluation_id: int) -> Evaluation:
        """Finalize an evaluation; there is no way back."""
        evaluation = self.require(evaluation_id)
        with self._pair_locked(evaluation.evaluator_id, evaluation.registration_id):
            evaluation = self.require(evaluation_id)
            if evaluation.submitted:
                raise AlreadySubmittedError(f"Evaluation {evaluation_id} already submitted")
            self._validate_scores(evaluation)
            evaluation.submitted = True
            evaluation.submitted_at = datetime.now()
            saved = self.evaluations.save(evaluation)
        logger.info(
            "Evaluation %s submitted for registration %s (total %s)",
            evaluation_id, saved.registration_id, saved.total_score,
        )
        return saved

    # Helpers

    @staticmethod
    def _require_pair(evaluator_id: Optional[int], registration_id: Optional[int]) -> None:
        if evaluator_id is None:
            raise ValidationError("evaluator_id", "Evaluator id is required")
        if registration_id is None:
            raise ValidationError("registration_id", "Registration id is required")

    @staticmethod
    def _reject_submitted_flag(evaluation: Evaluation) -> None:
        if evaluation.submitted:
            raise ValidationError(
                "submitted", "Drafts are saved unsubmitted; use submit_evaluation to submit"
            )

    @staticmethod
    def _validate_scores(evaluation: Evaluation) -> None:
        for criterion in Evaluation.CRITERIA:
            score = getattr(evaluation, criterion)
            if score is None or not Evaluation.is_valid_score(score):
                raise ValidationError(
                    criterion,
                    f"{_CRITERION_LABELS[criterion]} score must be between "
                    f"{Evaluation.MIN_SCORE} and {Evaluation.MAX_SCORE}",
                )
