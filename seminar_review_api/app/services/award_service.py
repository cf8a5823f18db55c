"""
Award calculation.

``calculate_awards`` recomputes the whole award set from scratch on
every call and replaces whatever was stored before.  Each category is
decided independently over the APPROVED registrations:

* BEST_ORAL and BEST_POSTER consider registrations of that
  presentation type, PEOPLES_CHOICE considers all of them;
* a candidate's score is the average of its submitted evaluation
  totals, and candidates averaging exactly zero are dropped as having
  no evaluation data;
* every candidate sharing the highest score wins.  Averages are
  compared as exact fractions, so ties are neither broken by id nor
  lost to floating-point rounding.
"""

import logging
import threading
from datetime import datetime
from fractions import Fraction
from typing import List, Optional, Tuple

from ..repositories import AwardRepository, RegistrationRepository
from ..schemas.award import Award
from ..schemas.enums import AwardType, RegistrationStatus, SessionType
from ..schemas.registration import Registration
from .evaluation_service import EvaluationService

logger = logging.getLogger(__name__)

# Award category -> presentation type it is restricted to (None = any)
AWARD_CATEGORIES: Tuple[Tuple[AwardType, Optional[SessionType]], ...] = (
    (AwardType.BEST_ORAL, SessionType.ORAL),
    (AwardType.BEST_POSTER, SessionType.POSTER),
    (AwardType.PEOPLES_CHOICE, None),
)


class AwardService:
    """Service computing tie-aware awards from evaluation scores."""

    def __init__(
        self,
        registrations: RegistrationRepository,
        evaluation_service: EvaluationService,
        awards: AwardRepository,
    ) -> None:
        self.registrations = registrations
        self.evaluation_service = evaluation_service
        self.awards = awards
        self._calculation_lock = threading.Lock()

    def calculate_awards(self) -> List[Award]:
        """Recompute and store the award set; returns the stored awards."""
        with self._calculation_lock:
            approved = self.registrations.find_by_status(RegistrationStatus.APPROVED)
            awarded_at = datetime.now()
            calculated: List[Award] = []
            for award_type, presentation_type in AWARD_CATEGORIES:
                candidates = [
                    r for r in approved
                    if presentation_type is None or r.presentation_type == presentation_type
                ]
                winners = self._winners(candidates, award_type, awarded_at)
                if not winners:
                    logger.info("No %s winner: no scored candidates", award_type.value)
                calculated.extend(winners)
            stored = self.awards.replace_all(calculated)
        logger.info(
            "Awards calculated: %s rows over %s approved registrations", len(stored), len(approved)
        )
        return stored

    def _winners(
        self,
        candidates: List[Registration],
        award_type: AwardType,
        awarded_at: datetime,
    ) -> List[Award]:
        scored: List[Tuple[Fraction, int]] = []
        for registration in candidates:
            average = self.evaluation_service.get_score_summary(registration.id).exact_average()
            if average == 0:
                continue
            scored.append((average, registration.id))
        if not scored:
            return []

        scored.sort(key=lambda item: item[0], reverse=True)
        top = scored[0][0]
        return [
            Award(
                type=award_type,
                registration_id=registration_id,
                score=float(top),
                awarded_at=awarded_at,
            )
            for average, registration_id in scored
            if average == top
        ]

    # Award retrieval

    def all_awards(self) -> List[Award]:
        return self.awards.find_all()

    def by_type(self, award_type: AwardType) -> List[Award]:
        return self.awards.find_by_type(award_type)

    def best_oral(self) -> List[Award]:
        return self.by_type(AwardType.BEST_ORAL)

    def best_poster(self) -> List[Award]:
        return self.by_type(AwardType.BEST_POSTER)

    def peoples_choice(self) -> List[Award]:
        return self.by_type(AwardType.PEOPLES_CHOICE)

    def clear_awards(self) -> int:
        cleared = self.awards.delete_all()
        logger.info("Cleared %s awards", cleared)
        return cleared
