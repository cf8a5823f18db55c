from typing import List, Optional

from ..schemas import EVALUATION
from ..schemas.evaluation import Evaluation, ScoreSummary
from .base import BaseRepository


class EvaluationRepository(BaseRepository[Evaluation]):
    entity_type = EVALUATION
    model = Evaluation

    def find_by_evaluator(self, evaluator_id: int) -> List[Evaluation]:
        return self.find_by("evaluator_id", evaluator_id)

    def find_by_registration(self, registration_id: int) -> List[Evaluation]:
        return self.find_by("registration_id", registration_id)

    def find_by_pair(self, evaluator_id: int, registration_id: int) -> Optional[Evaluation]:
        matches = self.find_where(
            lambda e: e.evaluator_id == evaluator_id and e.registration_id == registration_id
        )
        return matches[0] if matches else None

    def exists_by_pair(self, evaluator_id: int, registration_id: int) -> bool:
        return self.find_by_pair(evaluator_id, registration_id) is not None

    def find_submitted(
        self,
        registration_id: Optional[int] = None,
        evaluator_id: Optional[int] = None,
    ) -> List[Evaluation]:
        return self.find_where(
            lambda e: e.submitted
            and (registration_id is None or e.registration_id == registration_id)
            and (evaluator_id is None or e.evaluator_id == evaluator_id)
        )

    def find_pending_by_evaluator(self, evaluator_id: int) -> List[Evaluation]:
        return self.find_where(lambda e: not e.submitted and e.evaluator_id == evaluator_id)

    def count_submitted(self) -> int:
        return self.count_by("submitted", True)

    def count_pending(self) -> int:
        return self.count_by("submitted", False)

    def score_summary(self, registration_id: int) -> ScoreSummary:
        submitted = self.find_submitted(registration_id=registration_id)
        return ScoreSummary(
            registration_id=registration_id,
            total=sum(e.total_score for e in submitted),
            count=len(submitted),
        )
