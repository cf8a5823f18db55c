"""
Pydantic models for evaluations and aggregated scores.

An evaluation scores one registration on four criteria, each an
integer between ``MIN_SCORE`` and ``MAX_SCORE``.  The total is always
derived from the criteria and never stored independently.
"""

from datetime import datetime
from fractions import Fraction
from typing import ClassVar, Optional, Tuple

from pydantic import BaseModel, Field, computed_field


class EvaluationScores(BaseModel):
    """Schema for saving a draft: the four criteria plus comments."""

    problem_clarity: int = Field(0, examples=[20])
    methodology: int = Field(0, examples=[18])
    results: int = Field(0, examples=[22])
    presentation_quality: int = Field(0, examples=[21])
    comments: Optional[str] = None


class Evaluation(EvaluationScores):
    """One evaluator's scoring of one registration."""

    MIN_SCORE: ClassVar[int] = 0
    MAX_SCORE: ClassVar[int] = 25
    MAX_TOTAL_SCORE: ClassVar[int] = 100
    # Validation order of the criteria
    CRITERIA: ClassVar[Tuple[str, ...]] = (
        "problem_clarity",
        "methodology",
        "results",
        "presentation_quality",
    )

    id: Optional[int] = None
    evaluator_id: Optional[int] = None
    registration_id: Optional[int] = None
    submitted: bool = False
    submitted_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }

    @computed_field
    @property
    def total_score(self) -> int:
        return sum(getattr(self, criterion) for criterion in self.CRITERIA)

    @classmethod
    def is_valid_score(cls, score: int) -> bool:
        return cls.MIN_SCORE <= score <= cls.MAX_SCORE


class EvaluationAssign(BaseModel):
    evaluator_id: int
    registration_id: int


class ScoreSummary(BaseModel):
    """Average of the submitted totals of one registration.

    ``count`` separates "no submitted evaluations yet" from a genuine
    zero average.  ``exact_average`` compares without floating-point
    rounding, which is what award ties are decided on.
    """

    registration_id: int
    total: int = 0
    count: int = 0

    def exact_average(self) -> Fraction:
        if self.count == 0:
            return Fraction(0)
        return Fraction(self.total, self.count)

    @computed_field
    @property
    def average(self) -> float:
        return float(self.exact_average())

    @property
    def has_data(self) -> bool:
        return self.count > 0
