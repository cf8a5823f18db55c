"""
Service layer for statistics and reporting.

Read-only aggregates over registrations, evaluations and sessions for
coordinators and report generators.  The service returns plain
dictionaries and does no formatting of its own; CSV or printed output
is the caller's concern.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from ..repositories import EvaluationRepository, RegistrationRepository, SessionRepository
from ..schemas.enums import RegistrationStatus, SessionStatus, SessionType
from ..schemas.evaluation import Evaluation

logger = logging.getLogger(__name__)

# Upper bounds (inclusive) of the score distribution bands
SCORE_BANDS = (20, 40, 60, 80, 100)


def _mean(values: List[int]) -> float:
    return sum(values) / len(values) if values else 0.0


class ReportService:
    """Service providing aggregated statistics for coordinators."""

    def __init__(
        self,
        sessions: SessionRepository,
        registrations: RegistrationRepository,
        evaluations: EvaluationRepository,
    ) -> None:
        self.sessions = sessions
        self.registrations = registrations
        self.evaluations = evaluations

    def registration_statistics(self) -> Dict[str, Any]:
        """Counts of registrations by status, type and assignment."""
        registrations = self.registrations.find_all()
        assigned = sum(1 for r in registrations if r.session_id is not None)
        logger.debug("Registration statistics over %s registrations", len(registrations))
        return {
            "total_registrations": len(registrations),
            "by_status": {
                status.value: sum(1 for r in registrations if r.status == status)
                for status in RegistrationStatus
            },
            "by_type": {
                kind.value: sum(1 for r in registrations if r.presentation_type == kind)
                for kind in SessionType
            },
            "assigned_count": assigned,
            "unassigned_count": len(registrations) - assigned,
        }

    def evaluation_summary(self) -> Dict[str, Any]:
        """Submission counts, per-criterion averages and a score histogram.

        Averages and the distribution only consider submitted
        evaluations.  The distribution counts totals in the bands
        0-20, 21-40, 41-60, 61-80 and 81-100.
        """
        evaluations = self.evaluations.find_all()
        submitted = [e for e in evaluations if e.submitted]
        logger.debug(
            "Evaluation summary over %s evaluations (%s submitted)", len(evaluations), len(submitted)
        )

        distribution = [0] * len(SCORE_BANDS)
        for evaluation in submitted:
            for index, upper in enumerate(SCORE_BANDS):
                if evaluation.total_score <= upper:
                    distribution[index] += 1
                    break

        averages = {
            criterion: _mean([getattr(e, criterion) for e in submitted])
            for criterion in Evaluation.CRITERIA
        }
        return {
            "total_evaluations": len(evaluations),
            "submitted_count": len(submitted),
            "pending_count": len(evaluations) - len(submitted),
            "average_total_score": _mean([e.total_score for e in submitted]),
            "average_by_criterion": averages,
            "score_distribution": distribution,
        }

    def session_attendance(self) -> Dict[str, Any]:
        """Capacity use per session and overall."""
        sessions = self.sessions.find_all()
        total_capacity = sum(s.capacity for s in sessions)
        total_registered = sum(s.registered for s in sessions)
        utilization = total_registered / total_capacity * 100 if total_capacity > 0 else 0.0
        logger.debug("Session attendance over %s sessions: %.1f%% used", len(sessions), utilization)

        details = [
            {
                "id": s.id,
                "date": s.date,
                "venue": s.venue,
                "type": s.type,
                "capacity": s.capacity,
                "registered": s.registered,
                "status": s.status,
                "available_slots": s.available_slots,
            }
            for s in sessions
        ]
        return {
            "total_sessions": len(sessions),
            "by_status": {
                status.value: sum(1 for s in sessions if s.status == status)
                for status in SessionStatus
            },
            "by_type": {
                kind.value: sum(1 for s in sessions if s.type == kind)
                for kind in SessionType
            },
            "total_capacity": total_capacity,
            "total_registered": total_registered,
            "utilization_rate": utilization,
            "session_details": details,
        }
