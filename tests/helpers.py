"""Builders shared by the test modules."""
import datetime as dt
from typing import Optional

from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.schemas import Evaluation, Registration, Session, SessionType


def make_session(
    container: ServiceContainer,
    session_type: SessionType = SessionType.ORAL,
    capacity: int = 2,
    venue: str = "Hall A",
) -> Session:
    return container.sessions.create(
        Session(
            date=dt.date(2026, 3, 10),
            start_time=dt.time(9, 0),
            end_time=dt.time(11, 0),
            venue=venue,
            type=session_type,
            capacity=capacity,
        )
    )


def make_registration(
    container: ServiceContainer,
    presentation_type: SessionType = SessionType.ORAL,
    student_id: int = 1,
    title: str = "Scheduling with constraint programming",
) -> Registration:
    return container.registrations.register(
        Registration(
            student_id=student_id,
            research_title=title,
            abstract_text="We study timetabling as a constraint satisfaction problem.",
            supervisor_name="Dr. Lee",
            presentation_type=presentation_type,
        )
    )


def submit_scores(
    container: ServiceContainer,
    evaluator_id: int,
    registration_id: int,
    scores: tuple,
    comments: Optional[str] = None,
) -> Evaluation:
    """Assign, score and submit one evaluation in a single step."""
    assigned = container.evaluations.assign_evaluator(evaluator_id, registration_id)
    problem_clarity, methodology, results, presentation_quality = scores
    draft = assigned.model_copy(
        update={
            "problem_clarity": problem_clarity,
            "methodology": methodology,
            "results": results,
            "presentation_quality": presentation_quality,
            "comments": comments,
        }
    )
    container.evaluations.save_evaluation(draft)
    return container.evaluations.submit_evaluation(assigned.id)
