"""
Error taxonomy of the review workflow engine.

Every error derives from ``SeminarError`` which itself is a
``ValueError``; callers that only distinguish "bad request" from
"server error" can keep catching ``ValueError``.  Errors are raised
before anything is written to the record store.
"""

from typing import Any, Optional


class SeminarError(ValueError):
    """Base class for all rule-engine errors."""


class ValidationError(SeminarError):
    """Input violates a field constraint.

    ``field`` names the offending attribute (e.g. ``"abstract_text"``).
    """

    def __init__(self, field: str, message: Optional[str] = None) -> None:
        self.field = field
        self.message = message or f"Invalid value for {field}"
        super().__init__(self.message)


class NotFoundError(SeminarError):
    """A referenced id does not exist in the store."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} not found: {entity_id}")


class CapacityError(SeminarError):
    """The session has no free slot or is not open."""


class TypeMismatchError(SeminarError):
    """Registration and session presentation types differ."""


class DuplicateAssignmentError(SeminarError):
    """The evaluator is already assigned to the registration."""


class ImmutableRecordError(SeminarError):
    """Attempted mutation of a submitted evaluation."""


class AlreadySubmittedError(ImmutableRecordError):
    """The evaluation was submitted before."""
