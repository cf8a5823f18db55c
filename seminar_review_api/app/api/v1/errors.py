"""
Translation of rule-engine errors into HTTP errors.
"""

from fastapi import HTTPException, status

from seminar_review_api.app.core.exceptions import (
    CapacityError,
    DuplicateAssignmentError,
    ImmutableRecordError,
    NotFoundError,
    TypeMismatchError,
    ValidationError,
)

_CONFLICTS = (CapacityError, DuplicateAssignmentError, ImmutableRecordError, TypeMismatchError)


def to_http_exception(exc: ValueError) -> HTTPException:
    """Map an engine error to the matching ``HTTPException``.

    ``AlreadySubmittedError`` is an ``ImmutableRecordError`` and maps to
    409 with it.  Plain ``ValueError``s become 400.
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, ValidationError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"field": exc.field, "message": exc.message},
        )
    if isinstance(exc, _CONFLICTS):
        return HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"error": type(exc).__name__, "message": str(exc)},
        )
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
