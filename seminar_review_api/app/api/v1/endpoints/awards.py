"""
Award endpoints for API v1.

Coordinators trigger the award calculation; the stored results are
public.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from seminar_review_api.app.container import ServiceContainer
from seminar_review_api.app.core.security import get_container, require_roles
from seminar_review_api.app.schemas.award import Award
from seminar_review_api.app.schemas.enums import AwardType, Role
from seminar_review_api.app.schemas.user import User


router = APIRouter()


@router.post("/calculate", response_model=List[Award])
def calculate_awards(
    current_user: User = Depends(require_roles(Role.COORDINATOR)),
    container: ServiceContainer = Depends(get_container),
) -> List[Award]:
    """Recompute every award category from the submitted evaluations.

    The previous results are replaced.  Tied registrations each
    receive the award.
    """
    return container.awards.calculate_awards()


@router.get("/", response_model=List[Award])
def list_awards(
    type: Optional[AwardType] = Query(None),
    container: ServiceContainer = Depends(get_container),
) -> List[Award]:
    if type is not None:
        return container.awards.by_type(type)
    return container.awards.all_awards()
