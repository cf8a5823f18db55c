"""
Pydantic model for awards.

Awards are not a single winner per category: several rows of the same
``type`` represent co-winners with equal scores.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .enums import AwardType


class Award(BaseModel):
    id: Optional[int] = None
    type: AwardType
    registration_id: int
    score: float
    awarded_at: datetime

    model_config = {
        "from_attributes": True,
    }
