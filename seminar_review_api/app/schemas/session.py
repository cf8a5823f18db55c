"""
Pydantic models for presentation sessions.

``SessionBase`` contains the fields a coordinator edits;
``SessionCreate`` is the request payload and ``Session`` is the stored
entity, which adds the engine-managed ``registered`` counter and
``status``.  Required fields are declared optional here on purpose:
presence is checked by ``SessionService`` so that a missing value is
reported as a field-level ``ValidationError`` of the engine.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from .enums import SessionStatus, SessionType


class SessionBase(BaseModel):
    date: Optional[dt.date] = Field(None, examples=["2026-03-10"])
    start_time: Optional[dt.time] = Field(None, examples=["09:00"])
    end_time: Optional[dt.time] = Field(None, examples=["11:00"])
    venue: Optional[str] = Field(None, examples=["Hall A"])
    type: Optional[SessionType] = Field(None, examples=["ORAL"])
    capacity: int = Field(0, examples=[10])
    description: Optional[str] = None


class SessionCreate(SessionBase):
    """Schema for creating or updating a session."""

    status: Optional[SessionStatus] = None


class Session(SessionBase):
    """A capacity-bounded presentation session."""

    id: Optional[int] = None
    registered: int = 0
    status: Optional[SessionStatus] = SessionStatus.OPEN

    model_config = {
        "from_attributes": True,
    }

    def has_available_slots(self) -> bool:
        return self.registered < self.capacity and self.status == SessionStatus.OPEN

    @property
    def available_slots(self) -> int:
        return max(self.capacity - self.registered, 0)


class SessionStatusUpdate(BaseModel):
    """Schema for a coordinator status override."""

    status: SessionStatus
