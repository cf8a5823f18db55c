"""
Pydantic models for presentation registrations.

A registration is created ``PENDING`` by a student and later approved,
rejected, cancelled or assigned to a session by the engine.  Length
limits live on the ``Registration`` model as class constants so the
service and its callers agree on them.
"""

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import BaseModel, Field

from .enums import RegistrationStatus, SessionType


class RegistrationBase(BaseModel):
    research_title: Optional[str] = Field(None, examples=["Graph neural networks for timetabling"])
    abstract_text: Optional[str] = None
    supervisor_name: Optional[str] = Field(None, examples=["Dr. Lee"])
    presentation_type: Optional[SessionType] = Field(None, examples=["POSTER"])
    file_path: Optional[str] = None
    # Poster board, only meaningful for POSTER presentations
    board_id: Optional[str] = None


class RegistrationCreate(RegistrationBase):
    """Schema for registering a presentation."""

    student_id: Optional[int] = Field(None, examples=[1])


class RegistrationUpdate(RegistrationBase):
    """Schema for editing the descriptive fields of a registration."""


class Registration(RegistrationBase):
    """A student's presentation registration."""

    MAX_TITLE_LENGTH: ClassVar[int] = 200
    MAX_ABSTRACT_LENGTH: ClassVar[int] = 1000

    id: Optional[int] = None
    student_id: Optional[int] = None
    session_id: Optional[int] = None
    status: RegistrationStatus = RegistrationStatus.PENDING
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }

    @property
    def is_assigned(self) -> bool:
        return self.session_id is not None


class SessionAssignment(BaseModel):
    session_id: int


class FilePathUpdate(BaseModel):
    file_path: Optional[str] = None


class BoardAssignment(BaseModel):
    board_id: str
