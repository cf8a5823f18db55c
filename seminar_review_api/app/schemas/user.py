"""
Pydantic models for user data.

Students, evaluators and coordinators share one record type with a
``role`` tag.  Role-specific attributes are optional fields that are
simply left empty for the other roles.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .enums import Role


class UserBase(BaseModel):
    username: Optional[str] = Field(None, examples=["jdoe"])
    name: Optional[str] = Field(None, examples=["Jane Doe"])
    email: Optional[str] = Field(None, examples=["jane@example.edu"])
    role: Optional[Role] = Field(None, examples=["STUDENT"])

    # Students
    student_number: Optional[str] = None
    program: Optional[str] = None
    supervisor: Optional[str] = None
    # Evaluators
    department: Optional[str] = None
    expertise: Optional[str] = None
    # Coordinators
    staff_id: Optional[str] = None


class UserCreate(UserBase):
    """Schema for creating a user."""


class User(UserBase):
    id: Optional[int] = None

    model_config = {
        "from_attributes": True,
    }
