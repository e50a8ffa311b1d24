# File: src/tutorescrow/models/tutoring_session_schemas.py
"""Pydantic schemas for TutoringSession API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


# Request bodies carry types only; emptiness and range checks run in
# tutorescrow.core.lifecycle after the role and state checks.


class TutoringSessionCreate(BaseModel):
    """Schema for booking a new session."""

    description: str
    learning_objectives: str
    materials: list[str]
    price: int = Field(..., description="Advisory price in the smallest currency unit")


class TeacherRequest(BaseModel):
    """Accept a session. teacher_id defaults to the caller."""

    teacher_id: str | None = None


class ResolveRequest(BaseModel):
    to_teacher: bool = Field(..., description="Pay the escrow to the teacher (else refund)")


class FundsDeposit(BaseModel):
    amount: int


class DescriptionUpdate(BaseModel):
    description: str


class ObjectivesUpdate(BaseModel):
    learning_objectives: str


class MaterialsUpdate(BaseModel):
    materials: list[str]


class PriceUpdate(BaseModel):
    price: int


class FeedbackCreate(BaseModel):
    """Free text, stored as given. Escaping is the renderer's job."""

    feedback: str


class RatingCreate(BaseModel):
    rating: int = Field(..., description="1 (worst) to 5 (best)")


class DeadlinesSet(BaseModel):
    """Replace both deadlines. A null value clears that deadline."""

    session_deadline: datetime | None = None
    assignment_deadline: datetime | None = None


class DeadlinesUpdate(BaseModel):
    """Change only the deadlines that are supplied."""

    session_deadline: datetime | None = Field(None, description="Omit to keep current")
    assignment_deadline: datetime | None = Field(None, description="Omit to keep current")


class TutoringSessionRead(BaseModel):
    """Schema for reading a tutoring session from the database."""

    id: UUID
    student_id: str
    teacher_id: str | None
    state: str

    description: str
    learning_objectives: str
    materials: list[str]

    price: int
    escrow: int
    progress: int
    feedback: str | None
    rating: int | None

    session_deadline: datetime | None
    assignment_deadline: datetime | None

    created_at: datetime
    last_modified_at: datetime | None = None
    last_modified_by: str | None = None

    # Calculated properties
    scheduled: bool = Field(...)
    disputed: bool = Field(...)

    model_config = ConfigDict(from_attributes=True)


class PayoutRead(BaseModel):
    id: UUID
    session_id: UUID
    recipient_id: str
    amount: int
    reason: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SessionAuditLogRead(BaseModel):
    id: UUID
    session_id: UUID
    changed_by: str
    changed_at: datetime
    action: str
    changed_fields: list[str]
    old_values: dict
    new_values: dict
    reason: str | None = None

    model_config = ConfigDict(from_attributes=True)
