# File: src/tutorescrow/models/tutoring_session.py
"""TutoringSession model: one booking from request through settlement."""

import uuid
from datetime import datetime

from sqlalchemy import JSON, BigInteger, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from tutorescrow.core.db import Base
from tutorescrow.models.enums import SessionState
from tutorescrow.utils.datetime import now_utc


class TutoringSession(Base):
    """Booking record with escrowed funds.

    The lifecycle lives in ``state``; ``scheduled`` and ``disputed`` are
    derived from it so illegal flag combinations cannot be stored.
    """

    __tablename__ = "tutoring_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    # Booking owner, fixed at creation
    student_id: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        index=True,
    )

    # Present once a teacher has accepted
    teacher_id: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        index=True,
    )

    state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionState.OPEN.value,
        index=True,
    )

    # Content
    description: Mapped[str] = mapped_column(Text, nullable=False)
    learning_objectives: Mapped[str] = mapped_column(Text, nullable=False)
    materials: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Advisory price; escrow is what is actually held
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    escrow: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    feedback: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)

    session_deadline: Mapped[datetime | None] = mapped_column(nullable=True)
    assignment_deadline: Mapped[datetime | None] = mapped_column(nullable=True)

    # Audit fields
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)
    last_modified_at: Mapped[datetime | None] = mapped_column(nullable=True)
    last_modified_by: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # CALCULATED PROPERTIES
    @property
    def session_state(self) -> SessionState:
        return SessionState(self.state)

    @property
    def scheduled(self) -> bool:
        """Teacher has committed to deliver."""
        return self.state == SessionState.SCHEDULED.value

    @property
    def disputed(self) -> bool:
        """A dispute is open and awaiting resolution."""
        return self.state == SessionState.DISPUTED.value

    def __repr__(self) -> str:
        return (
            f"<TutoringSession(id={self.id}, student_id={self.student_id}, "
            f"teacher_id={self.teacher_id}, state={self.state}, escrow={self.escrow})>"
        )
