"""Audit logging model for TutoringSession operations."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutorescrow.core.db import Base
from tutorescrow.utils.datetime import now_utc

if TYPE_CHECKING:
    from tutorescrow.models.tutoring_session import TutoringSession


class SessionAuditLog(Base):
    """Immutable audit trail for all TutoringSession modifications."""

    __tablename__ = "session_audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tutoring_sessions.id"),
        nullable=False,
        index=True,
    )

    session: Mapped["TutoringSession"] = relationship(
        "TutoringSession",
        foreign_keys=[session_id],
    )

    # WHO
    changed_by: Mapped[str] = mapped_column(String(100), nullable=False)

    # WHEN
    changed_at: Mapped[datetime] = mapped_column(
        default=now_utc,
    )

    # WHAT
    action: Mapped[str] = mapped_column(String(20), nullable=False)

    # WHICH FIELDS
    changed_fields: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    # OLD/NEW VALUES
    old_values: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )
    new_values: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    reason: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return (
            f"<SessionAuditLog(session_id={self.session_id}, "
            f"action={self.action}, changed_by={self.changed_by})>"
        )
