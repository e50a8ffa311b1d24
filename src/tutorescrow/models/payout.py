"""Payout model: the durable side of every escrow transfer."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import BigInteger, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tutorescrow.core.db import Base
from tutorescrow.utils.datetime import now_utc

if TYPE_CHECKING:
    from tutorescrow.models.tutoring_session import TutoringSession


class Payout(Base):
    """Funds moved out of a session's escrow to a named recipient."""

    __tablename__ = "payouts"

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

    recipient_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    reason: Mapped[str] = mapped_column(String(30), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=now_utc)

    def __repr__(self) -> str:
        return (
            f"<Payout(session_id={self.session_id}, recipient_id={self.recipient_id}, "
            f"amount={self.amount}, reason={self.reason})>"
        )
