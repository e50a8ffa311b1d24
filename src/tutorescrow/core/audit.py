"""Audit logging utilities for tracking TutoringSession changes."""

from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from tutorescrow.core.lifecycle import Outcome
from tutorescrow.models.session_audit_log import SessionAuditLog
from tutorescrow.models.tutoring_session import TutoringSession
from tutorescrow.utils.datetime import now_utc


def serialize_value(v: Any) -> Any:
    """Make a tracked value JSON-safe."""
    if isinstance(v, datetime):
        return v.isoformat()
    return v


async def log_session_edit(
    db: AsyncSession,
    session: TutoringSession,
    changed_by: str,
    outcome: Outcome,
    reason: str | None = None,
) -> SessionAuditLog:
    """Log a TutoringSession operation to the audit trail.

    Args:
        db: Database session
        session: The TutoringSession being modified
        changed_by: Caller identity that performed the operation
        outcome: What the lifecycle operation changed
        reason: Optional free-text reason

    Returns:
        Created SessionAuditLog record
    """
    changed_fields = list(outcome.new_values.keys())

    audit_log = SessionAuditLog(
        session_id=session.id,
        changed_by=changed_by,
        action=outcome.action.value,
        changed_fields=changed_fields,
        old_values={k: serialize_value(outcome.old_values.get(k)) for k in changed_fields},
        new_values={k: serialize_value(outcome.new_values.get(k)) for k in changed_fields},
        reason=reason,
        changed_at=now_utc(),
    )

    db.add(audit_log)
    return audit_log
