"""TutoringSession audit endpoints (audit logs, payouts)."""

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorescrow.api.auth import get_current_caller
from tutorescrow.api.tutoring_session_helpers import get_session
from tutorescrow.core.authorization import Role, authorize
from tutorescrow.core.db import get_db
from tutorescrow.models import Payout, PayoutRead, SessionAuditLog, SessionAuditLogRead

router = APIRouter(prefix="/tutoring-sessions", tags=["tutoring-sessions-audit"])


@router.get("/{session_id}/audit-logs", response_model=list[SessionAuditLogRead])
async def get_audit_logs(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Audit trail for a session, oldest first. Either party may read it."""
    session = await get_session(db, session_id)
    authorize(session, caller_id, Role.EITHER_PARTY, "view the audit trail of")

    stmt = (
        select(SessionAuditLog)
        .where(SessionAuditLog.session_id == session.id)
        .order_by(SessionAuditLog.changed_at.asc())
    )
    result = await db.execute(stmt)
    return result.scalars().all()


@router.get("/{session_id}/payouts", response_model=list[PayoutRead])
async def get_payouts(
    session_id: str,
    caller_id: str = Depends(get_current_caller),
    db: AsyncSession = Depends(get_db),
):
    """Every transfer paid out of this session's escrow."""
    session = await get_session(db, session_id)
    authorize(session, caller_id, Role.EITHER_PARTY, "view payouts of")

    stmt = (
        select(Payout)
        .where(Payout.session_id == session.id)
        .order_by(Payout.created_at.asc())
    )
    result = await db.execute(stmt)
    return result.scalars().all()
