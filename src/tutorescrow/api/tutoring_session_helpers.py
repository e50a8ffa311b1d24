"""Helpers shared by tutoring session endpoints: loading, settling, auditing."""

from uuid import UUID

from fastapi import Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tutorescrow.core.audit import log_session_edit
from tutorescrow.core.config import EscrowSettings, load_escrow_settings
from tutorescrow.core.db import get_db
from tutorescrow.core.errors import NotFoundError
from tutorescrow.core.lifecycle import Outcome
from tutorescrow.core.logging import get_logger
from tutorescrow.core.transfers import DatabaseTransferGateway, TransferGateway
from tutorescrow.models import TutoringSession
from tutorescrow.utils.datetime import Clock, now_utc

logger = get_logger(__name__)


def get_clock() -> Clock:
    """Time source for deadline checks. Overridden in tests."""
    return now_utc


def get_escrow_settings() -> EscrowSettings:
    return load_escrow_settings()


def get_transfer_gateway(db: AsyncSession = Depends(get_db)) -> TransferGateway:
    return DatabaseTransferGateway(db)


def _parse_session_uuid(session_id: str) -> UUID:
    try:
        return UUID(session_id)
    except ValueError:
        raise NotFoundError("TutoringSession", session_id) from None


async def get_session(db: AsyncSession, session_id: str) -> TutoringSession:
    """Load a session for reading."""
    stmt = select(TutoringSession).where(TutoringSession.id == _parse_session_uuid(session_id))
    result = await db.execute(stmt)
    session = result.scalar_one_or_none()

    if not session:
        raise NotFoundError("TutoringSession", session_id)

    return session


async def get_session_for_update(db: AsyncSession, session_id: str) -> TutoringSession:
    """Load a session with a row lock held until the request's transaction ends."""
    stmt = (
        select(TutoringSession)
        .where(TutoringSession.id == _parse_session_uuid(session_id))
        .with_for_update()
    )
    result = await db.execute(stmt)
    session = result.scalar_one_or_none()

    if not session:
        raise NotFoundError("TutoringSession", session_id)

    return session


async def commit_outcome(
    db: AsyncSession,
    session: TutoringSession,
    caller_id: str,
    outcome: Outcome,
    gateway: TransferGateway,
) -> TutoringSession:
    """Pay out any settlement, write the audit row and flush, all in one transaction."""
    if outcome.settlement is not None:
        await gateway.transfer(session, outcome.settlement)

    await log_session_edit(db, session, caller_id, outcome)

    db.add(session)
    await db.flush()
    await db.refresh(session)

    logger.info(
        f"session.{outcome.action.value.lower()}",
        session_id=str(session.id),
        state=session.state,
        escrow=session.escrow,
        transferred=outcome.settlement.amount if outcome.settlement else 0,
        recipient_id=outcome.settlement.recipient_id if outcome.settlement else None,
    )

    return session
