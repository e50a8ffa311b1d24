"""Transfer primitive: moves withdrawn escrow to a named recipient."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from tutorescrow.core.lifecycle import Settlement
from tutorescrow.core.logging import get_logger
from tutorescrow.models.payout import Payout
from tutorescrow.models.tutoring_session import TutoringSession

logger = get_logger(__name__)


class TransferGateway(Protocol):
    """Anything that can pay a settlement out of a session."""

    async def transfer(self, session: TutoringSession, settlement: Settlement) -> Payout: ...


class DatabaseTransferGateway:
    """Records payouts in the request's own transaction.

    The escrow withdrawal and the payout row commit or roll back together,
    so a failed request can never leave funds withdrawn but not paid.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def transfer(self, session: TutoringSession, settlement: Settlement) -> Payout:
        payout = Payout(
            session_id=session.id,
            recipient_id=settlement.recipient_id,
            amount=settlement.amount,
            reason=settlement.reason.value,
        )
        self.db.add(payout)

        logger.info(
            "escrow.transferred",
            session_id=str(session.id),
            recipient_id=settlement.recipient_id,
            amount=settlement.amount,
            reason=settlement.reason.value,
        )
        return payout
