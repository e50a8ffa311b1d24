"""Environment-driven escrow configuration."""

import os

from pydantic import BaseModel, Field

from tutorescrow.core.logging import get_logger

logger = get_logger(__name__)


class EscrowSettings(BaseModel):
    """Runtime knobs for the escrow ledger."""

    max_escrow: int | None = Field(
        None, gt=0, description="Upper bound on a session's escrow balance (None = uncapped)"
    )


def load_escrow_settings() -> EscrowSettings:
    """Build settings from MAX_ESCROW. Unset or blank means no cap."""
    raw = os.getenv("MAX_ESCROW", "").strip()
    if not raw:
        return EscrowSettings()

    try:
        max_escrow = int(raw)
    except ValueError as exc:
        raise ValueError(f"MAX_ESCROW must be an integer, got {raw!r}") from exc

    logger.info("config.escrow_cap", max_escrow=max_escrow)
    return EscrowSettings(max_escrow=max_escrow)
