"""Caller identity dependency.

Authentication happens upstream: the proxy in front of this service verifies
the caller and forwards its identity in the X-Caller-Id header.
"""

from fastapi import HTTPException, Request, status

from tutorescrow.core.logging import get_logger, set_caller_id
from tutorescrow.core.validators import validate_caller_id

logger = get_logger(__name__)

CALLER_HEADER = "X-Caller-Id"


async def get_current_caller(request: Request) -> str:
    """Dependency to get the verified caller identity for this request."""
    raw = request.headers.get(CALLER_HEADER)

    if not raw:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        caller_id = validate_caller_id(raw)
    except ValueError as exc:
        logger.warning("auth.invalid_caller", error=str(exc))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid caller identity",
        ) from None

    set_caller_id(caller_id)
    return caller_id
