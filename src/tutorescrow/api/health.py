"""
Health check endpoint for load balancers and orchestrators.

Reports uptime plus two dependency checks: database connectivity and
whether the escrow configuration in the environment parses.
"""

import time
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from tutorescrow.core.config import load_escrow_settings
from tutorescrow.core.db import get_db

router = APIRouter(tags=["health"])

# Set in lifespan
_app_start_time: datetime | None = None


def set_app_start_time(start_time: datetime) -> None:
    global _app_start_time
    _app_start_time = start_time


def get_uptime_seconds() -> int:
    if _app_start_time is None:
        return 0
    return int((datetime.now() - _app_start_time).total_seconds())


async def check_database(db: AsyncSession) -> dict[str, Any]:
    """Returns: {"status": "ok"|"down", "response_time_ms": N, "error": str (if down)}"""
    start = time.time()
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        return {
            "status": "down",
            "response_time_ms": int((time.time() - start) * 1000),
            "error": type(e).__name__,
        }
    return {
        "status": "ok",
        "response_time_ms": int((time.time() - start) * 1000),
    }


def check_escrow_config() -> dict[str, Any]:
    """Returns: {"status": "ok"|"invalid", "max_escrow": N|None, "error": str (if invalid)}"""
    try:
        settings = load_escrow_settings()
    except ValueError as e:
        return {"status": "invalid", "max_escrow": None, "error": str(e)}
    return {"status": "ok", "max_escrow": settings.max_escrow}


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Returns 200 with status 'degraded' when a dependency check fails.",
)
async def health_check(db: AsyncSession = Depends(get_db)) -> JSONResponse:
    """
    Example response (healthy):
        {
            "status": "ok",
            "uptime_seconds": 3600,
            "checks": {
                "database": {"status": "ok", "response_time_ms": 5},
                "escrow_config": {"status": "ok", "max_escrow": null}
            }
        }
    """
    checks = {
        "database": await check_database(db),
        "escrow_config": check_escrow_config(),
    }
    overall_status = "ok" if all(c["status"] == "ok" for c in checks.values()) else "degraded"

    return JSONResponse(
        content={
            "status": overall_status,
            "uptime_seconds": get_uptime_seconds(),
            "checks": checks,
        },
        status_code=status.HTTP_200_OK,
    )
