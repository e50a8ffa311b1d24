"""Sentry error tracking configuration and initialization."""

import os

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.utils import BadDsn

from tutorescrow.core.logging import get_logger

logger = get_logger(__name__)

_sentry_initialized = False

# Event keys that may carry amounts or free text written by students
_SENSITIVE_KEYS = ("feedback", "description", "learning_objectives", "materials", "sql")


def init_sentry() -> bool:
    """
    Initialize Sentry SDK for error tracking.

    Only initializes if SENTRY_DSN is set and looks like a URL; a missing or
    placeholder DSN leaves error tracking off. Safe to call more than once.

    Returns:
        True if Sentry is active after the call
    """
    global _sentry_initialized

    if _sentry_initialized:
        return True

    sentry_dsn = (os.getenv("SENTRY_DSN") or "").strip()
    if not sentry_dsn:
        logger.info("sentry.disabled", message="Sentry DSN not found, error tracking disabled")
        return False

    if not sentry_dsn.startswith(("https://", "http://")):
        logger.info(
            "sentry.disabled",
            message="Sentry DSN appears to be a placeholder, error tracking disabled",
        )
        return False

    environment = os.getenv("ENVIRONMENT", "development")

    try:
        sentry_sdk.init(
            dsn=sentry_dsn,
            environment=environment,
            traces_sample_rate=0.0,
            send_default_pii=False,
            integrations=[
                FastApiIntegration(transaction_style="endpoint"),
                # structlog already emits every log line
                LoggingIntegration(level=None, event_level=None),
            ],
            before_send=filter_sensitive_data,
        )
    except BadDsn as exc:
        logger.warning(
            "sentry.init_failed",
            message="Failed to initialize Sentry due to invalid DSN, error tracking disabled",
            error=str(exc),
        )
        return False

    _sentry_initialized = True
    logger.info("sentry.initialized", environment=environment)
    return True


def filter_sensitive_data(event: dict, hint: dict) -> dict:
    """Drop session content and SQL from the event's extra data and breadcrumbs."""
    extra = event.get("extra")
    if isinstance(extra, dict):
        event["extra"] = {
            key: value
            for key, value in extra.items()
            if not any(marker in str(key).lower() for marker in _SENSITIVE_KEYS)
        }

    breadcrumbs = event.get("breadcrumbs")
    if isinstance(breadcrumbs, dict):
        # SDK 2.x wraps breadcrumbs as {"values": [...]}
        values = breadcrumbs.get("values", [])
        breadcrumbs["values"] = [b for b in values if not _mentions_sql(b)]
    elif isinstance(breadcrumbs, list):
        event["breadcrumbs"] = [b for b in breadcrumbs if not _mentions_sql(b)]

    return event


def _mentions_sql(breadcrumb) -> bool:
    message = breadcrumb.get("message", "") if isinstance(breadcrumb, dict) else breadcrumb
    return "sql" in str(message).lower()
