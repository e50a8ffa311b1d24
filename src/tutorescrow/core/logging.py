"""Structured logging configuration with JSON output and context injection."""

import contextvars
import logging
import logging.config

import structlog

# Context vars for request/caller IDs (thread-safe for async)
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="no-request-id"
)
caller_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "caller_id", default=None
)


def get_request_id() -> str:
    """Get current request ID from context."""
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    """Set request ID for current context and every log line emitted in it."""
    request_id_var.set(request_id)
    structlog.contextvars.bind_contextvars(request_id=request_id)


def get_caller_id() -> str | None:
    """Get the caller identity bound to the current request, if any."""
    return caller_id_var.get()


def set_caller_id(caller_id: str) -> None:
    """Set caller ID for current context."""
    caller_id_var.set(caller_id)
    structlog.contextvars.bind_contextvars(caller_id=caller_id)


def configure_logging() -> None:
    """Configure structlog with JSON output for production."""
    structlog.configure(
        processors=[
            # Inject request/caller IDs into every log
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (uvicorn, sqlalchemy) through structlog's formatter
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": structlog.dev.ConsoleRenderer(),
                },
            },
            "handlers": {
                "default": {
                    "level": "DEBUG",
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": "ext://sys.stdout",
                },
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": "INFO",
                    "propagate": True,
                }
            },
        }
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structlog logger; request/caller IDs are merged in from context."""
    return structlog.get_logger(name)
