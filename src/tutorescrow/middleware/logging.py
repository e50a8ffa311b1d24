"""Request ID injection and access logging middleware."""

import time
import uuid

import structlog
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from tutorescrow.core.logging import get_logger, set_request_id

REQUEST_ID_HEADER = b"x-request-id"

# Longer client-supplied IDs are replaced, not truncated
MAX_REQUEST_ID_LENGTH = 128


def incoming_request_id(scope: Scope) -> str | None:
    """The client's X-Request-ID if present and usable."""
    for name, value in scope.get("headers", []):
        if name.lower() != REQUEST_ID_HEADER:
            continue
        request_id = value.decode("latin1").strip()
        if request_id and len(request_id) <= MAX_REQUEST_ID_LENGTH:
            return request_id
        return None
    return None


class RequestIDMiddleware:
    """
    Bind a request ID to every log line of a request and echo it back.

    Uses the client's X-Request-ID when it sends a usable one, else a fresh
    UUID. Emits request.start and request.complete (with duration).
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Caller IDs bound by the previous request must not leak into this one
        structlog.contextvars.clear_contextvars()

        request_id = incoming_request_id(scope) or str(uuid.uuid4())
        set_request_id(request_id)

        started = time.perf_counter()
        self.logger.info("request.start", method=scope["method"], path=scope["path"])

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode("latin1")),
                ]
                self.logger.info(
                    "request.complete",
                    status_code=message.get("status"),
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
            await send(message)

        await self.app(scope, receive, send_with_request_id)
