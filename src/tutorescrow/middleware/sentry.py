"""Sentry context middleware to capture request context in error reports."""

import sentry_sdk
from starlette.types import ASGIApp, Receive, Scope, Send

from tutorescrow.api.auth import CALLER_HEADER
from tutorescrow.core.logging import get_request_id


class SentryContextMiddleware:
    """
    Tag Sentry events with the request ID and caller identity.

    Runs inside RequestIDMiddleware, so the request ID is already in context.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        caller_header = CALLER_HEADER.lower().encode()
        caller_id = None
        for name, value in scope.get("headers", []):
            if name.lower() == caller_header:
                caller_id = value.decode("latin1")
                break

        request_id = get_request_id()
        sentry_sdk.set_tag("request_id", request_id)
        if caller_id:
            sentry_sdk.set_user({"id": caller_id})

        sentry_sdk.set_context(
            "request",
            {
                "method": scope.get("method"),
                "path": scope.get("path"),
                "request_id": request_id,
            },
        )

        await self.app(scope, receive, send)
