"""
Middleware for request correlation ID tracking.

This middleware adds correlation IDs to requests so that every log line
emitted while resolving a GraphQL operation can be tied back to it. It
also opens a fresh structured log context for each request.
"""

import uuid
from contextvars import ContextVar
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

# Context variable for storing correlation ID per request
correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")

# Extra structured log fields (user_id, username) bound to the request
log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


class CorrelationIDMiddleware(BaseHTTPMiddleware):  # type: ignore[misc]
    """
    Middleware to add correlation IDs to requests.

    This middleware:
    - Extracts correlation ID from X-Correlation-ID header or generates new 8-char UUID
    - Stores correlation ID in request.state.request_id
    - Binds the ID and an empty log context for the duration of the request
    - Adds correlation ID to response headers for client tracking
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[no-untyped-def]
        """
        Process request and add correlation ID.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            Response with X-Correlation-ID header added.
        """
        cid = request.headers.get("X-Correlation-ID", str(uuid.uuid4())[:8])
        cid = cid[:8]

        request.state.request_id = cid
        cid_token = correlation_id.set(cid)
        context_token = log_context.set({})

        try:
            response = await call_next(request)
        finally:
            log_context.reset(context_token)
            correlation_id.reset(cid_token)

        response.headers["X-Correlation-ID"] = cid

        return response
