"""ASGI middleware: request body size cap and request logging."""

import time
from typing import Callable

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from src.bfhl.schemas import ErrorEnvelope


logger = structlog.get_logger("http")

BODY_TOO_LARGE_MESSAGE = "Request body too large"


class BodyTooLargeError(Exception):
    """Raised when the request body exceeds the configured limit."""
    pass


class MaxBodySizeMiddleware:
    """Reject requests that exceed the configured body size limit."""

    def __init__(self, app: ASGIApp, max_body_size: int, identity: str = "") -> None:
        """Initialize the middleware with an app and size cap.

        Args:
            app: The downstream ASGI application.
            max_body_size: Maximum allowed request body size in bytes.
            identity: Identity echoed in the rejection envelope.
        """
        self.app = app
        self.max_body_size = max_body_size
        self.identity = identity

    def _too_large(self) -> JSONResponse:
        return JSONResponse(
            status_code=413,
            content=ErrorEnvelope.build(self.identity, BODY_TOO_LARGE_MESSAGE).model_dump(),
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        for header, value in scope.get("headers", []):
            if header == b"content-length":
                try:
                    size = int(value)
                except ValueError:
                    size = self.max_body_size + 1
                if size > self.max_body_size:
                    await self._too_large()(scope, receive, send)
                    return

        received = 0

        async def receive_wrapper():
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise BodyTooLargeError()
            return message

        try:
            await self.app(scope, receive_wrapper, send)
        except BodyTooLargeError:
            await self._too_large()(scope, receive, send)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one structured event per completed request."""
    
    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        return response
