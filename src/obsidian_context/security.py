"""Access control for the context search server."""

from __future__ import annotations

import hmac
from collections.abc import Awaitable, Callable

from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

HEALTH_PATH = "/mcp/health"
SECRET_HEADER = "x-mcp-secret"


class SharedSecretMiddleware(BaseHTTPMiddleware):
    """Reject requests that do not carry the configured shared secret."""

    def __init__(self, app: ASGIApp, secret: str) -> None:
        super().__init__(app)
        if not secret:
            raise ValueError("Shared secret must be configured")
        self._secret = secret.encode("utf-8")

    def is_authorized(self, request: Request) -> bool:
        if request.url.path == HEALTH_PATH:
            return True
        provided = request.headers.get(SECRET_HEADER, "")
        return bool(provided) and hmac.compare_digest(provided.encode("utf-8"), self._secret)

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if not self.is_authorized(request):
            return JSONResponse({"detail": "Unauthorized"}, status_code=401)
        return await call_next(request)


def build_security_middleware(secret: str | None) -> list[Middleware]:
    """Create the middleware stack for the HTTP transport.

    CORS is always enabled. With a *secret*, every request except the health
    check must present it in the ``x-mcp-secret`` header.
    """

    middleware: list[Middleware] = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
    ]

    if secret:
        middleware.insert(0, Middleware(SharedSecretMiddleware, secret=secret))

    return middleware
