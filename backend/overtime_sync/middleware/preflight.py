"""Middleware answering bare OPTIONS requests."""
from __future__ import annotations

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class PreflightMiddleware(BaseHTTPMiddleware):
    """Reply 200 with an empty body to any OPTIONS request.

    Proper CORS preflights are answered earlier by ``CORSMiddleware``; this
    covers clients that send OPTIONS without the preflight headers.
    """

    def __init__(
        self,
        app,
        allow_methods: str = "GET, POST, OPTIONS",
        allow_headers: str = "Content-Type, Authorization",
    ):
        super().__init__(app)
        self.allow_methods = allow_methods
        self.allow_headers = allow_headers

    async def dispatch(self, request: Request, call_next):
        if request.method != "OPTIONS":
            return await call_next(request)

        return Response(
            status_code=200,
            headers={
                "Access-Control-Allow-Methods": self.allow_methods,
                "Access-Control-Allow-Headers": self.allow_headers,
            },
        )
