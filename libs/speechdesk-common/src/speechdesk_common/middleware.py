"""Common FastAPI middleware for speechdesk services."""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from .logging import get_logger

log = get_logger(__name__)


def add_common_middleware(app: FastAPI, allowed_origins: list[str] | None = None) -> None:
    """Add CORS and request context middleware to a FastAPI app."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        """Bind request ID, method and path to structlog context; log one line per request."""
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id, method=request.method, path=request.url.path)
        started = time.perf_counter()
        try:
            response: Response = await call_next(request)
            log.info(
                "request_handled",
                status=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "method", "path")
        response.headers["x-request-id"] = request_id
        return response
