"""Error taxonomy and JSON error responses for speechdesk services.

Every error leaves the service as ``{"error": "<message>"}`` with a status
code chosen by the exception kind.
"""

from __future__ import annotations

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .logging import get_logger

log = get_logger(__name__)


class SpeechdeskError(Exception):
    """Base class for errors raised by speechdesk components."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(SpeechdeskError):
    """Missing or malformed input."""

    status_code = 400


class NotFoundError(SpeechdeskError):
    status_code = 404


class ProviderError(SpeechdeskError):
    """The speech synthesis provider rejected or failed the call."""

    status_code = 500


class PersistenceError(SpeechdeskError):
    """A store write failed."""

    status_code = 500


def error_response(message: str, status_code: int = 500) -> JSONResponse:
    """Create a JSON error response."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def speechdesk_error_handler(request: Request, exc: SpeechdeskError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("request_failed", path=request.url.path, kind=type(exc).__name__, error=exc.message)
    return error_response(exc.message, exc.status_code)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return error_response("; ".join(parts) or "Invalid request", 400)


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers that turn every failure into a JSON error body.

    Call before ``add_common_middleware`` so that the catch-all sits inside
    the CORS layer and error responses still carry CORS headers.
    """
    app.add_exception_handler(SpeechdeskError, speechdesk_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.middleware("http")
    async def unexpected_error_middleware(request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            log.exception("unexpected_error", path=request.url.path)
            return error_response(f"An unexpected error occurred: {exc}", 500)
