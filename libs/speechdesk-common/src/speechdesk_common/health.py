"""Health check endpoint factory for FastAPI services."""

from __future__ import annotations

import time
from collections.abc import Callable

from fastapi import APIRouter
from fastapi.responses import JSONResponse


def create_health_router(
    service_name: str,
    version: str,
    check_fn: Callable[[], tuple[bool, str]] | None = None,
) -> APIRouter:
    """Create a health check router with uptime tracking.

    Args:
        service_name: Name of the service.
        version: Version string.
        check_fn: Optional callable returning ``(ok, message)``; a failed
            check turns the response into a 500.
    """
    router = APIRouter()
    start_time = time.time()

    @router.get("/health")
    def health() -> JSONResponse:
        result = {
            "status": "ok",
            "service": service_name,
            "version": version,
            "uptime_seconds": round(time.time() - start_time, 1),
        }
        status_code = 200
        if check_fn is not None:
            ok, message = check_fn()
            result["message"] = message
            if not ok:
                result["status"] = "error"
                status_code = 500
        return JSONResponse(status_code=status_code, content=result)

    return router
