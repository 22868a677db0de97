"""
Health endpoints for the redirect service.

- /health: database reachability, 200 or 503
- /health/ready: 200 once startup has finished and the database answers
- /health/live: 200 while the process is up

Static sources are decoded before the app exists, so only the database
can go bad at runtime.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from redirector.components.redirects import RedirectSourceError


@dataclass(frozen=True)
class CheckResult:
    name: str
    healthy: bool
    message: str
    latency_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


class StartupTracker:
    """Start time of one application instance."""

    def __init__(self) -> None:
        self._started_at: float | None = None

    def mark_started(self) -> None:
        self._started_at = time.monotonic()

    @property
    def started(self) -> bool:
        return self._started_at is not None

    @property
    def uptime_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return time.monotonic() - self._started_at


class DatabaseCheck:
    """
    Pings the ``urlmap`` table.

    With no ping function the database layer is disabled, which counts
    as healthy. Failure messages never include driver detail.
    """

    name = "database"

    def __init__(self, ping: Callable[[], None] | None = None) -> None:
        self._ping = ping

    def check(self) -> CheckResult:
        if self._ping is None:
            return CheckResult(self.name, healthy=True, message="Database not configured")

        start = time.perf_counter()
        try:
            self._ping()
        except RedirectSourceError:
            healthy, message = False, "Database unavailable"
        else:
            healthy, message = True, "Database connected"
        latency_ms = (time.perf_counter() - start) * 1000

        return CheckResult(self.name, healthy=healthy, message=message, latency_ms=latency_ms)


def create_health_router(
    database: DatabaseCheck,
    startup: StartupTracker,
    version: str = "0.0.0",
) -> APIRouter:
    """Router serving the three health endpoints."""
    router = APIRouter(tags=["health"])

    def _respond(ok: bool, content: dict[str, Any]) -> JSONResponse:
        code = status.HTTP_200_OK if ok else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=content, status_code=code)

    @router.get("/health", response_model=None)
    def health() -> JSONResponse:
        result = database.check()
        return _respond(
            result.healthy,
            {
                "status": "healthy" if result.healthy else "unhealthy",
                "version": version,
                "uptime_seconds": startup.uptime_seconds,
                "checks": [result.to_dict()],
            },
        )

    @router.get("/health/ready", response_model=None)
    def ready() -> JSONResponse:
        result = database.check()
        is_ready = startup.started and result.healthy
        return _respond(
            is_ready,
            {"ready": is_ready, "started": startup.started, "checks": [result.to_dict()]},
        )

    @router.get("/health/live", response_model=None)
    def live() -> JSONResponse:
        return _respond(True, {"alive": True, "uptime_seconds": startup.uptime_seconds})

    return router
