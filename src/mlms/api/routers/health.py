"""Health check endpoints for Docker/Kubernetes probes.

Endpoints:
- /health       → status + database check + pool stats (200 healthy, 503 unhealthy)
- /health/live  → liveness probe, no dependency checks
"""

import logging
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from mlms import __version__

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthStatus(BaseModel):
    """Overall health status response."""

    status: str = Field(description="healthy or unhealthy")
    timestamp: str = Field(description="ISO timestamp of health check")
    version: str = Field(default=__version__, description="Application version")
    uptime_seconds: float | None = Field(default=None, description="Seconds since app started")
    checks: dict[str, Any] = Field(default_factory=dict, description="Component checks")


class LivenessStatus(BaseModel):
    """Simple liveness probe response."""

    status: str = Field(description="alive")
    timestamp: str = Field(description="ISO timestamp")


@router.get("/live", response_model=LivenessStatus)
async def liveness_probe() -> LivenessStatus:
    """Returns 200 whenever the process is up."""
    return LivenessStatus(status="alive", timestamp=datetime.now(UTC).isoformat())


@router.get("", response_model=HealthStatus)
async def health_check(request: Request) -> JSONResponse:
    """Health check with a database round trip."""
    checks: dict[str, Any] = {}
    db = getattr(request.app.state, "db", None)

    if db is None:
        checks["database"] = {"status": "error", "connected": False, "error": "Not initialized"}
    else:
        try:
            async with db.session_scope() as session:
                await session.execute(text("SELECT 1"))
            checks["database"] = {"status": "ok", "connected": True, "pool": db.get_pool_stats()}
        except SQLAlchemyError as e:
            logger.error("Health check database ping failed", extra={"error": str(e)})
            checks["database"] = {"status": "error", "connected": False, "error": "unreachable"}

    uptime = None
    startup_time = getattr(request.app.state, "startup_time", None)
    if startup_time is not None:
        uptime = (datetime.now(UTC) - startup_time).total_seconds()

    healthy = checks["database"]["status"] == "ok"
    response = HealthStatus(
        status="healthy" if healthy else "unhealthy",
        timestamp=datetime.now(UTC).isoformat(),
        uptime_seconds=uptime,
        checks=checks,
    )
    status_code = status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=status_code)
