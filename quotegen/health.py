"""
Health check endpoints for Quotegen.

Endpoints:
- GET /health - Basic liveness (always 200 if running)
- GET /health/ready - Readiness (client configured, last upstream call not failed)
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from .metrics import QuoteMetrics, get_metrics

# Track startup time
_startup_time = time.time()

VERSION = "0.1.0"


class HealthResponse(BaseModel):
    """Basic health response."""
    status: str
    timestamp: str
    uptime_seconds: int


class ReadinessResponse(BaseModel):
    """Readiness check response."""
    status: str
    timestamp: str
    checks: dict


router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Basic liveness check."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc).isoformat(),
        uptime_seconds=int(time.time() - _startup_time),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    request: Request,
    metrics: QuoteMetrics = Depends(get_metrics),
):
    """
    Readiness check for load balancers.

    Ready once the OpenRouter client has been built (API key and model
    configured) and the last finished fetch did not fail. Before any fetch
    has finished the upstream check passes.
    """
    checks = {
        "openrouter_configured": getattr(request.app.state, "client", None) is not None,
        "openrouter_up": metrics.last_openrouter_status is not False,
    }

    if not all(checks.values()):
        raise HTTPException(status_code=503, detail={"status": "not_ready", "checks": checks})

    return ReadinessResponse(
        status="ready",
        timestamp=datetime.now(timezone.utc).isoformat(),
        checks=checks,
    )
