"""
Notes Gateway — Health Check Route
===================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Probes the record service, the search service (if configured) and
       Redis, and returns an aggregate status.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   every dependency reachable
    - degraded:  search or notifications down (queries/mutations partly work)
    - unhealthy: record service down (HTTP 503, stop routing traffic)
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from gateway import __version__
from gateway.connections import Backends, get_backends
from gateway.schemas.note import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

# Initialized once when the module loads
_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"description": "Record service unreachable", "model": HealthResponse}},
    summary="Service health check",
)
async def health_check(backends: Backends = Depends(get_backends)):
    """
    Check the health of the gateway and its collaborators.

    Each probe is lightweight (GET /health or PING) and never raises.
    """
    overall = "healthy"

    # ── Record Service ────────────────────────────────────────────────────
    record_status = "reachable"
    if not await backends.record_service.health_check():
        record_status = "unreachable"
        overall = "unhealthy"

    # ── Search Service ────────────────────────────────────────────────────
    search_status = "not_configured"
    if backends.search_service is not None:
        if await backends.search_service.health_check():
            search_status = "reachable"
        else:
            search_status = "unreachable"
            overall = "degraded" if overall != "unhealthy" else overall

    # ── Notifications ─────────────────────────────────────────────────────
    notifications_status = "connected"
    if not await backends.publisher.health_check():
        notifications_status = "disconnected"
        overall = "degraded" if overall != "unhealthy" else overall

    response = HealthResponse(
        status=overall,
        version=__version__,
        record_service=record_status,
        search_service=search_status,
        notifications=notifications_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )

    if overall == "unhealthy":
        logger.warning("Health check: record service unreachable")
        return JSONResponse(status_code=503, content=response.model_dump())
    return response
