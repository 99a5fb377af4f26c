"""
StuntCheck Gateway — Health Check Route
=========================================

What:  Health check endpoint for monitoring and load balancer probes.
How:   Checks the database (SELECT 1) and the inference service status URL.
Who:   Called by container health checks, load balancers and monitoring.

Status levels:
    - healthy:   database and inference service reachable (HTTP 200)
    - degraded:  inference service down; accounts and history still work (HTTP 200)
    - unhealthy: database down (HTTP 503)
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from stuntcheck import __version__
from stuntcheck.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    responses={503: {"description": "Database unreachable", "model": HealthResponse}},
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    inference_status = "available"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        from stuntcheck.database import engine
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Inference Service ───────────────────────────────────────────
    from stuntcheck.services.inference_client import inference_client
    if not await inference_client.health_check():
        inference_status = "unavailable"
        if overall != "unhealthy":
            overall = "degraded"
        logger.warning("Health check: inference service unreachable")

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        inference=inference_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
