"""
HerbScape Backend — Health Check Route
========================================

What:  Health check endpoint for monitoring and container probes.
How:   Checks the database and whether Supabase is configured, and reports
       the served catalog variant and the number of client pages in memory.
Who:   Docker health checks, load balancers, monitoring.

Status levels:
    - healthy:   database reachable and Supabase configured (HTTP 200)
    - degraded:  database reachable, Supabase not configured; the catalog
                 renders but scanning, translation and sign-in fail
    - unhealthy: database unreachable; the catalog renders an empty grid
"""

import logging
import time

from fastapi import APIRouter, Response
from sqlalchemy import text

from herbscape import __version__
from herbscape.catalog.registry import page_registry
from herbscape.config import settings
from herbscape.database import engine
from herbscape.schemas.herb import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
    description=(
        "Returns the health status of the service and its dependencies. "
        "Answers 503 when the database is unreachable."
    ),
)
async def health_check(response: Response) -> HealthResponse:
    db_status = "connected"
    supabase_status = "configured"
    overall = "healthy"

    # ── Check Database ────────────────────────────────────────────────────
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    # ── Check Supabase configuration ──────────────────────────────────────
    try:
        settings.validate_required_for_production()
    except ValueError:
        supabase_status = "not_configured"
        overall = "degraded" if overall != "unhealthy" else overall

    if overall == "unhealthy":
        response.status_code = 503

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        supabase=supabase_status,
        catalog_variant=settings.catalog_variant,
        active_clients=len(page_registry),
        uptime_seconds=round(time.time() - _start_time, 2),
    )
