"""
Headlines Backend — Health Check Route
=======================================

What:  Health check endpoint for monitoring and container probes.
How:   Pings the database with SELECT 1 and reports uptime.

Status levels:
    - healthy:   Database reachable (HTTP 200)
    - unhealthy: Database unreachable (HTTP 503, stop routing traffic)

The scrape target is deliberately not probed: it is only contacted on
demand, and its outages do not affect the stored articles.
"""

import logging
import time

from fastapi import APIRouter, Depends, Response

from headlines import __version__
from headlines.database import Database, get_database
from headlines.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check(
    response: Response,
    database: Database = Depends(get_database),
) -> HealthResponse:
    db_status = "connected"
    overall = "healthy"

    try:
        await database.ping()
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        response.status_code = 503
        logger.warning("Health check: database unreachable: %s", str(e))

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
