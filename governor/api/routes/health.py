"""Health check and metrics endpoints."""

import time
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from governor import __version__
from governor.api import dependencies
from governor.api.models.health import ComponentHealth, HealthResponse
from governor.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


async def _check_database() -> ComponentHealth:
    """Check the PostgreSQL pool when the postgres backend is configured."""
    if dependencies.get_settings().storage.backend != "postgres":
        return ComponentHealth(name="database", status="healthy", message="inmemory")

    start = time.time()
    try:
        pool = await dependencies.get_postgres_pool()
        healthy, message = await pool.health_check()
    except Exception as e:
        return ComponentHealth(
            name="database",
            status="unhealthy",
            latency_ms=(time.time() - start) * 1000,
            message=str(e),
        )
    status: Literal["healthy", "degraded", "unhealthy"]
    if not healthy:
        status = "unhealthy"
    elif message:
        # Reachable, but the schema is not at the expected revision
        status = "degraded"
    else:
        status = "healthy"
    return ComponentHealth(
        name="database",
        status=status,
        latency_ms=(time.time() - start) * 1000,
        message=message,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check service health status."""
    components = [await _check_database()]

    overall_status: Literal["healthy", "degraded", "unhealthy"]
    if any(c.status == "unhealthy" for c in components):
        overall_status = "unhealthy"
    elif any(c.status == "degraded" for c in components):
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    logger.debug("health_check_completed", status=overall_status)

    return HealthResponse(
        status=overall_status,
        version=__version__,
        components=components,
        timestamp=datetime.now(UTC),
    )


async def get_metrics() -> Response:
    """Get Prometheus metrics in text format for scraping.

    Mounted by the app factory at `observability.metrics.path`.
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
