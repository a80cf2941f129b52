"""API route registration."""

from fastapi import APIRouter, FastAPI

from governor.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from governor.api.routes.guardrails import router as guardrails_router
    from governor.api.routes.milestones import router as milestones_router
    from governor.api.routes.organizations import router as organizations_router
    from governor.api.routes.queue import router as queue_router
    from governor.api.routes.schedules import router as schedules_router

    router.include_router(guardrails_router, tags=["Guardrails"])
    router.include_router(milestones_router, tags=["Milestones"])
    router.include_router(organizations_router, tags=["Organizations"])
    router.include_router(queue_router, tags=["Queue"])
    router.include_router(schedules_router, tags=["Schedules"])

    logger.debug(
        "v1_router_created",
        routes=["guardrails", "milestones", "organizations", "queue", "schedules"],
    )
    return router


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(create_v1_router())

    from governor.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    logger.info("routes_registered")
