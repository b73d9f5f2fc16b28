"""API route registration."""

from fastapi import APIRouter, FastAPI

from leadbook.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from leadbook.api.routes.buyers import router as buyers_router

    router.include_router(buyers_router, tags=["Buyers"])

    logger.debug("v1_router_created", routes=["buyers"])
    return router


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.include_router(create_v1_router())

    # Health stays at root level
    from leadbook.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    logger.info("routes_registered")
