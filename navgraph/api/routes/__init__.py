"""API route registration."""

from fastapi import APIRouter, FastAPI

from navgraph.observability.logging import get_logger

logger = get_logger(__name__)


def create_v1_router() -> APIRouter:
    """Create the v1 API router with all routes."""
    router = APIRouter(prefix="/v1")

    from navgraph.api.routes.graphs import router as graphs_router
    from navgraph.api.routes.sessions import router as sessions_router

    router.include_router(graphs_router, tags=["Graphs"])
    router.include_router(sessions_router, tags=["Sessions"])

    logger.debug("v1_router_created", routes=["graphs", "sessions"])
    return router


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    app.include_router(create_v1_router())

    from navgraph.api.routes.health import router as health_router

    app.include_router(health_router, tags=["Health"])

    logger.info("routes_registered")
