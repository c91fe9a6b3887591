"""Health check and metrics endpoints."""

from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from navgraph import __version__
from navgraph.api.dependencies import (
    AuditStoreDep,
    GraphStoreDep,
    SessionStoreDep,
    SettingsDep,
)
from navgraph.api.exceptions import MetricsDisabledError
from navgraph.api.models.health import ComponentHealth, HealthResponse
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    graph_store: GraphStoreDep,
    session_store: SessionStoreDep,
    audit_store: AuditStoreDep,
) -> HealthResponse:
    """Report service health and the status of each store."""
    components = [
        ComponentHealth(
            name=name,
            status="healthy" if store is not None else "unhealthy",
            detail=type(store).__name__ if store is not None else "Store not initialized",
        )
        for name, store in (
            ("graph_store", graph_store),
            ("session_store", session_store),
            ("audit_store", audit_store),
        )
    ]

    overall_status: Literal["healthy", "unhealthy"] = (
        "healthy" if all(c.status == "healthy" for c in components) else "unhealthy"
    )
    logger.debug("health_check_completed", status=overall_status)

    return HealthResponse(
        status=overall_status,
        version=__version__,
        timestamp=datetime.now(UTC),
        components=components,
    )


@router.get("/metrics")
async def get_metrics(settings: SettingsDep) -> Response:
    """Prometheus metrics in text exposition format."""
    if not settings.observability.metrics_enabled:
        raise MetricsDisabledError("Metrics are disabled")
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
