"""Graph registration and lookup endpoints."""

from fastapi import APIRouter, Query, Response

from navgraph.api.dependencies import NavigationServiceDep
from navgraph.api.exceptions import InvalidRequestError
from navgraph.api.models.graphs import (
    GraphRegisterResponse,
    GraphSummary,
    GraphValidationResponse,
)
from navgraph.graph.models import NavigationGraph
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/graphs")


def _check_path_id(graph_id: str, graph: NavigationGraph) -> None:
    if graph.id != graph_id:
        raise InvalidRequestError(
            f"Graph id '{graph.id}' in body does not match path id '{graph_id}'"
        )


@router.get("", response_model=list[GraphSummary])
async def list_graphs(
    service: NavigationServiceDep,
    tag: str | None = Query(default=None, description="Only graphs carrying this tag"),
) -> list[GraphSummary]:
    graphs = await service.list_graphs(tag=tag)
    return [GraphSummary.from_graph(g) for g in graphs]


@router.put("/{graph_id}", response_model=GraphRegisterResponse)
async def put_graph(
    graph_id: str,
    graph: NavigationGraph,
    service: NavigationServiceDep,
) -> GraphRegisterResponse:
    """Validate and store a graph version.

    Invalid graphs are rejected with 422 and the list of errors.
    Warnings do not block registration and are returned to the caller.
    """
    _check_path_id(graph_id, graph)
    result = await service.register_graph(graph)
    return GraphRegisterResponse(
        graph=GraphSummary.from_graph(graph),
        warnings=result.warnings,
    )


@router.get("/{graph_id}", response_model=NavigationGraph)
async def get_graph(
    graph_id: str,
    service: NavigationServiceDep,
    version: int | None = Query(default=None, ge=1),
) -> NavigationGraph:
    return await service.get_graph(graph_id, version)


@router.delete("/{graph_id}", status_code=204)
async def delete_graph(graph_id: str, service: NavigationServiceDep) -> Response:
    await service.delete_graph(graph_id)
    logger.info("graph_deleted", graph_id=graph_id)
    return Response(status_code=204)


@router.post("/{graph_id}/validate", response_model=GraphValidationResponse)
async def validate_graph(
    graph_id: str,
    graph: NavigationGraph,
    service: NavigationServiceDep,
) -> GraphValidationResponse:
    """Dry-run validation; nothing is stored."""
    _check_path_id(graph_id, graph)
    result = service.validator.validate(graph)
    return GraphValidationResponse(
        graph_id=result.graph_id,
        is_valid=result.is_valid,
        errors=result.errors,
        warnings=result.warnings,
    )
