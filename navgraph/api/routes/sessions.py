"""Navigation session endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query

from navgraph.api.dependencies import NavigationServiceDep
from navgraph.api.models.sessions import (
    ChooseRequest,
    CreateSessionRequest,
    EligibleResponse,
    SessionResponse,
    StepResponse,
    UpdateContextRequest,
)
from navgraph.audit import DecisionEntry, ReplayReport
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/sessions")


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    service: NavigationServiceDep,
) -> SessionResponse:
    """Start a session at the graph's entry node."""
    session = await service.start_session(
        request.graph_id,
        user_id=request.user_id,
        variables=request.variables,
        intents=request.intents,
        roles=request.roles,
        locale=request.locale,
    )
    return SessionResponse.from_session(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: UUID, service: NavigationServiceDep) -> SessionResponse:
    return SessionResponse.from_session(await service.get_session(session_id))


@router.delete("/{session_id}", response_model=SessionResponse)
async def abandon_session(session_id: UUID, service: NavigationServiceDep) -> SessionResponse:
    return SessionResponse.from_session(await service.abandon(session_id))


@router.patch("/{session_id}/context", response_model=SessionResponse)
async def update_context(
    session_id: UUID,
    request: UpdateContextRequest,
    service: NavigationServiceDep,
) -> SessionResponse:
    session = await service.update_context(
        session_id,
        variables=request.variables,
        replace=request.replace,
        remove=request.remove,
        intents=request.intents,
    )
    return SessionResponse.from_session(session)


@router.get("/{session_id}/eligible", response_model=EligibleResponse)
async def get_eligible(session_id: UUID, service: NavigationServiceDep) -> EligibleResponse:
    """Nodes reachable from the current node under the current context."""
    return EligibleResponse.from_plan(await service.eligible(session_id))


@router.post("/{session_id}/next", response_model=StepResponse)
async def next_step(session_id: UUID, service: NavigationServiceDep) -> StepResponse:
    """Let the engine and orchestrator pick the next node."""
    result = await service.next_step(session_id)
    logger.info(
        "step_completed",
        session_id=str(session_id),
        node_id=result.decision.selected_node_id,
        source=result.decision.source.value,
    )
    return StepResponse.from_result(result)


@router.post("/{session_id}/choose", response_model=StepResponse)
async def choose(
    session_id: UUID,
    request: ChooseRequest,
    service: NavigationServiceDep,
) -> StepResponse:
    """Move to a node the user picked; rejected with 409 if not allowed."""
    return StepResponse.from_result(await service.choose(session_id, request.node_id))


@router.get("/{session_id}/decisions", response_model=list[DecisionEntry])
async def list_decisions(
    session_id: UUID,
    service: NavigationServiceDep,
    limit: int | None = Query(default=None, ge=1),
) -> list[DecisionEntry]:
    entries = await service.decisions(session_id)
    return entries[:limit] if limit else entries


@router.post("/{session_id}/replay", response_model=ReplayReport)
async def replay_session(session_id: UUID, service: NavigationServiceDep) -> ReplayReport:
    """Re-check recorded decisions against the session's graph version."""
    return await service.replay(session_id)
