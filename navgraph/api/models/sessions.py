"""Session API models."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from navgraph.context.models import NavigationSession, NodeVisit, SessionStatus
from navgraph.graph.models import Intent, StepPlan, UserContext
from navgraph.orchestration.models import CandidateNode, OrchestrationDecision
from navgraph.runtime.models import NavigationResult


class CreateSessionRequest(BaseModel):
    graph_id: str = Field(..., min_length=1)
    user_id: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)
    intents: list[Intent] = Field(default_factory=list)
    roles: list[str] = Field(default_factory=list)
    locale: str | None = None


class UpdateContextRequest(BaseModel):
    """Partial context update.

    ``variables`` is merged unless ``replace`` is set. ``intents``, when
    given, replaces the whole intent vector.
    """

    variables: dict[str, Any] | None = None
    replace: bool = False
    remove: list[str] = Field(default_factory=list)
    intents: list[Intent] | None = None


class ChooseRequest(BaseModel):
    node_id: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    id: UUID
    graph_id: str
    graph_version: int
    current_node_id: str
    status: SessionStatus
    step_count: int
    context: UserContext
    history: list[NodeVisit]
    created_at: datetime
    updated_at: datetime
    completed_at: datetime | None = None

    @classmethod
    def from_session(cls, session: NavigationSession) -> "SessionResponse":
        return cls(
            id=session.id,
            graph_id=session.graph_id,
            graph_version=session.graph_version,
            current_node_id=session.current_node_id,
            status=session.status,
            step_count=session.step_count,
            context=session.context,
            history=session.history,
            created_at=session.created_at,
            updated_at=session.updated_at,
            completed_at=session.completed_at,
        )


class EligibleResponse(BaseModel):
    node_id: str
    is_terminal: bool
    forced_node_id: str | None = None
    forced_condition: str | None = None
    candidates: list[CandidateNode] = Field(default_factory=list)

    @classmethod
    def from_plan(cls, plan: StepPlan) -> "EligibleResponse":
        return cls(
            node_id=plan.node_id,
            is_terminal=plan.is_terminal,
            forced_node_id=plan.forced.target_node_id if plan.forced else None,
            forced_condition=plan.forced.branch.condition if plan.forced else None,
            candidates=[CandidateNode.from_node(n) for n in plan.candidates],
        )


class StepResponse(BaseModel):
    step: int
    decision: OrchestrationDecision
    node: CandidateNode | None = None
    session: SessionResponse

    @classmethod
    def from_result(cls, result: NavigationResult) -> "StepResponse":
        return cls(
            step=result.entry.step,
            decision=result.decision,
            node=CandidateNode.from_node(result.node) if result.node else None,
            session=SessionResponse.from_session(result.session),
        )
