"""DecisionEntry model for the audit domain."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from navgraph.graph.models.base import utc_now
from navgraph.orchestration.models import DecisionSource, FallbackReason


class DecisionEntry(BaseModel):
    """Immutable record of one navigation decision.

    Carries enough to replay the step: the graph hash it was made
    against, the node it left, the context snapshot the engine saw, and
    the candidates it offered.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    session_id: UUID
    graph_id: str
    graph_version: int
    graph_hash: str
    step: int = Field(..., ge=1, description="1-based step within the session")
    from_node_id: str
    candidate_ids: list[str] = Field(default_factory=list)
    selected_node_id: str | None
    landed_node_id: str | None = Field(
        default=None, description="Node entered after composite resolution"
    )
    source: DecisionSource
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    reasoning: str = ""
    fallback_reason: FallbackReason | None = None
    ai_node_id: str | None = Field(default=None, description="What the LLM proposed, if asked")
    model: str | None = None
    latency_ms: float = Field(default=0.0, ge=0)
    context_snapshot: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=utc_now)
