"""Orchestration request/response and decision models."""

from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from navgraph.graph.models import GraphNode, Intent, NodeType


class DecisionSource(str, Enum):
    """How the next node was chosen."""

    BRANCH = "branch"  # A branch condition forced the target
    AI = "ai"  # LLM choice, validated
    SINGLE_CANDIDATE = "single_candidate"  # Only one eligible node
    FALLBACK = "fallback"  # Deterministic pick after AI was skipped or rejected
    EXPLICIT = "explicit"  # The user picked the node
    NONE = "none"  # Nothing eligible


class FallbackReason(str, Enum):
    """Why an AI choice was not used."""

    AI_DISABLED = "ai_disabled"
    PROVIDER_ERROR = "provider_error"
    PARSE_ERROR = "parse_error"
    INVALID_NODE = "invalid_node"
    LOW_CONFIDENCE = "low_confidence"


class CandidateNode(BaseModel):
    """What the LLM is told about an eligible node."""

    id: str
    label: str
    type: NodeType
    description: str | None = None
    intent_tags: list[str] = Field(default_factory=list)
    priority: int = 0

    @classmethod
    def from_node(cls, node: GraphNode) -> "CandidateNode":
        return cls(
            id=node.id,
            label=node.label,
            type=node.type,
            description=node.description,
            intent_tags=node.intent_tags,
            priority=node.priority,
        )


class AIDecisionRequest(BaseModel):
    """Input to the node-selection prompt."""

    session_id: UUID | None = None
    graph_id: str
    current_node_id: str
    current_node_label: str
    candidates: list[CandidateNode]
    variables: dict[str, Any] = Field(default_factory=dict)
    intents: list[Intent] = Field(default_factory=list)
    history: list[str] = Field(default_factory=list, description="Recent node IDs, oldest first")

    @property
    def candidate_ids(self) -> list[str]:
        return [c.id for c in self.candidates]


class AIDecisionResponse(BaseModel):
    """Parsed LLM answer.

    ``confidence`` is the model's self-reported probability that
    ``node_id`` is the best next step, clamped into [0, 1].
    """

    node_id: str = Field(..., min_length=1)
    confidence: float = Field(default=0.0)
    reasoning: str = Field(default="")

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, value: Any) -> float:
        return min(1.0, max(0.0, float(value)))


class OrchestrationDecision(BaseModel):
    """Outcome of one selection, audited as-is."""

    selected_node_id: str | None
    source: DecisionSource
    confidence: float = Field(default=1.0, ge=0.0, le=1.0)
    reasoning: str = ""
    candidate_ids: list[str] = Field(default_factory=list)
    fallback_reason: FallbackReason | None = None
    ai_response: AIDecisionResponse | None = None
    model: str | None = None
    latency_ms: float = Field(default=0.0, ge=0)
