"""Constrained AI orchestration over engine-provided candidates."""

from navgraph.orchestration.fallback import FallbackStrategy
from navgraph.orchestration.models import (
    AIDecisionRequest,
    AIDecisionResponse,
    CandidateNode,
    DecisionSource,
    FallbackReason,
    OrchestrationDecision,
)
from navgraph.orchestration.service import AIOrchestrationService

__all__ = [
    "AIDecisionRequest",
    "AIDecisionResponse",
    "AIOrchestrationService",
    "CandidateNode",
    "DecisionSource",
    "FallbackReason",
    "FallbackStrategy",
    "OrchestrationDecision",
]
