"""Navigation runtime result models."""

from pydantic import BaseModel

from navgraph.audit.models import DecisionEntry
from navgraph.context.models import NavigationSession
from navgraph.graph.models import GraphNode
from navgraph.orchestration.models import OrchestrationDecision


class NavigationResult(BaseModel):
    """Outcome of advancing a session by one step."""

    decision: OrchestrationDecision
    entry: DecisionEntry
    session: NavigationSession
    node: GraphNode | None = None

    @property
    def completed(self) -> bool:
        return not self.session.is_active
