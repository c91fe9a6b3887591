"""Graph domain models.

- NavigationGraph / GraphNode / Branch: the graph definition
- UserContext / Intent: what predicates evaluate against
- StepPlan / BranchMatch: engine output for one step
"""

from navgraph.graph.models.context import Intent, UserContext
from navgraph.graph.models.enums import IntentSource, NodeType
from navgraph.graph.models.graph import NavigationGraph
from navgraph.graph.models.node import Branch, GraphNode
from navgraph.graph.models.plan import BranchMatch, StepPlan

__all__ = [
    "Branch",
    "BranchMatch",
    "GraphNode",
    "Intent",
    "IntentSource",
    "NavigationGraph",
    "NodeType",
    "StepPlan",
    "UserContext",
]
