"""Navigation graph definition, eligibility, and traversal."""

from navgraph.graph.engine import DirectedGraphEngine
from navgraph.graph.validation import GraphValidationResult, GraphValidator

__all__ = [
    "DirectedGraphEngine",
    "GraphValidationResult",
    "GraphValidator",
]
