"""Deterministic candidate selection."""

from navgraph.graph.models import GraphNode, UserContext


class FallbackStrategy:
    """Pick the best candidate without an LLM.

    Order: node priority desc, then intent affinity desc, then the order
    candidates were given in (the engine passes them in edge order).
    """

    def rank(self, candidates: list[GraphNode], context: UserContext) -> list[GraphNode]:
        intents = context.intent_scores()
        # sorted() is stable, so equal keys keep their incoming order
        return sorted(
            candidates,
            key=lambda n: (-n.priority, -n.intent_affinity(intents)),
        )

    def choose(self, candidates: list[GraphNode], context: UserContext) -> GraphNode | None:
        ranked = self.rank(candidates, context)
        return ranked[0] if ranked else None
