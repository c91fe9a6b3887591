"""Unit tests for FallbackStrategy."""

from navgraph.graph.models import Intent, UserContext
from navgraph.orchestration import FallbackStrategy
from tests.factories import GraphFactory


class TestFallbackStrategy:
    def test_empty_candidates(self) -> None:
        assert FallbackStrategy().choose([], UserContext()) is None

    def test_priority_first(self) -> None:
        candidates = [GraphFactory.node("a"), GraphFactory.node("b", priority=2)]
        chosen = FallbackStrategy().choose(candidates, UserContext())
        assert chosen is not None
        assert chosen.id == "b"

    def test_intent_affinity_breaks_priority_ties(self) -> None:
        candidates = [
            GraphFactory.node("a", intent_tags=["browse"]),
            GraphFactory.node("b", intent_tags=["buy"]),
        ]
        context = UserContext(
            intents=[Intent(name="browse", confidence=0.2), Intent(name="buy", confidence=0.7)]
        )
        assert [n.id for n in FallbackStrategy().rank(candidates, context)] == ["b", "a"]

    def test_incoming_order_is_last_tie_break(self) -> None:
        candidates = [GraphFactory.node("z"), GraphFactory.node("a")]
        assert [n.id for n in FallbackStrategy().rank(candidates, UserContext())] == ["z", "a"]
