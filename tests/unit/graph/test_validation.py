"""Unit tests for GraphValidator."""

import pytest

from navgraph.exceptions import GraphValidationError
from navgraph.graph import GraphValidator
from navgraph.graph.eligibility import PredicateRegistry
from navgraph.graph.models import Branch, NodeType
from tests.factories import GraphFactory


@pytest.fixture
def validator() -> GraphValidator:
    return GraphValidator()


class TestGraphValidator:
    """Errors block registration; warnings are informational."""

    def test_onboarding_graph_is_clean(self, validator: GraphValidator) -> None:
        result = validator.validate(GraphFactory.onboarding())
        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []

    def test_duplicate_node_ids(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [GraphFactory.node("a", is_terminal=True), GraphFactory.node("a", is_terminal=True)]
        )
        result = validator.validate(graph)
        assert "Duplicate node id 'a'" in result.errors

    def test_missing_entry_node(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create([GraphFactory.node("a", is_terminal=True)], entry_node_id="x")
        result = validator.validate(graph)
        assert not result.is_valid
        assert "Entry node 'x' does not exist" in result.errors

    def test_dangling_edges(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node(
                    "a",
                    allowed_next=["ghost"],
                    branches=[Branch(condition="True", target="phantom")],
                )
            ]
        )
        errors = validator.validate(graph).errors
        assert any("unknown next node 'ghost'" in e for e in errors)
        assert any("targets unknown node 'phantom'" in e for e in errors)

    def test_invalid_expressions(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node(
                    "a",
                    allowed_next=["b"],
                    branches=[Branch(condition="x >", target="b")],
                ),
                GraphFactory.node("b", eligibility=["import os"], is_terminal=True),
            ]
        )
        errors = validator.validate(graph).errors
        assert any("branch 0 condition is invalid" in e for e in errors)
        assert any("eligibility 'import os' is invalid" in e for e in errors)

    def test_unregistered_predicate_only_checked_with_registry(self) -> None:
        graph = GraphFactory.create([GraphFactory.node("a", predicates=["p"], is_terminal=True)])
        assert GraphValidator().validate(graph).is_valid

        result = GraphValidator(registry=PredicateRegistry()).validate(graph)
        assert "Node 'a' uses unregistered predicate 'p'" in result.errors

    def test_composite_rules(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node("a", type=NodeType.COMPOSITE, children=["b"], entry_child="c"),
                GraphFactory.node("b", is_terminal=True),
                GraphFactory.node("c", children=["b"], is_terminal=True),
                GraphFactory.node("empty", type=NodeType.COMPOSITE, is_terminal=True),
            ]
        )
        errors = validator.validate(graph).errors
        assert any("entry_child 'c' is not one of its children" in e for e in errors)
        assert "Non-composite node 'c' declares children" in errors
        assert "Composite node 'empty' has no children" in errors

    def test_terminal_with_edges(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [GraphFactory.node("a", allowed_next=["b"], is_terminal=True), GraphFactory.node("b")]
        )
        assert "Terminal node 'a' has outgoing edges" in validator.validate(graph).errors

    def test_warnings(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node("a", allowed_next=["a", "b"]),
                GraphFactory.node("b"),
                GraphFactory.node("gate", type=NodeType.BRANCH, is_terminal=True),
                GraphFactory.node("island", is_terminal=True),
            ]
        )
        result = validator.validate(graph)
        assert result.is_valid
        assert "Node 'a' allows itself as next node" in result.warnings
        assert "Node 'b' is a dead end but not marked terminal" in result.warnings
        assert "Branch node 'gate' defines no branches" in result.warnings
        assert "Node 'island' is unreachable from the entry node" in result.warnings

    def test_unreachable_warning_can_be_disabled(self) -> None:
        graph = GraphFactory.create(
            [GraphFactory.node("a", is_terminal=True), GraphFactory.node("b", is_terminal=True)]
        )
        result = GraphValidator(warn_on_unreachable=False).validate(graph)
        assert result.warnings == []

    def test_ensure_valid_raises_with_errors(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create([GraphFactory.node("a", is_terminal=True)], entry_node_id="x")
        with pytest.raises(GraphValidationError) as exc_info:
            validator.ensure_valid(graph)
        assert exc_info.value.errors == ["Entry node 'x' does not exist"]

    def test_unknown_function_behind_undefined_name(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node("a", allowed_next=["b"]),
                GraphFactory.node(
                    "b", eligibility=['plan == "pro" and bogus(1)'], is_terminal=True
                ),
            ]
        )
        result = validator.validate(graph)
        assert not result.is_valid
        assert any("Unknown function 'bogus'" in e for e in result.errors)

    def test_mutual_composite_entry_cycle(self, validator: GraphValidator) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node(
                    "start", type=NodeType.COMPOSITE, children=["inner"], entry_child="inner"
                ),
                GraphFactory.node(
                    "inner", type=NodeType.COMPOSITE, children=["start"], entry_child="start"
                ),
            ]
        )
        errors = validator.validate(graph).errors
        cycles = [e for e in errors if e.startswith("Composite entry cycle")]
        assert cycles == ["Composite entry cycle: start -> inner -> start"]

    def test_composite_depth_limit(self) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node("outer", type=NodeType.COMPOSITE, children=["mid"],
                                  entry_child="mid"),
                GraphFactory.node("mid", type=NodeType.COMPOSITE, children=["leaf"],
                                  entry_child="leaf"),
                GraphFactory.node("leaf", is_terminal=True),
            ]
        )
        assert GraphValidator(max_composite_depth=2).validate(graph).is_valid

        errors = GraphValidator(max_composite_depth=1).validate(graph).errors
        assert "Composite node 'outer' nests 2 entries, more than 1" in errors
