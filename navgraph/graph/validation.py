"""Structural validation of navigation graphs."""

from collections import deque

from pydantic import BaseModel, Field

from navgraph.exceptions import GraphValidationError
from navgraph.graph.eligibility import ExpressionEvaluator, PredicateRegistry
from navgraph.graph.models import NavigationGraph, NodeType
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)


class GraphValidationResult(BaseModel):
    """Validation outcome. Errors block registration; warnings do not."""

    graph_id: str
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class GraphValidator:
    """Check a graph for dangling references, bad expressions, and dead ends.

    Args:
        registry: When given, predicate names must be registered
        warn_on_unreachable: Report nodes not reachable from the entry node
        max_composite_depth: Longest allowed chain of composite entries
    """

    def __init__(
        self,
        registry: PredicateRegistry | None = None,
        expressions: ExpressionEvaluator | None = None,
        warn_on_unreachable: bool = True,
        max_composite_depth: int | None = None,
    ) -> None:
        self._registry = registry
        self._expressions = expressions or ExpressionEvaluator()
        self._warn_on_unreachable = warn_on_unreachable
        self._max_composite_depth = max_composite_depth

    def validate(self, graph: NavigationGraph) -> GraphValidationResult:
        result = GraphValidationResult(graph_id=graph.id)
        errors = result.errors
        warnings = result.warnings

        seen: set[str] = set()
        for node in graph.nodes:
            if node.id in seen:
                errors.append(f"Duplicate node id '{node.id}'")
            seen.add(node.id)

        if not graph.has_node(graph.entry_node_id):
            errors.append(f"Entry node '{graph.entry_node_id}' does not exist")

        for node in graph.nodes:
            for target in node.allowed_next:
                if not graph.has_node(target):
                    errors.append(f"Node '{node.id}' allows unknown next node '{target}'")
                elif target == node.id:
                    warnings.append(f"Node '{node.id}' allows itself as next node")

            for index, branch in enumerate(node.branches):
                if not graph.has_node(branch.target):
                    errors.append(
                        f"Node '{node.id}' branch {index} targets unknown node '{branch.target}'"
                    )
                syntax_error = self._expressions.validate_syntax(branch.condition)
                if syntax_error:
                    errors.append(
                        f"Node '{node.id}' branch {index} condition is invalid: {syntax_error}"
                    )

            for expression in node.eligibility:
                syntax_error = self._expressions.validate_syntax(expression)
                if syntax_error:
                    errors.append(
                        f"Node '{node.id}' eligibility '{expression}' is invalid: {syntax_error}"
                    )

            if self._registry is not None:
                for name in node.predicates:
                    if name not in self._registry:
                        errors.append(f"Node '{node.id}' uses unregistered predicate '{name}'")

            if node.is_composite:
                if not node.children:
                    errors.append(f"Composite node '{node.id}' has no children")
                for child in node.children:
                    if not graph.has_node(child):
                        errors.append(f"Composite node '{node.id}' has unknown child '{child}'")
                    elif child == node.id:
                        errors.append(f"Composite node '{node.id}' contains itself")
                if node.entry_child is None:
                    if node.children:
                        errors.append(f"Composite node '{node.id}' has no entry_child")
                elif node.entry_child not in node.children:
                    errors.append(
                        f"Composite node '{node.id}' entry_child '{node.entry_child}' "
                        "is not one of its children"
                    )
            elif node.children or node.entry_child:
                errors.append(f"Non-composite node '{node.id}' declares children")

            outgoing = graph.outgoing(node)
            if node.is_terminal and outgoing:
                errors.append(f"Terminal node '{node.id}' has outgoing edges")
            elif (
                not node.is_terminal
                and not outgoing
                and not node.is_composite
                and not graph.parents_of(node.id)
            ):
                warnings.append(f"Node '{node.id}' is a dead end but not marked terminal")

            if node.type == NodeType.BRANCH and not node.branches:
                warnings.append(f"Branch node '{node.id}' defines no branches")

        errors.extend(self._entry_chain_errors(graph))

        if self._warn_on_unreachable and graph.has_node(graph.entry_node_id):
            reachable = self._reachable(graph)
            for node in graph.nodes:
                if node.id not in reachable:
                    warnings.append(f"Node '{node.id}' is unreachable from the entry node")

        logger.debug(
            "graph_validated",
            graph_id=graph.id,
            error_count=len(errors),
            warning_count=len(warnings),
        )
        return result

    def ensure_valid(self, graph: NavigationGraph) -> GraphValidationResult:
        """Validate and raise GraphValidationError on any error."""
        result = self.validate(graph)
        if not result.is_valid:
            raise GraphValidationError(
                f"Graph '{graph.id}' has {len(result.errors)} validation error(s)",
                errors=result.errors,
            )
        return result

    def _entry_chain_errors(self, graph: NavigationGraph) -> list[str]:
        """Follow each composite's entry_child chain, as the engine will on entry."""
        errors: list[str] = []
        reported_cycles: set[frozenset[str]] = set()

        for node in graph.nodes:
            if not node.is_composite:
                continue
            chain = [node.id]
            current = node
            while (
                current.is_composite
                and current.entry_child is not None
                and graph.has_node(current.entry_child)
            ):
                if current.entry_child in chain:
                    cycle = chain[chain.index(current.entry_child):]
                    if frozenset(cycle) not in reported_cycles:
                        reported_cycles.add(frozenset(cycle))
                        errors.append(
                            f"Composite entry cycle: {' -> '.join(cycle + [current.entry_child])}"
                        )
                    break
                chain.append(current.entry_child)
                current = graph.get_node(current.entry_child)
            else:
                depth = len(chain) - 1
                if (
                    self._max_composite_depth is not None
                    and depth > self._max_composite_depth
                    and not graph.parents_of(node.id)
                ):
                    errors.append(
                        f"Composite node '{node.id}' nests {depth} entries, "
                        f"more than {self._max_composite_depth}"
                    )
        return errors

    def _reachable(self, graph: NavigationGraph) -> set[str]:
        """BFS over edges and composite membership from the entry node."""
        visited: set[str] = set()
        queue = deque([graph.entry_node_id])
        while queue:
            current = queue.popleft()
            if current in visited or not graph.has_node(current):
                continue
            visited.add(current)
            node = graph.get_node(current)
            queue.extend(graph.outgoing(node))
            queue.extend(node.children)
            # a child with no edges of its own continues along its composite's edges
            for parent in graph.parents_of(current):
                queue.append(parent.id)
        return visited
