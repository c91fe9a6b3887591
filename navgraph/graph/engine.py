"""Directed graph engine.

Given a graph, a current node, and a user context, the engine decides
what may come next. It never chooses among equally valid candidates;
that is the orchestrator's job.

Precedence for a step from node N:
1. N is terminal: nothing comes next.
2. N's branches, by priority desc then declaration order. The first
   whose condition holds and whose target is eligible is forced.
3. Otherwise the eligible subset of N's outgoing edges (allowed_next,
   then branch targets), ordered by priority desc, intent affinity desc,
   then edge order.

A node with no edges of its own that sits inside a composite uses the
nearest enclosing composite's edges instead.
"""

from navgraph.exceptions import GraphValidationError, InvalidTransitionError
from navgraph.graph.eligibility import EligibilityEvaluator
from navgraph.graph.models import (
    BranchMatch,
    GraphNode,
    NavigationGraph,
    StepPlan,
    UserContext,
)
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)


class DirectedGraphEngine:
    """Rule-based traversal over one NavigationGraph."""

    def __init__(
        self,
        graph: NavigationGraph,
        evaluator: EligibilityEvaluator | None = None,
        max_composite_depth: int = 8,
    ) -> None:
        self._graph = graph
        self._evaluator = evaluator or EligibilityEvaluator()
        self._max_composite_depth = max_composite_depth

    @property
    def graph(self) -> NavigationGraph:
        return self._graph

    @property
    def evaluator(self) -> EligibilityEvaluator:
        return self._evaluator

    def get_node(self, node_id: str) -> GraphNode:
        return self._graph.get_node(node_id)

    def is_eligible(self, node_id: str, context: UserContext) -> bool:
        return self._evaluator.is_eligible(self._graph, self.get_node(node_id), context)

    def resolve_entry(self, node_id: str) -> list[str]:
        """Follow composite entry children down to a concrete node.

        Returns the chain of node IDs entered, starting with node_id and
        ending with the node the session actually lands on.

        Raises:
            GraphValidationError: On an entry cycle or excessive nesting
        """
        chain = [node_id]
        node = self.get_node(node_id)
        while node.is_composite:
            if node.entry_child is None:
                raise GraphValidationError(f"Composite node '{node.id}' has no entry_child")
            if node.entry_child in chain:
                raise GraphValidationError(
                    f"Composite entry cycle: {' -> '.join(chain + [node.entry_child])}"
                )
            if len(chain) > self._max_composite_depth:
                raise GraphValidationError(
                    f"Composite nesting deeper than {self._max_composite_depth} at '{node.id}'"
                )
            chain.append(node.entry_child)
            node = self.get_node(node.entry_child)
        return chain

    def evaluate_branches(self, node: GraphNode, context: UserContext) -> BranchMatch | None:
        """Return the first matching branch whose target is eligible."""
        names = context.evaluation_names()
        for index, branch in node.ordered_branches():
            if not self._evaluator.expressions.evaluate(branch.condition, names):
                continue
            if not self.is_eligible(branch.target, context):
                logger.debug(
                    "branch_target_ineligible",
                    node_id=node.id,
                    branch_index=index,
                    target=branch.target,
                )
                continue
            return BranchMatch(branch=branch, branch_index=index, target_node_id=branch.target)
        return None

    def get_eligible_next_nodes(self, node_id: str, context: UserContext) -> list[GraphNode]:
        """Eligible outgoing nodes in tie-break order.

        Branch conditions are not consulted here; a branch target is a
        candidate like any other edge as long as it is eligible.
        """
        source = self._edge_source(self.get_node(node_id))
        if source is None:
            return []
        return self._ordered_candidates(source, context)

    def plan_step(self, node_id: str, context: UserContext) -> StepPlan:
        node = self.get_node(node_id)
        if node.is_terminal:
            return StepPlan(node_id=node_id, is_terminal=True)

        source = self._edge_source(node)
        if source is None:
            return StepPlan(node_id=node_id)

        forced = self.evaluate_branches(source, context)
        if forced is not None:
            logger.debug(
                "branch_forced",
                node_id=node_id,
                edge_source=source.id,
                target=forced.target_node_id,
                branch_index=forced.branch_index,
            )
            return StepPlan(node_id=node_id, forced=forced)

        return StepPlan(node_id=node_id, candidates=self._ordered_candidates(source, context))

    def can_transition(self, from_node_id: str, to_node_id: str, context: UserContext) -> bool:
        try:
            self.validate_transition(from_node_id, to_node_id, context)
        except InvalidTransitionError:
            return False
        return True

    def validate_transition(
        self,
        from_node_id: str,
        to_node_id: str,
        context: UserContext,
    ) -> StepPlan:
        """Check a requested move against the step plan.

        Returns the plan the move was checked against.

        Raises:
            InvalidTransitionError: If the move is not allowed right now
        """
        if not self._graph.has_node(to_node_id):
            raise InvalidTransitionError(from_node_id, to_node_id, "unknown node")

        plan = self.plan_step(from_node_id, context)
        if plan.is_terminal:
            raise InvalidTransitionError(from_node_id, to_node_id, "current node is terminal")

        if plan.forced is not None:
            if plan.forced.target_node_id != to_node_id:
                raise InvalidTransitionError(
                    from_node_id,
                    to_node_id,
                    f"branch forces '{plan.forced.target_node_id}'",
                )
            return plan

        if to_node_id in plan.candidate_ids:
            return plan

        source = self._edge_source(self.get_node(from_node_id))
        if source is None or to_node_id not in self._graph.outgoing(source):
            raise InvalidTransitionError(from_node_id, to_node_id, "not an outgoing edge")
        raise InvalidTransitionError(from_node_id, to_node_id, "not eligible")

    def _edge_source(self, node: GraphNode) -> GraphNode | None:
        """The node whose edges apply: node itself, else nearest composite ancestor."""
        current = node
        visited = {node.id}
        while not self._graph.outgoing(current):
            parents = self._graph.parents_of(current.id)
            if not parents:
                return None
            parent = parents[0]
            if parent.id in visited or len(visited) > self._max_composite_depth:
                return None
            if parent.is_terminal:
                return None
            visited.add(parent.id)
            current = parent
        return current

    def _ordered_candidates(self, source: GraphNode, context: UserContext) -> list[GraphNode]:
        targets = self._graph.outgoing(source)
        nodes = [self.get_node(target) for target in targets]
        eligible = self._evaluator.filter(self._graph, nodes, context)

        edge_order = {target: position for position, target in enumerate(targets)}
        intents = context.intent_scores()
        eligible.sort(
            key=lambda n: (-n.priority, -n.intent_affinity(intents), edge_order[n.id])
        )
        return eligible
