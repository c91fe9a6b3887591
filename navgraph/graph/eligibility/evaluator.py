"""Node eligibility evaluation."""

from pydantic import BaseModel, Field

from navgraph.graph.eligibility.cache import CacheKey, EligibilityCache
from navgraph.graph.eligibility.expressions import ExpressionEvaluator
from navgraph.graph.eligibility.predicates import PredicateRegistry
from navgraph.graph.models import GraphNode, NavigationGraph, UserContext
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)


class EligibilityReport(BaseModel):
    """Why a node is or is not eligible."""

    node_id: str
    eligible: bool
    failed_expressions: list[str] = Field(default_factory=list)
    failed_predicates: list[str] = Field(default_factory=list)


class EligibilityEvaluator:
    """Decide whether nodes may be shown for a given user context.

    A node is eligible when every expression in ``eligibility`` is true
    and every named predicate passes. Nodes without rules are always
    eligible. A predicate that raises, or is not registered, fails.
    """

    def __init__(
        self,
        registry: PredicateRegistry | None = None,
        expressions: ExpressionEvaluator | None = None,
        cache: EligibilityCache | None = None,
    ) -> None:
        self._registry = registry or PredicateRegistry()
        self._expressions = expressions or ExpressionEvaluator()
        self._cache = cache

    @property
    def registry(self) -> PredicateRegistry:
        return self._registry

    @property
    def expressions(self) -> ExpressionEvaluator:
        return self._expressions

    @property
    def cache(self) -> EligibilityCache | None:
        return self._cache

    def is_eligible(
        self,
        graph: NavigationGraph,
        node: GraphNode,
        context: UserContext,
    ) -> bool:
        if not node.has_eligibility_rules:
            return True

        key = self._cache_key(graph, node, context)
        if key is not None and self._cache is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        eligible = self.explain(node, context).eligible

        if key is not None and self._cache is not None:
            self._cache.set(key, eligible)
        return eligible

    def filter(
        self,
        graph: NavigationGraph,
        nodes: list[GraphNode],
        context: UserContext,
    ) -> list[GraphNode]:
        """Keep eligible nodes, preserving order."""
        return [node for node in nodes if self.is_eligible(graph, node, context)]

    def explain(self, node: GraphNode, context: UserContext) -> EligibilityReport:
        """Evaluate every rule on a node without short-circuiting or caching."""
        names = context.evaluation_names()

        failed_expressions = [
            expr for expr in node.eligibility
            if not self._expressions.evaluate(expr, names)
        ]
        failed_predicates = [
            name for name in node.predicates
            if not self._run_predicate(node, name, context)
        ]

        return EligibilityReport(
            node_id=node.id,
            eligible=not failed_expressions and not failed_predicates,
            failed_expressions=failed_expressions,
            failed_predicates=failed_predicates,
        )

    def _run_predicate(self, node: GraphNode, name: str, context: UserContext) -> bool:
        predicate = self._registry.get(name)
        if predicate is None:
            logger.warning("predicate_not_registered", node_id=node.id, predicate=name)
            return False
        try:
            return bool(predicate(context))
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "predicate_raised",
                node_id=node.id,
                predicate=name,
                error=str(e),
                error_type=type(e).__name__,
            )
            return False

    def _cache_key(
        self,
        graph: NavigationGraph,
        node: GraphNode,
        context: UserContext,
    ) -> CacheKey | None:
        if context.session_id is None:
            return None
        return CacheKey(
            session_id=context.session_id,
            graph_hash=graph.content_hash,
            node_id=node.id,
            context_version=context.version,
        )
