"""Node eligibility: expressions, registered predicates, and caching."""

from navgraph.graph.eligibility.cache import CacheKey, EligibilityCache
from navgraph.graph.eligibility.evaluator import EligibilityEvaluator, EligibilityReport
from navgraph.graph.eligibility.expressions import ExpressionEvaluator
from navgraph.graph.eligibility.predicates import Predicate, PredicateRegistry

__all__ = [
    "CacheKey",
    "EligibilityCache",
    "EligibilityEvaluator",
    "EligibilityReport",
    "ExpressionEvaluator",
    "Predicate",
    "PredicateRegistry",
]
