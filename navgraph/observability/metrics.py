"""Prometheus metrics for NavGraph."""

from prometheus_client import Counter, Gauge, Histogram

DECISIONS = Counter(
    "navgraph_decisions_total",
    "Navigation decisions by how the next node was chosen",
    labelnames=["graph_id", "source"],
)

FALLBACKS = Counter(
    "navgraph_fallbacks_total",
    "Orchestration fallbacks by reason",
    labelnames=["graph_id", "reason"],
)

ORCHESTRATION_LATENCY = Histogram(
    "navgraph_orchestration_latency_seconds",
    "Time spent selecting the next node",
    labelnames=["source"],
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

ELIGIBILITY_CACHE = Counter(
    "navgraph_eligibility_cache_total",
    "Eligibility cache lookups",
    labelnames=["result"],
)

ACTIVE_SESSIONS = Gauge(
    "navgraph_active_sessions",
    "Sessions currently in the active state",
    labelnames=["graph_id"],
)

ERRORS = Counter(
    "navgraph_errors_total",
    "Errors raised while navigating",
    labelnames=["error_type"],
)
