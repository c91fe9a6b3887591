"""Replay of recorded decisions against a graph.

Each recorded step is re-planned from its context snapshot. AI choices
are not re-queried; replay checks that what was chosen is still
something the engine would offer, and that every deterministic outcome
(branch targets, fallback picks) comes out the same.
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from navgraph.audit.models import DecisionEntry
from navgraph.graph.eligibility import EligibilityEvaluator, PredicateRegistry
from navgraph.graph.engine import DirectedGraphEngine
from navgraph.graph.models import NavigationGraph, UserContext
from navgraph.observability.logging import get_logger
from navgraph.orchestration.fallback import FallbackStrategy
from navgraph.orchestration.models import DecisionSource

logger = get_logger(__name__)


class DivergenceKind(str, Enum):
    """Ways a replayed step can differ from the recorded one."""

    UNKNOWN_NODE = "unknown_node"
    BROKEN_CHAIN = "broken_chain"
    BRANCH_MISMATCH = "branch_mismatch"
    CANDIDATES_CHANGED = "candidates_changed"
    INELIGIBLE_SELECTION = "ineligible_selection"
    FALLBACK_MISMATCH = "fallback_mismatch"


class Divergence(BaseModel):
    step: int
    kind: DivergenceKind
    message: str
    expected: str | list[str] | None = None
    actual: str | list[str] | None = None


class ReplayReport(BaseModel):
    session_id: UUID | None = None
    graph_id: str
    graph_hash: str
    steps_replayed: int = 0
    divergences: list[Divergence] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_consistent(self) -> bool:
        return not self.divergences


class SessionReplayer:
    """Re-run a session's decision log and report divergences."""

    def __init__(
        self,
        registry: PredicateRegistry | None = None,
        fallback: FallbackStrategy | None = None,
    ) -> None:
        self._registry = registry or PredicateRegistry()
        self._fallback = fallback or FallbackStrategy()

    def replay(
        self,
        entries: list[DecisionEntry],
        graph: NavigationGraph,
        *,
        start_node_id: str | None = None,
    ) -> ReplayReport:
        """Replay entries (any order; sorted by step) against graph.

        Args:
            entries: Recorded decisions for one session
            graph: Graph to replay against, normally the recorded version
            start_node_id: Node the session started on, to check step 1
        """
        ordered = sorted(entries, key=lambda e: e.step)
        report = ReplayReport(
            session_id=ordered[0].session_id if ordered else None,
            graph_id=graph.id,
            graph_hash=graph.content_hash,
        )
        # no cache: snapshots carry no session identity
        engine = DirectedGraphEngine(graph, EligibilityEvaluator(self._registry))

        recorded_hashes = {e.graph_hash for e in ordered}
        if recorded_hashes - {graph.content_hash}:
            report.warnings.append(
                "Decisions were recorded against a different graph version "
                f"(recorded {sorted(recorded_hashes)}, replaying {graph.content_hash})"
            )

        expected_from = start_node_id
        for entry in ordered:
            self._replay_entry(engine, entry, expected_from, report)
            expected_from = entry.landed_node_id or entry.selected_node_id
            report.steps_replayed += 1

        logger.info(
            "session_replayed",
            session_id=str(report.session_id) if report.session_id else None,
            graph_id=graph.id,
            steps=report.steps_replayed,
            divergences=len(report.divergences),
        )
        return report

    def _replay_entry(
        self,
        engine: DirectedGraphEngine,
        entry: DecisionEntry,
        expected_from: str | None,
        report: ReplayReport,
    ) -> None:
        def diverge(kind: DivergenceKind, message: str, expected=None, actual=None) -> None:
            report.divergences.append(
                Divergence(
                    step=entry.step,
                    kind=kind,
                    message=message,
                    expected=expected,
                    actual=actual,
                )
            )

        if expected_from is not None and entry.from_node_id != expected_from:
            diverge(
                DivergenceKind.BROKEN_CHAIN,
                "Step does not start where the previous step ended",
                expected=expected_from,
                actual=entry.from_node_id,
            )

        graph = engine.graph
        for node_id in (entry.from_node_id, entry.selected_node_id):
            if node_id is not None and not graph.has_node(node_id):
                diverge(DivergenceKind.UNKNOWN_NODE, f"Node '{node_id}' is not in the graph")
                return

        context = UserContext.model_validate({**entry.context_snapshot, "session_id": None})
        plan = engine.plan_step(entry.from_node_id, context)
        selected = entry.selected_node_id

        if entry.source == DecisionSource.BRANCH:
            forced = plan.forced.target_node_id if plan.forced else None
            if forced != selected:
                diverge(
                    DivergenceKind.BRANCH_MISMATCH,
                    "Branch evaluation no longer selects the recorded target",
                    expected=selected,
                    actual=forced,
                )
            return

        if plan.forced is not None:
            if entry.source == DecisionSource.EXPLICIT and plan.forced.target_node_id == selected:
                return
            diverge(
                DivergenceKind.BRANCH_MISMATCH,
                "A branch now forces a target where none did",
                expected=selected,
                actual=plan.forced.target_node_id,
            )
            return

        if entry.source == DecisionSource.NONE:
            if plan.has_next:
                diverge(
                    DivergenceKind.CANDIDATES_CHANGED,
                    "Candidates now exist where none did",
                    expected=[],
                    actual=plan.candidate_ids,
                )
            return

        if sorted(plan.candidate_ids) != sorted(entry.candidate_ids):
            diverge(
                DivergenceKind.CANDIDATES_CHANGED,
                "Eligible candidates differ from the recorded set",
                expected=entry.candidate_ids,
                actual=plan.candidate_ids,
            )

        if selected not in plan.candidate_ids:
            diverge(
                DivergenceKind.INELIGIBLE_SELECTION,
                f"Selected node '{selected}' is no longer eligible",
                expected=selected,
                actual=plan.candidate_ids,
            )
            return

        if entry.source == DecisionSource.FALLBACK:
            chosen = self._fallback.choose(plan.candidates, context)
            if chosen is None or chosen.id != selected:
                diverge(
                    DivergenceKind.FALLBACK_MISMATCH,
                    "Deterministic fallback now picks a different node",
                    expected=selected,
                    actual=chosen.id if chosen else None,
                )
