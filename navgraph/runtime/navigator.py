"""Navigation service: engine, orchestration, context, and audit together."""

from collections import OrderedDict
from typing import Any
from uuid import UUID

from navgraph.audit import (
    AuditEventType,
    AuditService,
    DecisionEntry,
    ReplayReport,
    SessionReplayer,
)
from navgraph.config.models import EngineConfig
from navgraph.context import ContextManager, NavigationSession
from navgraph.exceptions import GraphNotFoundError, GraphValidationError
from navgraph.graph import DirectedGraphEngine, GraphValidationResult, GraphValidator
from navgraph.graph.eligibility import EligibilityEvaluator
from navgraph.graph.models import Intent, NavigationGraph, StepPlan
from navgraph.graph.store import GraphStore
from navgraph.observability.logging import bind_session_context, get_logger
from navgraph.observability.metrics import ACTIVE_SESSIONS
from navgraph.orchestration import AIOrchestrationService, DecisionSource, OrchestrationDecision
from navgraph.providers.llm import (
    ExecutionContext,
    clear_execution_context,
    set_execution_context,
)
from navgraph.runtime.models import NavigationResult

logger = get_logger(__name__)

MAX_CACHED_ENGINES = 64


class NavigationService:
    """Drives sessions through navigation graphs.

    Sessions are pinned to the graph version they started on. Each step
    holds the session lock from planning until the move is saved, so two
    concurrent ``next_step`` calls on one session apply one after the
    other.
    """

    max_cached_engines: int = MAX_CACHED_ENGINES

    def __init__(
        self,
        graph_store: GraphStore,
        context_manager: ContextManager,
        orchestrator: AIOrchestrationService,
        audit: AuditService,
        evaluator: EligibilityEvaluator | None = None,
        engine_config: EngineConfig | None = None,
    ) -> None:
        self._graphs = graph_store
        self._contexts = context_manager
        self._orchestrator = orchestrator
        self._audit = audit
        self._evaluator = evaluator or EligibilityEvaluator()
        self._engine_config = engine_config or EngineConfig()
        self._validator = GraphValidator(
            registry=self._evaluator.registry,
            expressions=self._evaluator.expressions,
            warn_on_unreachable=self._engine_config.warn_on_unreachable,
            max_composite_depth=self._engine_config.max_composite_depth,
        )
        self._replayer = SessionReplayer(
            registry=self._evaluator.registry,
            fallback=orchestrator.fallback,
        )
        self._engines: OrderedDict[str, DirectedGraphEngine] = OrderedDict()

    @property
    def contexts(self) -> ContextManager:
        return self._contexts

    @property
    def validator(self) -> GraphValidator:
        return self._validator

    # ------------------------------------------------------------------
    # Graphs
    # ------------------------------------------------------------------

    async def register_graph(self, graph: NavigationGraph) -> GraphValidationResult:
        """Validate and store a graph version.

        Re-registering an identical version is allowed. Registering a
        version number that already holds different content is not, since
        sessions pinned to that version would silently change graphs.

        Raises:
            GraphValidationError: If the graph has validation errors or
                its version already exists with different content
        """
        result = self._validator.ensure_valid(graph)
        existing = await self._graphs.get_version(graph.id, graph.version)
        if existing is not None and existing.content_hash != graph.content_hash:
            raise GraphValidationError(
                f"Graph '{graph.id}' version {graph.version} already exists "
                "with different content",
                errors=[
                    f"Version {graph.version} is registered with content hash "
                    f"{existing.content_hash}; bump the version to change it"
                ],
            )
        await self._graphs.save(graph)
        await self._audit.record_event(
            AuditEventType.GRAPH_REGISTERED,
            graph_id=graph.id,
            data={
                "version": graph.version,
                "content_hash": graph.content_hash,
                "warnings": result.warnings,
            },
        )
        logger.info(
            "graph_registered",
            graph_id=graph.id,
            version=graph.version,
            node_count=len(graph.nodes),
            warning_count=len(result.warnings),
        )
        return result

    async def delete_graph(self, graph_id: str) -> None:
        if not await self._graphs.delete(graph_id):
            raise GraphNotFoundError(graph_id)
        await self._audit.record_event(AuditEventType.GRAPH_DELETED, graph_id=graph_id)

    async def get_graph(self, graph_id: str, version: int | None = None) -> NavigationGraph:
        if version is None:
            graph = await self._graphs.get(graph_id)
        else:
            graph = await self._graphs.get_version(graph_id, version)
        if graph is None:
            raise GraphNotFoundError(graph_id)
        return graph

    async def list_graphs(self, *, tag: str | None = None) -> list[NavigationGraph]:
        return await self._graphs.list_graphs(tag=tag)

    def engine_for(self, graph: NavigationGraph) -> DirectedGraphEngine:
        """Engine for a graph version, cached by content hash (least recently used evicted)."""
        engine = self._engines.get(graph.content_hash)
        if engine is not None:
            self._engines.move_to_end(graph.content_hash)
            return engine

        engine = DirectedGraphEngine(
            graph,
            self._evaluator,
            max_composite_depth=self._engine_config.max_composite_depth,
        )
        self._engines[graph.content_hash] = engine
        while len(self._engines) > self.max_cached_engines:
            self._engines.popitem(last=False)
        return engine

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def start_session(
        self,
        graph_id: str,
        *,
        user_id: str | None = None,
        variables: dict[str, Any] | None = None,
        intents: list[Intent] | None = None,
        roles: list[str] | None = None,
        locale: str | None = None,
    ) -> NavigationSession:
        graph = await self.get_graph(graph_id)
        engine = self.engine_for(graph)
        chain = engine.resolve_entry(graph.entry_node_id)

        session = await self._contexts.create_session(
            graph,
            chain,
            user_id=user_id,
            variables=variables,
            intents=intents,
            roles=roles,
            locale=locale,
        )
        bind_session_context(session_id=session.id, graph_id=graph.id)
        ACTIVE_SESSIONS.labels(graph_id=graph.id).inc()
        await self._audit.record_event(
            AuditEventType.SESSION_CREATED,
            session_id=session.id,
            graph_id=graph.id,
            data={"entry_chain": chain, "graph_version": graph.version},
        )

        if engine.get_node(session.current_node_id).is_terminal:
            session = await self._finish(session)
        return session

    async def get_session(self, session_id: UUID) -> NavigationSession:
        return await self._contexts.get_session(session_id)

    async def eligible(self, session_id: UUID) -> StepPlan:
        """What may come next for the session, without moving it."""
        session = await self._contexts.get_active_session(session_id)
        engine = self.engine_for(await self._graph_for(session))
        return engine.plan_step(session.current_node_id, session.context)

    async def next_step(self, session_id: UUID) -> NavigationResult:
        """Advance the session by one engine-planned, orchestrated step.

        Raises:
            SessionNotFoundError: Unknown session
            SessionCompletedError: Session is no longer active
        """
        async with self._contexts.lock(session_id):
            session = await self._contexts.get_active_session(session_id)
            bind_session_context(session_id=session.id, graph_id=session.graph_id)
            graph = await self._graph_for(session)
            engine = self.engine_for(graph)

            current = engine.get_node(session.current_node_id)
            plan = engine.plan_step(current.id, session.context)
            set_execution_context(
                ExecutionContext(
                    session_id=session.id,
                    graph_id=graph.id,
                    node_id=current.id,
                    step="next_step",
                )
            )
            try:
                decision = await self._orchestrator.select(
                    plan,
                    session.context,
                    graph_id=graph.id,
                    current_node=current,
                    history=session.recent_node_ids(),
                    session_id=session.id,
                )
            finally:
                clear_execution_context()
            return await self._commit(session, engine, decision)

    async def choose(self, session_id: UUID, node_id: str) -> NavigationResult:
        """Move to a node the user picked, if the engine allows it.

        Raises:
            InvalidTransitionError: If node_id is not allowed from here
        """
        async with self._contexts.lock(session_id):
            session = await self._contexts.get_active_session(session_id)
            graph = await self._graph_for(session)
            engine = self.engine_for(graph)

            plan = engine.validate_transition(session.current_node_id, node_id, session.context)
            candidate_ids = [plan.forced.target_node_id] if plan.forced else plan.candidate_ids
            decision = OrchestrationDecision(
                selected_node_id=node_id,
                source=DecisionSource.EXPLICIT,
                reasoning="Selected by user",
                candidate_ids=candidate_ids,
            )
            return await self._commit(session, engine, decision)

    async def update_context(
        self,
        session_id: UUID,
        *,
        variables: dict[str, Any] | None = None,
        replace: bool = False,
        remove: list[str] | None = None,
        intents: list[Intent] | None = None,
    ) -> NavigationSession:
        async with self._contexts.lock(session_id):
            session = await self._contexts.get_active_session(session_id)
            if variables is not None or remove:
                session = await self._contexts.update_variables(
                    session_id, variables or {}, replace=replace, remove=remove
                )
            if intents is not None:
                session = await self._contexts.set_intents(session_id, intents)

        await self._audit.record_event(
            AuditEventType.CONTEXT_UPDATED,
            session_id=session_id,
            graph_id=session.graph_id,
            data={
                "variables": sorted((variables or {}).keys()),
                "removed": remove or [],
                "intents": [i.name for i in intents] if intents is not None else None,
                "context_version": session.context.version,
            },
        )
        return session

    async def abandon(self, session_id: UUID) -> NavigationSession:
        async with self._contexts.lock(session_id):
            session = await self._contexts.abandon(session_id)
        ACTIVE_SESSIONS.labels(graph_id=session.graph_id).dec()
        await self._audit.record_event(
            AuditEventType.SESSION_ABANDONED,
            session_id=session.id,
            graph_id=session.graph_id,
            data={"final_node": session.current_node_id, "steps": session.step_count},
        )
        return session

    async def decisions(self, session_id: UUID) -> list[DecisionEntry]:
        await self._contexts.get_session(session_id)
        return await self._audit.decisions_for(session_id)

    async def replay(self, session_id: UUID) -> ReplayReport:
        """Replay a session's decisions against the graph version it ran on."""
        session = await self._contexts.get_session(session_id)
        graph = await self._graph_for(session)
        entries = await self._audit.decisions_for(session_id)
        entry_visits = [v.node_id for v in session.history if v.via == "entry"]
        return self._replayer.replay(
            entries,
            graph,
            start_node_id=entry_visits[-1] if entry_visits else None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _graph_for(self, session: NavigationSession) -> NavigationGraph:
        return await self.get_graph(session.graph_id, session.graph_version)

    async def _commit(
        self,
        session: NavigationSession,
        engine: DirectedGraphEngine,
        decision: OrchestrationDecision,
    ) -> NavigationResult:
        """Audit the decision, then move (or complete) the session."""
        from_node_id = session.current_node_id
        snapshot = session.context.snapshot()

        if decision.selected_node_id is None:
            entry = await self._audit.record_decision(
                session,
                decision,
                from_node_id=from_node_id,
                context_snapshot=snapshot,
            )
            session = await self._finish(session)
            return NavigationResult(decision=decision, entry=entry, session=session)

        chain = engine.resolve_entry(decision.selected_node_id)

        entry = await self._audit.record_decision(
            session,
            decision,
            from_node_id=from_node_id,
            context_snapshot=snapshot,
            landed_node_id=chain[-1],
        )
        session = await self._contexts.record_visit(session, chain, via=decision.source.value)

        landed = engine.get_node(chain[-1])
        if landed.is_terminal:
            session = await self._finish(session)

        return NavigationResult(decision=decision, entry=entry, session=session, node=landed)

    async def _finish(self, session: NavigationSession) -> NavigationSession:
        session = await self._contexts.complete(session)
        ACTIVE_SESSIONS.labels(graph_id=session.graph_id).dec()
        await self._audit.record_event(
            AuditEventType.SESSION_COMPLETED,
            session_id=session.id,
            graph_id=session.graph_id,
            data={"final_node": session.current_node_id, "steps": session.step_count},
        )
        return session
