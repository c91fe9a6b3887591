"""Unit tests for NavigationService."""

import asyncio
import json
from typing import Any

import pytest
import pytest_asyncio

from navgraph.audit import AuditEventType, AuditService, InMemoryAuditStore
from navgraph.context import ContextManager, InMemorySessionStore, SessionStatus
from navgraph.exceptions import (
    GraphNotFoundError,
    GraphValidationError,
    InvalidTransitionError,
    SessionCompletedError,
)
from navgraph.graph.eligibility import EligibilityCache, EligibilityEvaluator
from navgraph.graph.models import Intent
from navgraph.graph.stores import InMemoryGraphStore
from navgraph.orchestration import AIOrchestrationService, DecisionSource, FallbackReason
from navgraph.providers.llm import (
    LLMExecutor,
    LLMMessage,
    LLMResponse,
    MockLLMProvider,
    get_execution_context,
)
from navgraph.runtime import NavigationService
from tests.factories import GraphFactory


@pytest.fixture
def llm() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def audit_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def service(llm: MockLLMProvider, audit_store: InMemoryAuditStore) -> NavigationService:
    cache = EligibilityCache()
    return NavigationService(
        graph_store=InMemoryGraphStore(),
        context_manager=ContextManager(InMemorySessionStore(), eligibility_cache=cache),
        orchestrator=AIOrchestrationService(llm),
        audit=AuditService(audit_store),
        evaluator=EligibilityEvaluator(cache=cache),
    )


@pytest_asyncio.fixture
async def registered(service: NavigationService) -> NavigationService:
    await service.register_graph(GraphFactory.onboarding())
    return service


def answer(node_id: str, confidence: float = 0.9) -> str:
    return json.dumps({"node_id": node_id, "confidence": confidence, "reasoning": "test"})


class TestGraphs:
    @pytest.mark.asyncio
    async def test_register_and_get(self, service: NavigationService) -> None:
        result = await service.register_graph(GraphFactory.onboarding())
        assert result.is_valid

        graph = await service.get_graph("onboarding")
        assert graph.version == 1
        assert [g.id for g in await service.list_graphs()] == ["onboarding"]

    @pytest.mark.asyncio
    async def test_invalid_graph_rejected(self, service: NavigationService) -> None:
        graph = GraphFactory.create([GraphFactory.node("a", is_terminal=True)], entry_node_id="x")
        with pytest.raises(GraphValidationError):
            await service.register_graph(graph)
        with pytest.raises(GraphNotFoundError):
            await service.get_graph(graph.id)

    @pytest.mark.asyncio
    async def test_registration_is_audited(
        self, registered: NavigationService, audit_store: InMemoryAuditStore
    ) -> None:
        events = await audit_store.list_events(event_type=AuditEventType.GRAPH_REGISTERED)
        assert events[0].event_data["content_hash"] == GraphFactory.onboarding().content_hash

    @pytest.mark.asyncio
    async def test_delete_graph(self, registered: NavigationService) -> None:
        await registered.delete_graph("onboarding")
        with pytest.raises(GraphNotFoundError):
            await registered.delete_graph("onboarding")

    @pytest.mark.asyncio
    async def test_engine_cached_by_content_hash(self, registered: NavigationService) -> None:
        graph = await registered.get_graph("onboarding")
        assert registered.engine_for(graph) is registered.engine_for(graph)

    @pytest.mark.asyncio
    async def test_engine_cache_evicts_least_recently_used(
        self, service: NavigationService
    ) -> None:
        service.max_cached_engines = 2
        graphs = [GraphFactory.linear(name, id=name) for name in ("one", "two", "three")]
        first = service.engine_for(graphs[0])
        service.engine_for(graphs[1])
        service.engine_for(graphs[0])
        service.engine_for(graphs[2])

        assert len(service._engines) == 2
        assert service.engine_for(graphs[0]) is first
        assert graphs[1].content_hash not in service._engines

    @pytest.mark.asyncio
    async def test_identical_version_can_be_registered_again(
        self, registered: NavigationService
    ) -> None:
        result = await registered.register_graph(GraphFactory.onboarding())
        assert result.is_valid

    @pytest.mark.asyncio
    async def test_same_version_with_new_content_rejected(
        self, registered: NavigationService
    ) -> None:
        changed = GraphFactory.create(
            [GraphFactory.node("welcome", is_terminal=True)], id="onboarding", version=1
        )
        with pytest.raises(GraphValidationError) as exc_info:
            await registered.register_graph(changed)

        assert "version 1 already exists" in str(exc_info.value)
        stored = await registered.get_graph("onboarding", 1)
        assert stored.content_hash == GraphFactory.onboarding().content_hash


class TestNavigation:
    """End-to-end walks through the onboarding graph."""

    @pytest.mark.asyncio
    async def test_full_walk(self, registered: NavigationService, llm: MockLLMProvider) -> None:
        session = await registered.start_session("onboarding", variables={"age": 30})
        assert session.current_node_id == "welcome"

        result = await registered.next_step(session.id)
        assert result.decision.source == DecisionSource.SINGLE_CANDIDATE
        assert result.session.current_node_id == "plans"

        llm.queue_response(answer("premium"))
        result = await registered.next_step(session.id)
        assert result.decision.source == DecisionSource.AI
        assert result.session.current_node_id == "premium"

        result = await registered.next_step(session.id)
        assert result.decision.selected_node_id == "checkout"
        assert result.entry.landed_node_id == "payment"
        assert result.node is not None
        assert result.node.id == "payment"

        await registered.next_step(session.id)
        result = await registered.next_step(session.id)
        assert result.session.current_node_id == "done"
        assert result.completed
        assert result.session.status == SessionStatus.COMPLETED
        assert result.session.step_count == 5

        with pytest.raises(SessionCompletedError):
            await registered.next_step(session.id)

        decisions = await registered.decisions(session.id)
        assert [d.step for d in decisions] == [1, 2, 3, 4, 5]
        assert [d.from_node_id for d in decisions] == [
            "welcome", "plans", "premium", "payment", "confirm",
        ]

        report = await registered.replay(session.id)
        assert report.is_consistent
        assert report.steps_replayed == 5

    @pytest.mark.asyncio
    async def test_branch_forces_dashboard(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding", variables={"returning": True})
        result = await registered.next_step(session.id)
        assert result.decision.source == DecisionSource.BRANCH
        assert result.session.current_node_id == "dashboard"

    @pytest.mark.asyncio
    async def test_default_mock_output_falls_back(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding", variables={"age": 30})
        await registered.next_step(session.id)

        result = await registered.next_step(session.id)

        assert result.decision.source == DecisionSource.FALLBACK
        assert result.decision.fallback_reason == FallbackReason.PARSE_ERROR
        assert result.session.current_node_id == "basic"
        assert result.entry.fallback_reason == FallbackReason.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_session_pinned_to_graph_version(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding")
        changed = GraphFactory.create(
            [GraphFactory.node("welcome", is_terminal=True)], id="onboarding", version=2
        )
        await registered.register_graph(changed)

        result = await registered.next_step(session.id)
        assert result.session.graph_version == 1
        assert result.session.current_node_id == "plans"

    @pytest.mark.asyncio
    async def test_starting_on_terminal_completes(self, service: NavigationService) -> None:
        await service.register_graph(GraphFactory.linear("only"))
        session = await service.start_session("linear")
        assert session.status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_dead_end_records_none_and_completes(self, service: NavigationService) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node("start", allowed_next=["gated"]),
                GraphFactory.node("gated", eligibility=["False"], is_terminal=True),
            ],
            id="dead-end",
        )
        await service.register_graph(graph)
        session = await service.start_session("dead-end")

        result = await service.next_step(session.id)

        assert result.decision.source == DecisionSource.NONE
        assert result.entry.selected_node_id is None
        assert result.node is None
        assert result.session.status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_division_by_zero_makes_node_ineligible(
        self, service: NavigationService
    ) -> None:
        graph = GraphFactory.create(
            [
                GraphFactory.node("start", allowed_next=["a", "b"]),
                GraphFactory.node("a", eligibility=["total / count > 2"], is_terminal=True),
                GraphFactory.node("b", is_terminal=True),
            ],
            id="ratio",
        )
        await service.register_graph(graph)
        session = await service.start_session("ratio", variables={"total": 10, "count": 0})

        result = await service.next_step(session.id)

        assert result.decision.source == DecisionSource.SINGLE_CANDIDATE
        assert result.decision.selected_node_id == "b"
        assert result.session.status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_llm_response_tagged_with_step_context(
        self, llm: MockLLMProvider, audit_store: InMemoryAuditStore
    ) -> None:
        responses: list[LLMResponse] = []

        class RecordingExecutor(LLMExecutor):
            async def generate(self, messages: list[LLMMessage], **kwargs: Any) -> LLMResponse:
                response = await super().generate(messages, **kwargs)
                responses.append(response)
                return response

        executor = RecordingExecutor(model="mock/navigator", providers={"mock": llm})
        navigator = NavigationService(
            graph_store=InMemoryGraphStore(),
            context_manager=ContextManager(InMemorySessionStore()),
            orchestrator=AIOrchestrationService(executor),
            audit=AuditService(audit_store),
        )
        await navigator.register_graph(GraphFactory.onboarding())
        session = await navigator.start_session("onboarding", variables={"age": 30})
        await navigator.next_step(session.id)

        llm.queue_response(answer("premium"))
        result = await navigator.next_step(session.id)

        assert result.decision.source == DecisionSource.AI
        assert len(responses) == 1
        metadata = responses[0].metadata
        assert metadata["session_id"] == str(session.id)
        assert metadata["graph_id"] == "onboarding"
        assert metadata["node_id"] == "plans"
        assert metadata["step"] == "next_step"
        assert get_execution_context() is None

    @pytest.mark.asyncio
    async def test_concurrent_steps_are_serialized(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding", variables={"age": 30})

        results = await asyncio.gather(
            registered.next_step(session.id),
            registered.next_step(session.id),
        )

        assert sorted(r.entry.step for r in results) == [1, 2]
        final = await registered.get_session(session.id)
        assert final.step_count == 2
        assert [v.node_id for v in final.history] == ["welcome", "plans", "basic"]


class TestChooseAndContext:
    @pytest.mark.asyncio
    async def test_choose_valid_node(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding", variables={"age": 30})
        await registered.next_step(session.id)

        result = await registered.choose(session.id, "premium")

        assert result.decision.source == DecisionSource.EXPLICIT
        assert result.decision.candidate_ids == ["basic", "premium"]
        assert result.session.current_node_id == "premium"

    @pytest.mark.asyncio
    async def test_choose_ineligible_node(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding")
        with pytest.raises(InvalidTransitionError):
            await registered.choose(session.id, "dashboard")

        unchanged = await registered.get_session(session.id)
        assert unchanged.step_count == 0

    @pytest.mark.asyncio
    async def test_context_update_changes_eligibility(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding", variables={"age": 30})
        await registered.next_step(session.id)
        assert (await registered.eligible(session.id)).candidate_ids == ["basic", "premium"]

        await registered.update_context(session.id, variables={"age": 15})

        assert (await registered.eligible(session.id)).candidate_ids == ["basic"]

    @pytest.mark.asyncio
    async def test_intent_update_reorders_candidates(self, registered: NavigationService) -> None:
        session = await registered.start_session("onboarding", variables={"age": 30})
        await registered.next_step(session.id)

        await registered.update_context(
            session.id, intents=[Intent(name="upgrade", confidence=0.8)]
        )

        plan = await registered.eligible(session.id)
        assert plan.candidate_ids == ["premium", "basic"]

    @pytest.mark.asyncio
    async def test_abandon(
        self, registered: NavigationService, audit_store: InMemoryAuditStore
    ) -> None:
        session = await registered.start_session("onboarding")
        abandoned = await registered.abandon(session.id)

        assert abandoned.status == SessionStatus.ABANDONED
        events = await audit_store.list_events(
            session_id=session.id, event_type=AuditEventType.SESSION_ABANDONED
        )
        assert len(events) == 1
        with pytest.raises(SessionCompletedError):
            await registered.eligible(session.id)
