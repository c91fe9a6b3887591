"""Unit tests for AuditService and InMemoryAuditStore."""

import pytest

from navgraph.audit import AuditEventType, AuditService, InMemoryAuditStore
from navgraph.context import NavigationSession
from navgraph.orchestration import (
    AIDecisionResponse,
    DecisionSource,
    FallbackReason,
    OrchestrationDecision,
)


@pytest.fixture
def store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def service(store: InMemoryAuditStore) -> AuditService:
    return AuditService(store)


@pytest.fixture
def session() -> NavigationSession:
    return NavigationSession(
        graph_id="onboarding",
        graph_version=2,
        graph_hash="abc",
        current_node_id="plans",
        step_count=3,
    )


class TestRecordDecision:
    @pytest.mark.asyncio
    async def test_entry_fields(self, service: AuditService, session: NavigationSession) -> None:
        decision = OrchestrationDecision(
            selected_node_id="basic",
            source=DecisionSource.FALLBACK,
            candidate_ids=["basic", "premium"],
            fallback_reason=FallbackReason.INVALID_NODE,
            ai_response=AIDecisionResponse(node_id="done", confidence=0.9),
            latency_ms=12.5,
        )

        entry = await service.record_decision(
            session,
            decision,
            from_node_id="plans",
            context_snapshot={"variables": {"age": 30}},
            landed_node_id="basic",
        )

        assert entry.step == 4
        assert entry.graph_version == 2
        assert entry.graph_hash == "abc"
        assert entry.selected_node_id == "basic"
        assert entry.ai_node_id == "done"
        assert entry.fallback_reason == FallbackReason.INVALID_NODE
        assert entry.context_snapshot == {"variables": {"age": 30}}

    @pytest.mark.asyncio
    async def test_decisions_listed_in_step_order(
        self, service: AuditService, session: NavigationSession
    ) -> None:
        for step_count in (2, 0, 1):
            session.step_count = step_count
            await service.record_decision(
                session,
                OrchestrationDecision(selected_node_id="x", source=DecisionSource.AI),
                from_node_id="a",
                context_snapshot={},
            )

        entries = await service.decisions_for(session.id)
        assert [e.step for e in entries] == [1, 2, 3]


class TestInMemoryAuditStore:
    @pytest.mark.asyncio
    async def test_list_decisions_pagination(
        self, service: AuditService, store: InMemoryAuditStore, session: NavigationSession
    ) -> None:
        for step_count in range(5):
            session.step_count = step_count
            await service.record_decision(
                session,
                OrchestrationDecision(selected_node_id="x", source=DecisionSource.AI),
                from_node_id="a",
                context_snapshot={},
            )

        page = await store.list_decisions(session.id, limit=2, offset=1)
        assert [e.step for e in page] == [2, 3]

    @pytest.mark.asyncio
    async def test_events_filtered(
        self, service: AuditService, store: InMemoryAuditStore, session: NavigationSession
    ) -> None:
        await service.record_event(AuditEventType.GRAPH_REGISTERED, graph_id="onboarding")
        await service.record_event(
            AuditEventType.SESSION_CREATED, session_id=session.id, graph_id="onboarding"
        )
        await service.record_event(AuditEventType.GRAPH_REGISTERED, graph_id="other")

        assert len(await store.list_events(graph_id="onboarding")) == 2
        created = await store.list_events(event_type=AuditEventType.SESSION_CREATED)
        assert [e.session_id for e in created] == [session.id]
        assert len(await store.list_events(session_id=session.id)) == 1
