"""Recording of navigation decisions and lifecycle events."""

from typing import Any
from uuid import UUID

from navgraph.audit.models import AuditEvent, AuditEventType, DecisionEntry
from navgraph.audit.store import AuditStore
from navgraph.context.models import NavigationSession
from navgraph.observability.logging import get_logger
from navgraph.observability.metrics import DECISIONS
from navgraph.orchestration.models import OrchestrationDecision

logger = get_logger(__name__)


class AuditService:
    """Writes decisions and events to the audit store."""

    def __init__(self, store: AuditStore) -> None:
        self._store = store

    @property
    def store(self) -> AuditStore:
        return self._store

    async def record_decision(
        self,
        session: NavigationSession,
        decision: OrchestrationDecision,
        *,
        from_node_id: str,
        context_snapshot: dict[str, Any],
        landed_node_id: str | None = None,
    ) -> DecisionEntry:
        """Persist one decision.

        ``session.step_count`` must still hold the count before this step;
        the entry's step is that plus one.
        """
        entry = DecisionEntry(
            session_id=session.id,
            graph_id=session.graph_id,
            graph_version=session.graph_version,
            graph_hash=session.graph_hash,
            step=session.step_count + 1,
            from_node_id=from_node_id,
            candidate_ids=decision.candidate_ids,
            selected_node_id=decision.selected_node_id,
            landed_node_id=landed_node_id,
            source=decision.source,
            confidence=decision.confidence,
            reasoning=decision.reasoning,
            fallback_reason=decision.fallback_reason,
            ai_node_id=decision.ai_response.node_id if decision.ai_response else None,
            model=decision.model,
            latency_ms=decision.latency_ms,
            context_snapshot=context_snapshot,
        )
        await self._store.save_decision(entry)
        DECISIONS.labels(graph_id=session.graph_id, source=decision.source.value).inc()

        logger.info(
            "decision_recorded",
            session_id=str(session.id),
            step=entry.step,
            from_node=from_node_id,
            selected=entry.selected_node_id,
            source=entry.source.value,
        )
        return entry

    async def record_event(
        self,
        event_type: AuditEventType,
        *,
        session_id: UUID | None = None,
        graph_id: str | None = None,
        data: dict[str, Any] | None = None,
    ) -> AuditEvent:
        event = AuditEvent(
            event_type=event_type,
            session_id=session_id,
            graph_id=graph_id,
            event_data=data or {},
        )
        await self._store.save_event(event)
        logger.debug(
            "audit_event_recorded",
            event_type=event_type.value,
            session_id=str(session_id) if session_id else None,
            graph_id=graph_id,
        )
        return event

    async def decisions_for(self, session_id: UUID) -> list[DecisionEntry]:
        return await self._store.list_decisions(session_id)
