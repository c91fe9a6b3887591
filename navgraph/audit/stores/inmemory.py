"""In-memory implementation of AuditStore."""

from uuid import UUID

from navgraph.audit.models import AuditEvent, AuditEventType, DecisionEntry
from navgraph.audit.store import AuditStore


class InMemoryAuditStore(AuditStore):
    """In-memory AuditStore for testing and development.

    Linear scans for queries; not suitable for large volumes.
    """

    def __init__(self) -> None:
        self._decisions: dict[UUID, list[DecisionEntry]] = {}
        self._events: list[AuditEvent] = []

    async def save_decision(self, entry: DecisionEntry) -> UUID:
        self._decisions.setdefault(entry.session_id, []).append(entry)
        return entry.id

    async def list_decisions(
        self,
        session_id: UUID,
        *,
        limit: int = 1000,
        offset: int = 0,
    ) -> list[DecisionEntry]:
        entries = sorted(self._decisions.get(session_id, []), key=lambda e: e.step)
        return entries[offset:offset + limit]

    async def save_event(self, event: AuditEvent) -> UUID:
        self._events.append(event)
        return event.id

    async def list_events(
        self,
        *,
        session_id: UUID | None = None,
        graph_id: str | None = None,
        event_type: AuditEventType | None = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        results = [
            event for event in self._events
            if (session_id is None or event.session_id == session_id)
            and (graph_id is None or event.graph_id == graph_id)
            and (event_type is None or event.event_type == event_type)
        ]
        results.sort(key=lambda e: e.timestamp)
        return results[:limit]
