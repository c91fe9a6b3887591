"""AuditStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from navgraph.audit.models import AuditEvent, AuditEventType, DecisionEntry


class AuditStore(ABC):
    """Append-only storage for decisions and audit events."""

    @abstractmethod
    async def save_decision(self, entry: DecisionEntry) -> UUID:
        """Save a decision entry."""
        pass

    @abstractmethod
    async def list_decisions(
        self,
        session_id: UUID,
        *,
        limit: int = 1000,
        offset: int = 0,
    ) -> list[DecisionEntry]:
        """List a session's decisions in step order."""
        pass

    @abstractmethod
    async def save_event(self, event: AuditEvent) -> UUID:
        """Save an audit event."""
        pass

    @abstractmethod
    async def list_events(
        self,
        *,
        session_id: UUID | None = None,
        graph_id: str | None = None,
        event_type: AuditEventType | None = None,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """List events in chronological order."""
        pass
