"""SessionStore abstract interface."""

from abc import ABC, abstractmethod
from uuid import UUID

from navgraph.context.models import NavigationSession, SessionStatus


class SessionStore(ABC):
    """Abstract interface for navigation session storage."""

    @abstractmethod
    async def get(self, session_id: UUID) -> NavigationSession | None:
        """Get a session by ID."""
        pass

    @abstractmethod
    async def save(self, session: NavigationSession) -> UUID:
        """Save a session, returning its ID."""
        pass

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        """Delete a session."""
        pass

    @abstractmethod
    async def list_by_graph(
        self,
        graph_id: str,
        *,
        status: SessionStatus | None = None,
        limit: int = 100,
    ) -> list[NavigationSession]:
        """List sessions on a graph, most recently updated first."""
        pass
