"""In-memory implementation of SessionStore."""

from uuid import UUID

from navgraph.context.models import NavigationSession, SessionStatus
from navgraph.context.store import SessionStore


class InMemorySessionStore(SessionStore):
    """Dict-backed SessionStore for tests and single-process deployments.

    Stores deep copies so callers cannot mutate stored state without
    calling save().
    """

    def __init__(self) -> None:
        self._sessions: dict[UUID, NavigationSession] = {}

    async def get(self, session_id: UUID) -> NavigationSession | None:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    async def save(self, session: NavigationSession) -> UUID:
        self._sessions[session.id] = session.model_copy(deep=True)
        return session.id

    async def delete(self, session_id: UUID) -> bool:
        return self._sessions.pop(session_id, None) is not None

    async def list_by_graph(
        self,
        graph_id: str,
        *,
        status: SessionStatus | None = None,
        limit: int = 100,
    ) -> list[NavigationSession]:
        results = [
            s.model_copy(deep=True)
            for s in self._sessions.values()
            if s.graph_id == graph_id and (status is None or s.status == status)
        ]
        results.sort(key=lambda s: s.updated_at, reverse=True)
        return results[:limit]
