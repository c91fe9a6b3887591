"""Session and user-context lifecycle."""

import asyncio
import weakref
from typing import Any
from uuid import UUID

from navgraph.context.models import NavigationSession, NodeVisit, SessionStatus
from navgraph.context.store import SessionStore
from navgraph.exceptions import SessionCompletedError, SessionNotFoundError
from navgraph.graph.eligibility import EligibilityCache
from navgraph.graph.models import Intent, NavigationGraph, UserContext
from navgraph.graph.models.base import utc_now
from navgraph.observability.logging import get_logger

logger = get_logger(__name__)


class ContextManager:
    """Owns session state and the user context inside it.

    Every context change goes through here so the eligibility cache for
    the session is dropped in the same place the context version is
    bumped. Callers that read-modify-write a session across awaits hold
    ``lock(session_id)``.
    """

    def __init__(
        self,
        session_store: SessionStore,
        eligibility_cache: EligibilityCache | None = None,
    ) -> None:
        self._store = session_store
        self._cache = eligibility_cache
        # entries vanish once no caller holds or waits on the lock
        self._locks: weakref.WeakValueDictionary[UUID, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    @property
    def store(self) -> SessionStore:
        return self._store

    def lock(self, session_id: UUID) -> asyncio.Lock:
        """Per-session lock serializing navigation on one session."""
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    async def create_session(
        self,
        graph: NavigationGraph,
        entry_chain: list[str],
        *,
        user_id: str | None = None,
        variables: dict[str, Any] | None = None,
        intents: list[Intent] | None = None,
        roles: list[str] | None = None,
        locale: str | None = None,
    ) -> NavigationSession:
        """Start a session on the last node of entry_chain.

        entry_chain is the composite resolution of the entry node (see
        DirectedGraphEngine.resolve_entry); each node in it is recorded
        as visited.
        """
        session = NavigationSession(
            graph_id=graph.id,
            graph_version=graph.version,
            graph_hash=graph.content_hash,
            current_node_id=entry_chain[-1],
        )
        session.context = UserContext(
            session_id=session.id,
            user_id=user_id,
            variables=variables or {},
            intents=intents or [],
            roles=roles or [],
            locale=locale,
        )
        self._append_visits(session, entry_chain, via="entry")
        await self._store.save(session)

        logger.info(
            "session_created",
            session_id=str(session.id),
            graph_id=graph.id,
            entry_node=session.current_node_id,
        )
        return session

    async def get_session(self, session_id: UUID) -> NavigationSession:
        session = await self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def get_active_session(self, session_id: UUID) -> NavigationSession:
        session = await self.get_session(session_id)
        if not session.is_active:
            raise SessionCompletedError(session_id, session.status.value)
        return session

    async def update_variables(
        self,
        session_id: UUID,
        updates: dict[str, Any],
        *,
        replace: bool = False,
        remove: list[str] | None = None,
    ) -> NavigationSession:
        session = await self.get_active_session(session_id)
        if updates or replace:
            session.context.set_variables(updates, replace=replace)
        if remove:
            session.context.remove_variables(remove)
        return await self._save_context_change(session, changed=sorted(updates))

    async def set_intents(self, session_id: UUID, intents: list[Intent]) -> NavigationSession:
        session = await self.get_active_session(session_id)
        session.context.set_intents(intents)
        return await self._save_context_change(session, changed=["intents"])

    async def add_intent(self, session_id: UUID, intent: Intent) -> NavigationSession:
        session = await self.get_active_session(session_id)
        session.context.add_intent(intent)
        return await self._save_context_change(session, changed=["intents"])

    async def record_visit(
        self,
        session: NavigationSession,
        chain: list[str],
        *,
        via: str,
    ) -> NavigationSession:
        """Move the session along chain (target plus composite entries) and save."""
        session.step_count += 1
        self._append_visits(session, chain, via=via)
        session.current_node_id = chain[-1]
        session.touch()
        await self._store.save(session)
        return session

    async def complete(self, session: NavigationSession) -> NavigationSession:
        return await self._finish(session, SessionStatus.COMPLETED)

    async def abandon(self, session_id: UUID) -> NavigationSession:
        session = await self.get_active_session(session_id)
        return await self._finish(session, SessionStatus.ABANDONED)

    async def _finish(
        self,
        session: NavigationSession,
        status: SessionStatus,
    ) -> NavigationSession:
        session.status = status
        session.completed_at = utc_now()
        session.touch()
        await self._store.save(session)
        self._invalidate(session.id)

        logger.info(
            "session_finished",
            session_id=str(session.id),
            status=status.value,
            steps=session.step_count,
            final_node=session.current_node_id,
        )
        return session

    async def _save_context_change(
        self,
        session: NavigationSession,
        *,
        changed: list[str],
    ) -> NavigationSession:
        session.touch()
        await self._store.save(session)
        self._invalidate(session.id)
        logger.debug(
            "context_updated",
            session_id=str(session.id),
            context_version=session.context.version,
            changed=changed,
        )
        return session

    def _invalidate(self, session_id: UUID) -> None:
        if self._cache is not None:
            self._cache.invalidate_session(session_id)

    @staticmethod
    def _append_visits(session: NavigationSession, chain: list[str], *, via: str) -> None:
        for node_id in chain:
            session.history = [
                *session.history,
                NodeVisit(node_id=node_id, step=session.step_count, via=via),
            ]
            session.visit_counts = {
                **session.visit_counts,
                node_id: session.visit_counts.get(node_id, 0) + 1,
            }
