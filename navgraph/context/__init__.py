"""Navigation sessions and user context management."""

from navgraph.context.manager import ContextManager
from navgraph.context.models import NavigationSession, NodeVisit, SessionStatus
from navgraph.context.store import SessionStore
from navgraph.context.stores.inmemory import InMemorySessionStore

__all__ = [
    "ContextManager",
    "InMemorySessionStore",
    "NavigationSession",
    "NodeVisit",
    "SessionStatus",
    "SessionStore",
]
