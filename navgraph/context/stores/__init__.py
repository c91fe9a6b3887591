"""Session stores."""

from navgraph.context.store import SessionStore
from navgraph.context.stores.inmemory import InMemorySessionStore

__all__ = ["InMemorySessionStore", "SessionStore"]
