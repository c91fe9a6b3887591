"""Graph stores."""

from navgraph.graph.store import GraphStore
from navgraph.graph.stores.inmemory import InMemoryGraphStore

__all__ = ["GraphStore", "InMemoryGraphStore"]
