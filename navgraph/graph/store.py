"""GraphStore abstract interface."""

from abc import ABC, abstractmethod

from navgraph.graph.models import NavigationGraph


class GraphStore(ABC):
    """Abstract interface for navigation graph storage.

    ``get`` returns None for unknown IDs; callers that require a graph
    raise GraphNotFoundError themselves.
    """

    @abstractmethod
    async def get(self, graph_id: str) -> NavigationGraph | None:
        """Get the latest version of a graph."""
        pass

    @abstractmethod
    async def get_version(self, graph_id: str, version: int) -> NavigationGraph | None:
        """Get a specific version of a graph."""
        pass

    @abstractmethod
    async def save(self, graph: NavigationGraph) -> str:
        """Save a graph version, returning its ID."""
        pass

    @abstractmethod
    async def delete(self, graph_id: str) -> bool:
        """Delete all versions of a graph."""
        pass

    @abstractmethod
    async def list_graphs(self, *, tag: str | None = None) -> list[NavigationGraph]:
        """List the latest version of every graph."""
        pass
