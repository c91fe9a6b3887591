"""In-memory implementation of GraphStore."""

from navgraph.graph.models import NavigationGraph
from navgraph.graph.store import GraphStore


class InMemoryGraphStore(GraphStore):
    """Dict-backed GraphStore keeping every saved version.

    Saving a version that already exists replaces it.
    """

    def __init__(self) -> None:
        self._graphs: dict[str, dict[int, NavigationGraph]] = {}

    async def get(self, graph_id: str) -> NavigationGraph | None:
        versions = self._graphs.get(graph_id)
        if not versions:
            return None
        return versions[max(versions)]

    async def get_version(self, graph_id: str, version: int) -> NavigationGraph | None:
        return self._graphs.get(graph_id, {}).get(version)

    async def save(self, graph: NavigationGraph) -> str:
        self._graphs.setdefault(graph.id, {})[graph.version] = graph
        return graph.id

    async def delete(self, graph_id: str) -> bool:
        return self._graphs.pop(graph_id, None) is not None

    async def list_graphs(self, *, tag: str | None = None) -> list[NavigationGraph]:
        latest = [versions[max(versions)] for versions in self._graphs.values() if versions]
        if tag is not None:
            latest = [graph for graph in latest if tag in graph.tags]
        return sorted(latest, key=lambda g: g.id)
