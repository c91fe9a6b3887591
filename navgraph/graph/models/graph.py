"""Navigation graph model."""

import hashlib
import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, computed_field

from navgraph.exceptions import NodeNotFoundError
from navgraph.graph.models.node import GraphNode


class NavigationGraph(BaseModel):
    """Directed graph of UI nodes.

    Immutable once built: publishing a change means registering a new
    version. The content hash identifies the exact node set a decision
    was made against, which replay uses to flag drift.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    version: int = Field(default=1, ge=1)
    entry_node_id: str = Field(..., min_length=1)
    nodes: list[GraphNode] = Field(default_factory=list)
    description: str | None = Field(default=None)
    tags: list[str] = Field(default_factory=list)

    _index: dict[str, GraphNode] = PrivateAttr(default_factory=dict)
    _order: dict[str, int] = PrivateAttr(default_factory=dict)
    _content_hash: str = PrivateAttr(default="")

    def model_post_init(self, __context: Any) -> None:
        index: dict[str, GraphNode] = {}
        order: dict[str, int] = {}
        for position, node in enumerate(self.nodes):
            # duplicates are reported by GraphValidator; first definition wins here
            if node.id not in index:
                index[node.id] = node
                order[node.id] = position
        self._index = index
        self._order = order
        self._content_hash = self.compute_content_hash()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def content_hash(self) -> str:
        return self._content_hash

    def compute_content_hash(self) -> str:
        """SHA256 over the canonical JSON of the entry node and all nodes."""
        payload = {
            "entry_node_id": self.entry_node_id,
            "nodes": [node.model_dump(mode="json") for node in self.nodes],
        }
        encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()

    def has_node(self, node_id: str) -> bool:
        return node_id in self._index

    def get_node(self, node_id: str) -> GraphNode:
        node = self._index.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id, self.id)
        return node

    def position(self, node_id: str) -> int:
        """Declaration index of a node, used as the last tie-breaker."""
        return self._order.get(node_id, len(self._order))

    def outgoing(self, node: GraphNode) -> list[str]:
        """Ordered, de-duplicated edge targets: allowed_next, then branch targets."""
        seen: dict[str, None] = {}
        for target in node.allowed_next:
            seen.setdefault(target, None)
        for branch in node.branches:
            seen.setdefault(branch.target, None)
        return list(seen)

    def parents_of(self, node_id: str) -> list[GraphNode]:
        """Composite nodes that list node_id as a child."""
        return [n for n in self.nodes if n.is_composite and node_id in n.children]
