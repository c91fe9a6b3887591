"""Graph API models."""

from pydantic import BaseModel, Field

from navgraph.graph.models import NavigationGraph


class GraphSummary(BaseModel):
    id: str
    name: str
    version: int
    content_hash: str
    node_count: int
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_graph(cls, graph: NavigationGraph) -> "GraphSummary":
        return cls(
            id=graph.id,
            name=graph.name,
            version=graph.version,
            content_hash=graph.content_hash,
            node_count=len(graph.nodes),
            tags=graph.tags,
        )


class GraphRegisterResponse(BaseModel):
    graph: GraphSummary
    warnings: list[str] = Field(default_factory=list)


class GraphValidationResponse(BaseModel):
    graph_id: str
    is_valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
