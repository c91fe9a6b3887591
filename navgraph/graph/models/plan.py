"""Results of planning a single navigation step."""

from pydantic import BaseModel, Field

from navgraph.graph.models.node import Branch, GraphNode


class BranchMatch(BaseModel):
    """A branch whose condition held and whose target is eligible."""

    branch: Branch
    branch_index: int = Field(..., ge=0, description="Declaration index on the node")
    target_node_id: str


class StepPlan(BaseModel):
    """What the engine allows from the current node.

    Exactly one of these holds:
    - ``forced`` is set: a branch decides the next node
    - ``candidates`` is non-empty: orchestration picks among them
    - both empty: no way forward (terminal or dead end)
    """

    node_id: str
    forced: BranchMatch | None = None
    candidates: list[GraphNode] = Field(default_factory=list)
    is_terminal: bool = False

    @property
    def candidate_ids(self) -> list[str]:
        return [node.id for node in self.candidates]

    @property
    def has_next(self) -> bool:
        return self.forced is not None or bool(self.candidates)
