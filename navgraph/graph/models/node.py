"""Node and branch models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from navgraph.graph.models.enums import NodeType


class Branch(BaseModel):
    """Conditional jump evaluated before ordinary edges.

    The condition is a boolean expression over the user context, e.g.
    ``age >= 18 and country == "FR"``.
    """

    model_config = ConfigDict(frozen=True)

    condition: str = Field(..., min_length=1, description="Boolean expression")
    target: str = Field(..., min_length=1, description="Node to jump to")
    priority: int = Field(default=0, description="Higher evaluated first")
    description: str | None = Field(default=None)


class GraphNode(BaseModel):
    """Single navigable unit of UI state."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Unique within the graph")
    type: NodeType = Field(default=NodeType.LABEL)
    label: str = Field(..., min_length=1, description="Display name")
    description: str | None = Field(default=None)
    priority: int = Field(default=0, description="Higher wins tie-breaks")
    allowed_next: list[str] = Field(default_factory=list, description="Ordered outgoing edges")
    branches: list[Branch] = Field(default_factory=list)
    eligibility: list[str] = Field(
        default_factory=list, description="Expressions that must all be true"
    )
    predicates: list[str] = Field(
        default_factory=list, description="Registered predicate names that must all pass"
    )
    intent_tags: list[str] = Field(default_factory=list)
    children: list[str] = Field(default_factory=list, description="Composite members")
    entry_child: str | None = Field(default=None, description="Composite entry member")
    is_entry: bool = Field(default=False)
    is_terminal: bool = Field(default=False)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_composite(self) -> bool:
        return self.type == NodeType.COMPOSITE

    @property
    def has_eligibility_rules(self) -> bool:
        return bool(self.eligibility or self.predicates)

    def ordered_branches(self) -> list[tuple[int, Branch]]:
        """Branches sorted by priority desc, declaration order breaking ties.

        Returns (declaration_index, branch) pairs.
        """
        indexed = list(enumerate(self.branches))
        indexed.sort(key=lambda pair: (-pair[1].priority, pair[0]))
        return indexed

    def intent_affinity(self, intents: dict[str, float]) -> float:
        """Highest confidence among intents this node is tagged with."""
        scores = [intents[tag] for tag in self.intent_tags if tag in intents]
        return max(scores, default=0.0)
