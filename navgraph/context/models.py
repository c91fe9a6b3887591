"""Navigation session models."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from navgraph.graph.models import UserContext
from navgraph.graph.models.base import utc_now


class SessionStatus(str, Enum):
    """Lifecycle of a navigation session."""

    ACTIVE = "active"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class NodeVisit(BaseModel):
    """One node entered during a session."""

    model_config = ConfigDict(frozen=True)

    node_id: str
    step: int = Field(..., ge=0, description="Step number that entered the node")
    via: str = Field(..., description="Decision source or 'entry'")
    entered_at: datetime = Field(default_factory=utc_now)


class NavigationSession(BaseModel):
    """A user's walk through one graph version."""

    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    graph_id: str
    graph_version: int
    graph_hash: str
    current_node_id: str
    context: UserContext = Field(default_factory=UserContext)
    history: list[NodeVisit] = Field(default_factory=list)
    visit_counts: dict[str, int] = Field(default_factory=dict)
    status: SessionStatus = Field(default=SessionStatus.ACTIVE)
    step_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    completed_at: datetime | None = Field(default=None)

    @property
    def is_active(self) -> bool:
        return self.status == SessionStatus.ACTIVE

    def recent_node_ids(self, limit: int | None = None) -> list[str]:
        ids = [visit.node_id for visit in self.history]
        return ids[-limit:] if limit else ids

    def touch(self) -> None:
        self.updated_at = utc_now()
