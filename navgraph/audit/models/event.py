"""AuditEvent model for the audit domain."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from navgraph.graph.models.base import utc_now


class AuditEventType(str, Enum):
    """Lifecycle events recorded alongside decisions."""

    GRAPH_REGISTERED = "graph_registered"
    GRAPH_DELETED = "graph_deleted"
    SESSION_CREATED = "session_created"
    SESSION_COMPLETED = "session_completed"
    SESSION_ABANDONED = "session_abandoned"
    CONTEXT_UPDATED = "context_updated"


class AuditEvent(BaseModel):
    """Generic audit event."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    event_type: AuditEventType
    event_data: dict[str, Any] = Field(default_factory=dict)
    session_id: UUID | None = None
    graph_id: str | None = None
    timestamp: datetime = Field(default_factory=utc_now)
