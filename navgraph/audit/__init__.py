"""Audit trail and replay of navigation decisions."""

from navgraph.audit.models import AuditEvent, AuditEventType, DecisionEntry
from navgraph.audit.replay import Divergence, DivergenceKind, ReplayReport, SessionReplayer
from navgraph.audit.service import AuditService
from navgraph.audit.store import AuditStore
from navgraph.audit.stores.inmemory import InMemoryAuditStore

__all__ = [
    "AuditEvent",
    "AuditEventType",
    "AuditService",
    "AuditStore",
    "DecisionEntry",
    "Divergence",
    "DivergenceKind",
    "InMemoryAuditStore",
    "ReplayReport",
    "SessionReplayer",
]
