"""Audit stores for decisions and events."""

from navgraph.audit.store import AuditStore
from navgraph.audit.stores.inmemory import InMemoryAuditStore

__all__ = ["AuditStore", "InMemoryAuditStore"]
