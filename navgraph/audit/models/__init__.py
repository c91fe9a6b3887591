"""Audit domain models."""

from navgraph.audit.models.decision import DecisionEntry
from navgraph.audit.models.event import AuditEvent, AuditEventType

__all__ = ["AuditEvent", "AuditEventType", "DecisionEntry"]
