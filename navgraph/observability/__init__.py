"""Logging and metrics for NavGraph."""

from navgraph.observability.logging import (
    bind_session_context,
    clear_session_context,
    get_logger,
    setup_logging,
)

__all__ = [
    "bind_session_context",
    "clear_session_context",
    "get_logger",
    "setup_logging",
]
