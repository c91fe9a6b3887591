"""Structured logging configuration using structlog.

JSON output for deployed services, console output for local work.
User context variables routinely end up in log events (decision
snapshots, context updates), so a redaction processor masks sensitive
keys and obvious PII patterns before rendering.
"""

import re
import sys
from collections.abc import Mapping
from typing import Any, cast

import structlog
from structlog.types import EventDict, WrappedLogger

REDACTED = "[REDACTED]"

SENSITIVE_KEYS: frozenset[str] = frozenset({
    "password",
    "secret",
    "token",
    "api_key",
    "authorization",
    "credentials",
    "email",
    "phone",
    "ssn",
    "card_number",
    "cvv",
    "access_token",
    "refresh_token",
})

_EMAIL = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
_CARD = re.compile(r"\b(?:\d[ -]?){13,16}\b")

_LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}


class ContextRedactor:
    """Processor that masks sensitive values in log events.

    Keys are matched case-insensitively against SENSITIVE_KEYS at any
    nesting depth; string values are scrubbed for emails and card numbers.
    """

    def __init__(self, extra_keys: frozenset[str] | None = None) -> None:
        self._keys = SENSITIVE_KEYS | (extra_keys or frozenset())

    def __call__(
        self,
        _logger: WrappedLogger,
        _method_name: str,
        event_dict: EventDict,
    ) -> EventDict:
        return cast(EventDict, self._scrub_mapping(event_dict))

    def _scrub_mapping(self, data: Mapping[str, Any]) -> dict[str, Any]:
        return {
            key: REDACTED if str(key).lower() in self._keys else self._scrub(value)
            for key, value in data.items()
        }

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, Mapping):
            return self._scrub_mapping(value)
        if isinstance(value, str):
            return _CARD.sub("[CARD]", _EMAIL.sub("[EMAIL]", value))
        if isinstance(value, (list, tuple)):
            return [self._scrub(item) for item in value]
        return value


def setup_logging(
    level: str = "INFO",
    format: str = "json",
    redact_pii: bool = True,
    extra_sensitive_keys: list[str] | None = None,
) -> None:
    """Configure structlog for the process.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: "json" or "console"
        redact_pii: Whether to install the redaction processor
        extra_sensitive_keys: Additional context keys to mask
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if redact_pii:
        extra = frozenset(k.lower() for k in extra_sensitive_keys or [])
        processors.append(ContextRedactor(extra))

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_LEVELS.get(level.upper(), 20)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=False,
    )


def bind_session_context(**values: Any) -> None:
    """Bind session-scoped fields (session_id, graph_id) to all log events."""
    structlog.contextvars.bind_contextvars(
        **{k: str(v) for k, v in values.items() if v is not None}
    )


def clear_session_context() -> None:
    """Drop all bound contextvars."""
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for a module."""
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
