"""Eligibility result cache."""

import time
from collections import OrderedDict
from collections.abc import Callable
from typing import NamedTuple
from uuid import UUID

from navgraph.observability.metrics import ELIGIBILITY_CACHE


class CacheKey(NamedTuple):
    session_id: UUID
    graph_hash: str
    node_id: str
    context_version: int


class EligibilityCache:
    """TTL + LRU cache of eligibility results.

    Keyed by session, graph content hash, node, and context version. Any
    context mutation bumps the version, so stale entries are never read;
    the TTL bounds how long results depending on wall-clock predicates
    live. Entries for a session can also be dropped explicitly.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        max_entries: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[CacheKey, tuple[bool, float]] = OrderedDict()
        self.hits = 0
        self.misses = 0

    def get(self, key: CacheKey) -> bool | None:
        entry = self._entries.get(key)
        if entry is None:
            self._miss()
            return None

        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            self._miss()
            return None

        self._entries.move_to_end(key)
        self.hits += 1
        ELIGIBILITY_CACHE.labels(result="hit").inc()
        return value

    def set(self, key: CacheKey, value: bool) -> None:
        self._entries[key] = (value, self._clock() + self._ttl)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def invalidate_session(self, session_id: UUID) -> int:
        """Drop all entries for a session. Returns the number removed."""
        stale = [key for key in self._entries if key.session_id == session_id]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def _miss(self) -> None:
        self.misses += 1
        ELIGIBILITY_CACHE.labels(result="miss").inc()
