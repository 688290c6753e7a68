"""Caller-owned cache of per-project context engines.

The engine itself keeps no module-level state. Callers that serve many
projects hold one ``EngineCache`` and decide when entries go stale:
explicitly via ``invalidate`` (e.g. after a file save) or implicitly via
the TTL.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from themeplane.config.models import CacheConfig
from themeplane.index.engine import ContextEngine

log = structlog.get_logger(__name__)


@dataclass
class _CacheEntry:
    engine: ContextEngine
    created_at: float


class EngineCache:
    """LRU cache of ``ContextEngine`` instances keyed by project id."""

    def __init__(
        self,
        max_entries: int = 8,
        ttl_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, _CacheEntry] = OrderedDict()

    @classmethod
    def from_config(cls, config: CacheConfig) -> EngineCache:
        return cls(max_entries=config.max_entries, ttl_seconds=config.ttl_seconds)

    def get(self, project_id: str) -> ContextEngine | None:
        """Cached engine for a project, or None when absent or expired."""
        entry = self._entries.get(project_id)
        if entry is None:
            return None
        if self._ttl is not None and self._clock() - entry.created_at > self._ttl:
            del self._entries[project_id]
            log.debug("engine_cache.expired", project_id=project_id)
            return None
        self._entries.move_to_end(project_id)
        return entry.engine

    def get_or_create(
        self, project_id: str, factory: Callable[[], ContextEngine]
    ) -> ContextEngine:
        """Return the cached engine or build, store and return a new one."""
        engine = self.get(project_id)
        if engine is not None:
            return engine

        engine = factory()
        self._entries[project_id] = _CacheEntry(engine=engine, created_at=self._clock())
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            log.debug("engine_cache.evicted", project_id=evicted)
        return engine

    def invalidate(self, project_id: str) -> bool:
        """Drop one project's engine. Returns True if it was cached."""
        return self._entries.pop(project_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
