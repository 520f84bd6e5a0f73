from __future__ import annotations

import json
import logging
import threading
from collections.abc import Callable
from typing import Any

from . import CacheMetrics, CacheStore

log = logging.getLogger(__name__)


class MemoCache:
    """Compute-once adapter over a CacheStore.

    On a miss the producer runs, its result is written to the store and then
    returned. On a hit the stored content is returned unchanged and the
    producer never runs, even if its inputs have changed since.
    """

    def __init__(self, store: CacheStore):
        self.store = store
        self._metrics: CacheMetrics = CacheMetrics()
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(name)
            if lock is None:
                lock = self._locks[name] = threading.Lock()
            return lock

    def cached(self, name: str, compute: Callable[[], str]) -> str:
        """Return the stored text for ``name``, computing and storing it on a miss.

        Calls for the same name within one process run one at a time, so the
        producer runs once. Errors from ``compute`` or from the write propagate.
        """
        with self._lock_for(name):
            content = self.store.get(name)
            if content is not None:
                log.debug("Cache hit: %s", name)
                self._metrics.record_hit()
                return content

            log.debug("Cache miss: %s", name)
            self._metrics.record_miss()
            content = compute()
            self.store.put(name, content)
            self._metrics.record_write()
            return content

    def cached_json(self, name: str, compute: Callable[[], Any]) -> Any:
        """JSON variant of ``cached``.

        The result is always parsed back from the stored text, so a fresh
        computation and a cache hit return the same plain-JSON shape.
        """
        content = self.cached(name, lambda: json.dumps(compute(), ensure_ascii=False))
        return json.loads(content)

    def get_metrics(self) -> CacheMetrics:
        """Return cache metrics tracker."""
        return self._metrics

    def log_metrics(self, cache_name: str) -> None:
        """Log cache performance metrics."""
        self._metrics.log_stats(cache_name)
