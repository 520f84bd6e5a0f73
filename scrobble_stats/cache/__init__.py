from __future__ import annotations

import fcntl
import logging
from pathlib import Path
from typing import Any, Protocol

log = logging.getLogger(__name__)


class CacheMetrics:
    """Track cache performance metrics."""

    def __init__(self):
        self.hits = 0
        self.misses = 0
        self.writes = 0

    def record_hit(self) -> None:
        """Record a cache hit."""
        self.hits += 1

    def record_miss(self) -> None:
        """Record a cache miss."""
        self.misses += 1

    def record_write(self) -> None:
        """Record a cache write."""
        self.writes += 1

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with hit/miss rates and counts
        """
        total_reads = self.hits + self.misses
        hit_rate = (self.hits / total_reads * 100) if total_reads > 0 else 0.0

        return {
            "hits": self.hits,
            "misses": self.misses,
            "writes": self.writes,
            "total_reads": total_reads,
            "hit_rate_percent": hit_rate,
        }

    def log_stats(self, cache_name: str) -> None:
        """Log cache statistics.

        Args:
            cache_name: Name of the cache for logging
        """
        stats = self.get_stats()
        if stats["total_reads"] > 0:
            log.info(
                "%s cache stats - Hits: %d, Misses: %d, Hit rate: %.1f%%, Writes: %d",
                cache_name,
                stats["hits"],
                stats["misses"],
                stats["hit_rate_percent"],
                stats["writes"],
            )


class CacheStore(Protocol):
    """Key-value storage for named cache entries."""

    def get(self, name: str) -> str | None: ...

    def put(self, name: str, content: str) -> None: ...


class FileCacheStore:
    """Cache entries stored as one flat file per name inside a directory.

    A file that exists is authoritative. Invalidation is manual: delete the file.
    """

    def __init__(self, cache_dir: str | Path, enable_locking: bool = True):
        """Initialize the store.

        Args:
            cache_dir: Directory holding the cache files
            enable_locking: Enable file locking for multi-process safety
        """
        self.cache_dir = Path(cache_dir)
        self.enable_locking = enable_locking

    def path_for(self, name: str) -> Path:
        return self.cache_dir / name

    def get(self, name: str) -> str | None:
        """Return the stored content, or None if it cannot be read."""
        cache_file = self.path_for(name)
        if not cache_file.exists():
            log.debug("No cache file at %s", cache_file.name)
            return None

        try:
            with cache_file.open("r", encoding="utf-8") as f:
                if self.enable_locking:
                    fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    return f.read()
                finally:
                    if self.enable_locking:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except (OSError, UnicodeDecodeError) as e:
            log.warning("Cannot read cache file %s, treating as missing: %s", cache_file.name, e)
            return None

    def put(self, name: str, content: str) -> None:
        """Write content atomically.

        Raises:
            OSError: If the file cannot be written
        """
        cache_file = self.path_for(name)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            temp_file = cache_file.with_suffix(cache_file.suffix + ".tmp")

            with temp_file.open("w", encoding="utf-8") as f:
                if self.enable_locking:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    f.write(content)
                finally:
                    if self.enable_locking:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)

            temp_file.replace(cache_file)
            log.debug("Saved cache to %s (%d bytes)", cache_file.name, len(content))
        except OSError as e:
            log.error("Cannot write cache file %s: %s", cache_file.name, e)
            raise


class MemoryCacheStore:
    """In-memory store with the same contract as FileCacheStore."""

    def __init__(self, entries: dict[str, str] | None = None):
        self.entries: dict[str, str] = dict(entries or {})

    def get(self, name: str) -> str | None:
        return self.entries.get(name)

    def put(self, name: str, content: str) -> None:
        self.entries[name] = content
