from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .cache import FileCacheStore
from .cache.memo import MemoCache

if TYPE_CHECKING:
    from .config import Settings


@dataclass
class RuntimeContext:
    """Runtime context containing all shared dependencies.

    Keeps the cache explicit so tests can swap the file store for an
    in-memory one.
    """

    settings: Settings
    memo: MemoCache


def build_context(settings: Settings) -> RuntimeContext:
    store = FileCacheStore(settings.cache_dir, enable_locking=settings.cache_locking)
    return RuntimeContext(settings=settings, memo=MemoCache(store))
