"""In-process cache store for rendered results.

The pipeline talks to any object implementing the async `CacheStore`
protocol. `MemoryCacheStore` is the default: a bounded LRU mapping from
fingerprint to `RenderResult`, private to whoever constructs it.

Note: entries are per process, never persisted or shared across hosts.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

from cachetools import LRUCache

from .config import DEFAULT_CACHE_MAX_ENTRIES

logger = logging.getLogger(__name__)

__all__ = [
    "CacheStore",
    "MemoryCacheStore",
    "resolve_store",
]


@runtime_checkable
class CacheStore(Protocol):
    """Async key/value store keyed by opaque fingerprint strings."""

    async def get(self, key: str) -> Optional[Any]: ...

    async def set(self, key: str, value: Any) -> None: ...

    async def has(self, key: str) -> bool: ...


class MemoryCacheStore:
    """LRU-bounded in-memory store.

    Each write replaces a single slot, so readers see either the old or the
    new value for a key, never a mixture.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")
        self._entries: LRUCache[str, Any] = LRUCache(maxsize=max_entries)

    @property
    def max_entries(self) -> int:
        return int(self._entries.maxsize)

    async def get(self, key: str) -> Optional[Any]:
        return self._entries.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._entries[key] = value

    async def has(self, key: str) -> bool:
        return key in self._entries

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    async def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"MemoryCacheStore({len(self)}/{self.max_entries})"


def resolve_store(policy: Any, default: Optional[CacheStore]) -> Optional[CacheStore]:
    """
    Map a cache policy onto a concrete store.

    `False` disables caching, `True` selects `default`, and any object with
    get/set/has is used as the store itself.
    """
    if policy is False or policy is None:
        return None
    if policy is True:
        return default
    if isinstance(policy, CacheStore):
        return policy
    logger.error("Unsupported cache policy: %r", policy)
    raise TypeError(
        f"cache must be a bool or a CacheStore, got {type(policy).__name__}"
    )
