"""Retry-context cache for stateful retry.

Stateful strategies correlate attempts across separate calls by a key
derived from the call arguments. The executor parks the in-flight retry
context here between calls. Bounded so leaked keys fail loudly instead of
growing without limit.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import Protocol, runtime_checkable

from retrycase.foundation.config import get_settings
from retrycase.foundation.errors import ContextCacheFull


@runtime_checkable
class RetryContextCache(Protocol):
    """Protocol for retry-context storage backends."""

    def get(self, key: Hashable) -> object | None: ...
    def put(self, key: Hashable, context: object) -> None: ...
    def remove(self, key: Hashable) -> None: ...
    def contains(self, key: Hashable) -> bool: ...


class MapRetryContextCache:
    """Thread-safe in-memory retry-context cache (default).

    Args:
        capacity: Maximum live contexts (default: RETRYCASE_CONTEXT_CACHE_CAPACITY)

    Raises:
        ContextCacheFull: from put() when a new key would exceed capacity
    """

    __slots__ = ("_contexts", "_capacity", "_lock")

    def __init__(self, capacity: int | None = None) -> None:
        self._contexts: dict[Hashable, object] = {}
        self._capacity = capacity if capacity is not None else get_settings().context_cache.capacity
        self._lock = threading.RLock()

    def get(self, key: Hashable) -> object | None:
        with self._lock:
            return self._contexts.get(key)

    def put(self, key: Hashable, context: object) -> None:
        with self._lock:
            if key not in self._contexts and len(self._contexts) >= self._capacity:
                raise ContextCacheFull.for_capacity(self._capacity)
            self._contexts[key] = context

    def remove(self, key: Hashable) -> None:
        with self._lock:
            self._contexts.pop(key, None)

    def contains(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._contexts

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._contexts)
