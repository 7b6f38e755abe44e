"""Named interceptor registry.

Methods can delegate their retry behavior to a pre-built interceptor by
name (`@retryable(interceptor="auditRetry")`); the registry maps those
names to instances supplied by the embedding application.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from typing import Protocol, runtime_checkable

from retrycase.foundation.errors import InterceptorNotFound

from .invocation import Interceptor

logger = logging.getLogger("retrycase.registry")


@runtime_checkable
class ComponentRegistry(Protocol):
    """Name-to-interceptor lookup."""

    def resolve(self, name: str) -> Interceptor:
        """Return the interceptor registered as `name`.

        Raises:
            InterceptorNotFound: if nothing is registered under `name`
        """
        ...


class InterceptorRegistry:
    """Thread-safe in-memory interceptor registry (default).

    Example:
        >>> registry = InterceptorRegistry()
        >>> registry.register("auditRetry", AuditInterceptor())
        >>> registry.resolve("auditRetry")
        <AuditInterceptor ...>
    """

    __slots__ = ("_interceptors", "_lock")

    def __init__(self, interceptors: dict[str, Interceptor] | None = None) -> None:
        self._interceptors: dict[str, Interceptor] = {}
        self._lock = threading.Lock()
        for name, interceptor in (interceptors or {}).items():
            self.register(name, interceptor)

    def register(self, name: str, interceptor: Interceptor) -> None:
        """Register an interceptor under a unique, non-blank name."""
        if not name or not name.strip():
            raise ValueError("Interceptor name must not be blank.")
        if not callable(interceptor):
            raise TypeError(f"Interceptor '{name}' must be callable with a MethodInvocation.")
        with self._lock:
            if name in self._interceptors:
                raise ValueError(f"Interceptor '{name}' already registered. Use unregister() first.")
            self._interceptors[name] = interceptor

    def unregister(self, name: str) -> bool:
        """Remove an interceptor by name. Returns True if found."""
        with self._lock:
            return self._interceptors.pop(name, None) is not None

    def get(self, name: str) -> Interceptor | None:
        with self._lock:
            return self._interceptors.get(name)

    def resolve(self, name: str) -> Interceptor:
        if (interceptor := self.get(name)) is None:
            logger.warning("No interceptor registered under %r", name)
            raise InterceptorNotFound.for_name(name)
        return interceptor

    def __contains__(self, name: str) -> bool:
        with self._lock:
            return name in self._interceptors

    def __len__(self) -> int:
        with self._lock:
            return len(self._interceptors)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._interceptors))
