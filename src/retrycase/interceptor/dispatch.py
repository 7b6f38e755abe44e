"""Retry-aware dispatch: resolve once per method, then delegate.

RetryDispatcher interprets the retry metadata of each method it intercepts
and routes the call to the matching strategy. Resolution happens on the
first call of each method and is cached for the dispatcher's lifetime,
including the "no metadata" outcome.

Example:
    >>> dispatcher = RetryDispatcher(executor=my_executor)
    >>> service = dispatcher.proxy(OrderService())
    >>> service.place(42)   # resolved on first call, cached afterwards
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from functools import wraps
from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

from retrycase.annotations import AttributeDescriptorProvider

from .invocation import MethodInvocation, MethodKey, Retryable
from .proxy import RetryProxy
from .strategy import NO_STRATEGY, ResolvedStrategy, StrategyAssembler

if TYPE_CHECKING:
    from retrycase.annotations import DescriptorProvider
    from retrycase.retry import (
        MethodArgumentsKeyGenerator,
        NewMethodArgumentsIdentifier,
        RetryContextCache,
        RetryExecutor,
        Sleeper,
    )

    from .registry import ComponentRegistry

logger = logging.getLogger("retrycase.dispatch")

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., object])


@runtime_checkable
class StrategyCache(Protocol):
    """Resolution cache with an atomic compute-if-absent."""

    def get_or_resolve(self, key: MethodKey, resolve: Callable[[], ResolvedStrategy]) -> ResolvedStrategy:
        """Return the cached strategy for `key`, resolving and storing it first if absent.

        Must call `resolve` at most once per key across all threads; if
        `resolve` raises, nothing is stored.
        """
        ...


class LockedStrategyCache:
    """Resolution cache guarded by a single reentrant lock (default).

    The existence check, the resolution and the write all happen under
    the same lock, so concurrent first calls of a method share one strategy
    instance and no reader sees a half-built entry. A resolver may dispatch
    other methods through the same dispatcher on its own thread.
    """

    __slots__ = ("_strategies", "_lock")

    def __init__(self) -> None:
        self._strategies: dict[MethodKey, ResolvedStrategy] = {}
        self._lock = threading.RLock()

    def get_or_resolve(self, key: MethodKey, resolve: Callable[[], ResolvedStrategy]) -> ResolvedStrategy:
        with self._lock:
            if (strategy := self._strategies.get(key)) is None:
                strategy = self._strategies[key] = resolve()
            return strategy

    def __contains__(self, key: MethodKey) -> bool:
        with self._lock:
            return key in self._strategies

    def __len__(self) -> int:
        with self._lock:
            return len(self._strategies)


class RetryDispatcher(Retryable):
    """Interceptor resolving, per method, which retry strategy governs a call.

    All collaborators are optional; defaults are the attribute-based
    descriptor provider, a locked in-memory cache and a bounded in-memory
    retry-context cache. An executor is needed only once a method actually
    resolves to a retry strategy.

    Args:
        provider: Source of retry metadata (default: AttributeDescriptorProvider)
        registry: Named interceptors for `@retryable(interceptor=...)`
        executor: Runs retry strategies
        cache: Resolution cache (default: LockedStrategyCache)
        key_generator: Stateful retry key derivation
        new_arguments_identifier: Stateful fresh-call detection
        sleeper: Carried by every backoff policy built
        context_cache: Retry-context cache for stateful strategies
    """

    __slots__ = ("provider", "executor", "cache", "assembler")

    def __init__(
        self,
        provider: DescriptorProvider | None = None,
        registry: ComponentRegistry | None = None,
        executor: RetryExecutor | None = None,
        *,
        cache: StrategyCache | None = None,
        key_generator: MethodArgumentsKeyGenerator | None = None,
        new_arguments_identifier: NewMethodArgumentsIdentifier | None = None,
        sleeper: Sleeper | None = None,
        context_cache: RetryContextCache | None = None,
    ) -> None:
        self.provider = provider if provider is not None else AttributeDescriptorProvider()
        self.executor = executor
        self.cache = cache if cache is not None else LockedStrategyCache()
        self.assembler = StrategyAssembler(
            registry,
            sleeper=sleeper,
            key_generator=key_generator,
            new_arguments_identifier=new_arguments_identifier,
            context_cache=context_cache,
        )

    # ─────────────────────────────────────────────────────────────────
    # Interception
    # ─────────────────────────────────────────────────────────────────

    def dispatch(self, invocation: MethodInvocation) -> object:
        """Run `invocation` under the strategy its method resolves to."""
        strategy = self.resolve(invocation)
        if strategy is NO_STRATEGY:
            return invocation.proceed()
        return strategy.invoke(invocation, self.executor)

    __call__ = dispatch

    def resolve(self, invocation: MethodInvocation) -> ResolvedStrategy:
        """Cached strategy for the invoked method, resolving it on first use.

        Raises:
            InterceptorNotFound: explicit interceptor name is not registered (not cached)
        """
        return self.cache.get_or_resolve(invocation.key, lambda: self._resolve(invocation))

    def _resolve(self, invocation: MethodInvocation) -> ResolvedStrategy:
        descriptor = self.provider.describe(invocation.method, invocation.owner)
        if descriptor is None:
            logger.debug("No retry metadata on %s", invocation.key)
            return NO_STRATEGY
        circuit = self.provider.describe_circuit(invocation.method, invocation.owner) if descriptor.stateful else None
        strategy = self.assembler.assemble(descriptor, circuit, invocation.target, invocation.method)
        logger.debug("Resolved %s to %s", invocation.key, type(strategy).__name__)
        return strategy

    def implements_interface(self, interface: type) -> bool:
        """Whether `interface` is the Retryable marker or one of its subtypes."""
        return isinstance(interface, type) and issubclass(interface, Retryable)

    # ─────────────────────────────────────────────────────────────────
    # Wiring
    # ─────────────────────────────────────────────────────────────────

    def proxy(self, target: T) -> RetryProxy:
        """Wrap `target` so its method calls are dispatched through this interceptor."""
        return RetryProxy(target, self)

    def wrap(self, func: F) -> F:
        """Route calls of a plain function through this interceptor."""
        @wraps(func)
        def dispatched(*args: object, **kwargs: object) -> object:
            return self.dispatch(MethodInvocation(func, None, args, kwargs))
        return dispatched  # type: ignore[return-value]
