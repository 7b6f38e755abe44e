"""Retrycase - declarative retry resolution for Python methods.

Decorate methods (or whole classes) with retry metadata; a RetryDispatcher
resolves, once per method, which retry behavior applies and hands each call
to it: none, stateless retry, stateful retry, a circuit breaker, or a named
interceptor. Running the attempt loop is delegated to a RetryExecutor.

Quick Start:
    >>> from retrycase import Backoff, RetryDispatcher, recover, retryable
    >>>
    >>> class PriceFeed:
    ...     @retryable(ConnectionError, max_attempts=4, backoff=Backoff(0.2, multiplier=2.0))
    ...     def quote(self, symbol: str) -> float: ...
    ...
    ...     @recover
    ...     def stale_quote(self, exc: ConnectionError, symbol: str) -> float: ...
    >>>
    >>> dispatcher = RetryDispatcher(executor=my_executor)
    >>> feed = dispatcher.proxy(PriceFeed())
    >>> feed.quote("ACME")

Circuit Breakers:
    >>> class Ledger:
    ...     @circuit_breaker(TimeoutError, open_timeout=5.0, reset_timeout=20.0)
    ...     def post(self, entry: dict) -> None: ...

Named Interceptors:
    >>> registry = InterceptorRegistry({"auditRetry": AuditInterceptor()})
    >>> dispatcher = RetryDispatcher(registry=registry, executor=my_executor)
"""

from __future__ import annotations

__version__ = "0.1.0"

from .annotations import (
    AttributeDescriptorProvider,
    Backoff,
    BackoffDescriptor,
    CircuitDescriptor,
    DescriptorProvider,
    RetryDescriptor,
    circuit_breaker,
    recover,
    retryable,
)
from .foundation.config import RetrycaseSettings, clear_settings_cache, configure_logging, get_settings
from .foundation.errors import (
    ContextCacheFull,
    ErrorCode,
    ExecutorMissing,
    InterceptorNotFound,
    InvalidMetadata,
    RetryError,
    RetryException,
)
from .interceptor import (
    NO_STRATEGY,
    CircuitBreakerStrategy,
    ComponentRegistry,
    ExplicitStrategy,
    Interceptor,
    InterceptorRegistry,
    LockedStrategyCache,
    MethodInvocation,
    MethodInvocationRecoverer,
    MethodKey,
    NoStrategy,
    RecovererBinding,
    ResolvedStrategy,
    Retryable,
    RetryDispatcher,
    RetryProxy,
    StatefulStrategy,
    StatelessStrategy,
    StrategyAssembler,
    StrategyCache,
    locate_recoverer,
    unproxy,
)
from .retry import (
    CircuitBreakerPolicy,
    ExponentialBackoff,
    ExponentialRandomBackoff,
    FixedBackoff,
    MapRetryContextCache,
    MethodArgumentsKeyGenerator,
    NewMethodArgumentsIdentifier,
    NoBackoff,
    RetryContextCache,
    RetryExecutor,
    SimpleRetryPolicy,
    Sleeper,
    UniformRandomBackoff,
    build_retry_policy,
    select_backoff,
)

__all__ = [
    "__version__",
    # Metadata
    "retryable", "circuit_breaker", "recover", "Backoff",
    "BackoffDescriptor", "RetryDescriptor", "CircuitDescriptor",
    "DescriptorProvider", "AttributeDescriptorProvider",
    # Dispatch
    "RetryDispatcher", "RetryProxy", "unproxy", "Retryable",
    "MethodInvocation", "MethodKey", "Interceptor",
    "StrategyCache", "LockedStrategyCache", "StrategyAssembler",
    # Strategies
    "ResolvedStrategy", "NoStrategy", "NO_STRATEGY", "StatelessStrategy",
    "StatefulStrategy", "CircuitBreakerStrategy", "ExplicitStrategy",
    # Recovery
    "MethodInvocationRecoverer", "RecovererBinding", "locate_recoverer",
    # Registry
    "ComponentRegistry", "InterceptorRegistry",
    # Policies
    "SimpleRetryPolicy", "CircuitBreakerPolicy", "build_retry_policy",
    "NoBackoff", "FixedBackoff", "UniformRandomBackoff", "ExponentialBackoff",
    "ExponentialRandomBackoff", "select_backoff", "Sleeper",
    # Executor contracts
    "RetryExecutor", "MethodArgumentsKeyGenerator", "NewMethodArgumentsIdentifier",
    "RetryContextCache", "MapRetryContextCache",
    # Errors
    "ErrorCode", "RetryError", "RetryException", "InterceptorNotFound",
    "ExecutorMissing", "ContextCacheFull", "InvalidMetadata",
    # Config
    "RetrycaseSettings", "get_settings", "clear_settings_cache", "configure_logging",
]
