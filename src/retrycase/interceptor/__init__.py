"""Retry interception: strategy resolution, caching and dispatch.

- RetryDispatcher: resolves and caches one strategy per method
- StrategyAssembler: builds a strategy from retry metadata
- locate_recoverer: finds recovery capability on a target
- InterceptorRegistry: named interceptors for explicit delegation
- RetryProxy: routes a target's method calls through a dispatcher
"""

from .dispatch import LockedStrategyCache, RetryDispatcher, StrategyCache
from .invocation import Interceptor, MethodInvocation, MethodKey, Retryable
from .proxy import RetryProxy, unproxy
from .recovery import MethodInvocationRecoverer, RecovererBinding, locate_recoverer, recovery_handlers
from .registry import ComponentRegistry, InterceptorRegistry
from .strategy import (
    NO_STRATEGY,
    CircuitBreakerStrategy,
    ExplicitStrategy,
    NoStrategy,
    ResolvedStrategy,
    StatefulStrategy,
    StatelessStrategy,
    StrategyAssembler,
)

__all__ = [
    # Dispatch
    "RetryDispatcher",
    "StrategyCache",
    "LockedStrategyCache",
    # Invocation model
    "MethodInvocation",
    "MethodKey",
    "Interceptor",
    "Retryable",
    "RetryProxy",
    "unproxy",
    # Strategies
    "ResolvedStrategy",
    "NoStrategy",
    "NO_STRATEGY",
    "StatelessStrategy",
    "StatefulStrategy",
    "CircuitBreakerStrategy",
    "ExplicitStrategy",
    "StrategyAssembler",
    # Recovery
    "MethodInvocationRecoverer",
    "RecovererBinding",
    "locate_recoverer",
    "recovery_handlers",
    # Registry
    "ComponentRegistry",
    "InterceptorRegistry",
]
