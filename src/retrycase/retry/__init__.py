"""Retry policies, backoff selection and executor contracts.

Example:
    >>> from retrycase.annotations import Backoff
    >>> from retrycase.retry import build_retry_policy, select_backoff
    >>> select_backoff(Backoff(delay=0.1, max_delay=0.5))
    UniformRandomBackoff(min_period=0.1, max_period=0.5)
    >>> build_retry_policy(3, include={OSError}).is_retryable(TimeoutError())
    True
"""

from .backoff import (
    Backoff,
    BackoffPolicy,
    ExponentialBackoff,
    ExponentialRandomBackoff,
    FixedBackoff,
    NoBackoff,
    Sleeper,
    UniformRandomBackoff,
    default_max_interval,
    select_backoff,
)
from .context import MapRetryContextCache, RetryContextCache
from .executor import MethodArgumentsKeyGenerator, NewMethodArgumentsIdentifier, RetryExecutor
from .policy import CircuitBreakerPolicy, RetryPolicy, SimpleRetryPolicy, build_retry_policy

__all__ = [
    # Backoff
    "Backoff",
    "BackoffPolicy",
    "NoBackoff",
    "FixedBackoff",
    "UniformRandomBackoff",
    "ExponentialBackoff",
    "ExponentialRandomBackoff",
    "Sleeper",
    "default_max_interval",
    "select_backoff",
    # Policy
    "RetryPolicy",
    "SimpleRetryPolicy",
    "CircuitBreakerPolicy",
    "build_retry_policy",
    # Stateful collaborators
    "RetryContextCache",
    "MapRetryContextCache",
    "MethodArgumentsKeyGenerator",
    "NewMethodArgumentsIdentifier",
    "RetryExecutor",
]
