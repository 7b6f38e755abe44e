"""Declarative retry metadata: decorators, descriptors and providers.

Example:
    >>> from retrycase.annotations import Backoff, retryable
    >>> @retryable(OSError, max_attempts=5, backoff=Backoff(0.5, max_delay=2.0))
    ... def sync_inventory() -> None: ...
"""

from .decorators import (
    CIRCUIT_ATTR,
    RECOVER_ATTR,
    RETRYABLE_ATTR,
    circuit_breaker,
    is_recovery_handler,
    recover,
    retryable,
    unwrap,
)
from .descriptors import Backoff, BackoffDescriptor, CircuitDescriptor, RetryDescriptor
from .provider import AttributeDescriptorProvider, DescriptorProvider, declaring_class

__all__ = [
    # Decorators
    "retryable",
    "circuit_breaker",
    "recover",
    "Backoff",
    # Descriptors
    "BackoffDescriptor",
    "RetryDescriptor",
    "CircuitDescriptor",
    # Providers
    "DescriptorProvider",
    "AttributeDescriptorProvider",
    "declaring_class",
    # Internals shared with the interceptor layer
    "RETRYABLE_ATTR",
    "CIRCUIT_ATTR",
    "RECOVER_ATTR",
    "is_recovery_handler",
    "unwrap",
]
