"""Decorators attaching retry metadata to functions and classes.

The decorators never wrap: they store a descriptor on the decorated object
and return it unchanged. Routing calls through retry resolution is done by
RetryDispatcher (see `RetryDispatcher.proxy` / `RetryDispatcher.wrap`).

Example:
    >>> @retryable(max_attempts=4)               # class-level default
    ... class InventoryClient:
    ...     @retryable(ConnectionError, backoff=Backoff(0.1, multiplier=2.0))
    ...     def reserve(self, sku: str) -> bool: ...
    ...
    ...     @circuit_breaker(TimeoutError, reset_timeout=30.0)
    ...     def stock(self, sku: str) -> int: ...
    ...
    ...     def release(self, sku: str) -> None: ...   # inherits max_attempts=4
    ...
    ...     @recover
    ...     def fallback(self, exc: Exception, sku: str) -> bool:
    ...         return False
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Callable, TypeVar, overload

from .descriptors import BackoffDescriptor, CircuitDescriptor, RetryDescriptor

T = TypeVar("T")

RETRYABLE_ATTR = "__retryable__"
CIRCUIT_ATTR = "__circuit_breaker__"
RECOVER_ATTR = "__recover__"

ExceptionType = type[BaseException]


def unwrap(obj: object) -> object:
    """Underlying function of a bound method, staticmethod or classmethod."""
    return getattr(obj, "__func__", obj)


def _is_exception_type(obj: object) -> bool:
    return isinstance(obj, type) and issubclass(obj, BaseException)


def _merge_include(positional: tuple[ExceptionType, ...], include: Iterable[ExceptionType]) -> frozenset[ExceptionType]:
    """Positional types take precedence over `include`."""
    return frozenset(positional) if positional else frozenset(include)


def _attach(target: T, attr: str, value: object) -> T:
    setattr(unwrap(target), attr, value)
    return target


@overload
def retryable(target: T, /) -> T: ...
@overload
def retryable(
    *include_types: ExceptionType,
    include: Iterable[ExceptionType] = (),
    exclude: Iterable[ExceptionType] = (),
    max_attempts: int | None = None,
    stateful: bool = False,
    interceptor: str | None = None,
    backoff: BackoffDescriptor | None = None,
) -> Callable[[T], T]: ...


def retryable(
    *include_types: object,
    include: Iterable[ExceptionType] = (),
    exclude: Iterable[ExceptionType] = (),
    max_attempts: int | None = None,
    stateful: bool = False,
    interceptor: str | None = None,
    backoff: BackoffDescriptor | None = None,
) -> object:
    """Mark a method (or every method of a class) as retryable.

    Args:
        *include_types: Retryable exception types (shorthand for `include`)
        include: Retryable exception types, subclasses included
        exclude: Exception types never retried
        max_attempts: Total attempts (default: RETRYCASE_RETRY_MAX_ATTEMPTS)
        stateful: Rethrow failures and correlate retries across calls
        interceptor: Registry name of an interceptor to use instead
        backoff: Backoff parameters (default: fixed RETRYCASE_RETRY_BACKOFF_VALUE)

    Usable bare (`@retryable`) or with arguments.
    """
    if len(include_types) == 1 and callable(include_types[0]) and not _is_exception_type(include_types[0]):
        return _attach(include_types[0], RETRYABLE_ATTR, RetryDescriptor())

    fields: dict[str, object] = {
        "include": _merge_include(include_types, include),  # type: ignore[arg-type]
        "exclude": frozenset(exclude),
        "stateful": stateful,
        "interceptor": interceptor,
    }
    if max_attempts is not None:
        fields["max_attempts"] = max_attempts
    if backoff is not None:
        fields["backoff"] = backoff
    descriptor = RetryDescriptor(**fields)

    def decorate(target: T) -> T:
        return _attach(target, RETRYABLE_ATTR, descriptor)
    return decorate


def circuit_breaker(
    *include_types: ExceptionType,
    include: Iterable[ExceptionType] = (),
    exclude: Iterable[ExceptionType] = (),
    max_attempts: int | None = None,
    open_timeout: float | None = None,
    reset_timeout: float | None = None,
    label: str = "",
) -> Callable[[T], T]:
    """Guard a method with a circuit breaker.

    Implies stateful retry metadata when the method carries none; an explicit
    @retryable on the same method is kept as is.

    Args:
        *include_types: Exception types counted as failures (shorthand for `include`)
        include: Exception types counted as failures
        exclude: Exception types never counted
        max_attempts: Failures within open_timeout before the circuit opens
        open_timeout: Failure-counting window in seconds
        reset_timeout: Seconds before an open circuit closes
        label: Circuit name (default: the method signature)
    """
    merged = _merge_include(include_types, include)
    fields: dict[str, object] = {"include": merged, "exclude": frozenset(exclude), "label": label}
    for name, value in (("max_attempts", max_attempts), ("open_timeout", open_timeout), ("reset_timeout", reset_timeout)):
        if value is not None:
            fields[name] = value
    descriptor = CircuitDescriptor(**fields)

    def decorate(target: T) -> T:
        func = unwrap(target)
        if getattr(func, RETRYABLE_ATTR, None) is None:
            setattr(func, RETRYABLE_ATTR, RetryDescriptor(
                stateful=True, max_attempts=descriptor.max_attempts,
                include=descriptor.include, exclude=descriptor.exclude,
            ))
        return _attach(target, CIRCUIT_ATTR, descriptor)
    return decorate


def recover(target: T) -> T:
    """Mark a method as a recovery handler for retries exhausted on its class."""
    return _attach(target, RECOVER_ATTR, True)


def is_recovery_handler(member: object) -> bool:
    return getattr(unwrap(member), RECOVER_ATTR, False) is True
