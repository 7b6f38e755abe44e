"""Retry policies built from include/exclude exception metadata.

A policy answers one question for the executor: may this failure be
retried after `attempts` tries? Classification is by class hierarchy,
nearest ancestor first, so a specific exclude beats a broad include and
vice versa.

Example:
    >>> policy = build_retry_policy(3, include={OSError}, exclude={FileNotFoundError})
    >>> policy.is_retryable(ConnectionError())
    True
    >>> policy.is_retryable(FileNotFoundError())
    False
    >>> policy.is_retryable(KeyError())
    False
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, computed_field

ExceptionTypes = frozenset[type[BaseException]]


class SimpleRetryPolicy(BaseModel):
    """Attempt-capped policy classifying failures by exception hierarchy.

    With no include and no exclude types every failure is retryable.
    Otherwise the nearest class in the raised type's MRO that appears in
    either set decides. Unmatched types are retryable only when no include
    types are given. When `traverse_causes` is set an unmatched failure is
    classified by its chained causes.

    Attributes:
        max_attempts: Total attempts including the first (minimum 1)
        include: Exception types that are retryable
        exclude: Exception types that are never retried
        traverse_causes: Classify `__cause__`/`__context__` of unmatched failures
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        extra="forbid",
        revalidate_instances="never",
    )

    max_attempts: Annotated[int, Field(ge=1)] = 3
    include: ExceptionTypes = frozenset()
    exclude: ExceptionTypes = frozenset()
    traverse_causes: bool = True

    @computed_field
    @property
    def retries_everything(self) -> bool:
        """Whether every failure type is retryable."""
        return not self.include and not self.exclude

    def _classify(self, exc_type: type[BaseException]) -> bool | None:
        for klass in exc_type.__mro__:
            if klass in self.exclude:
                return False
            if klass in self.include:
                return True
        return None

    def is_retryable(self, exc: BaseException | type[BaseException]) -> bool:
        """Classify a failure (instance or type) as retryable or not."""
        if self.retries_everything:
            return True
        exc_type = exc if isinstance(exc, type) else type(exc)
        verdict = self._classify(exc_type)
        if verdict is None and self.traverse_causes and isinstance(exc, BaseException):
            seen: set[int] = {id(exc)}
            cause = exc.__cause__ or exc.__context__
            while verdict is None and cause is not None and id(cause) not in seen:
                seen.add(id(cause))
                verdict = self._classify(type(cause))
                cause = cause.__cause__ or cause.__context__
        return (not self.include) if verdict is None else verdict

    def can_retry(self, exc: BaseException | None, attempts: int) -> bool:
        """Whether another attempt is allowed after `attempts` tries ending in `exc`."""
        return attempts < self.max_attempts and (exc is None or self.is_retryable(exc))


class CircuitBreakerPolicy(BaseModel):
    """Retry policy guarded by a circuit breaker.

    The executor opens the circuit when the delegate refuses a retry within
    `open_timeout` seconds and closes it again after `reset_timeout`.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never")

    delegate: SimpleRetryPolicy
    open_timeout: PositiveFloat = 5.0
    reset_timeout: PositiveFloat = 20.0

    @property
    def max_attempts(self) -> int:
        return self.delegate.max_attempts

    def is_retryable(self, exc: BaseException | type[BaseException]) -> bool:
        return self.delegate.is_retryable(exc)

    def can_retry(self, exc: BaseException | None, attempts: int) -> bool:
        return self.delegate.can_retry(exc, attempts)


RetryPolicy = SimpleRetryPolicy | CircuitBreakerPolicy


def build_retry_policy(
    max_attempts: int,
    include: Iterable[type[BaseException]] = (),
    exclude: Iterable[type[BaseException]] = (),
) -> SimpleRetryPolicy:
    """Build a retry policy from declarative include/exclude metadata.

    Args:
        max_attempts: Total attempts cap
        include: Retryable exception types (with subclasses)
        exclude: Non-retryable exception types (with subclasses)

    Returns:
        SimpleRetryPolicy retrying everything when both sets are empty
    """
    return SimpleRetryPolicy(max_attempts=max_attempts, include=frozenset(include), exclude=frozenset(exclude))
