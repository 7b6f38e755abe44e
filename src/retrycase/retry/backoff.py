"""Backoff policies and backoff selection from declarative metadata.

Provides pluggable delay calculation for retry attempts:
- FixedBackoff: Constant period between attempts
- UniformRandomBackoff: Uniformly random period within [min, max]
- ExponentialBackoff: Exponential growth with a cap
- ExponentialRandomBackoff: Exponential growth with jittered multiplier
- NoBackoff: Retry immediately (circuit breakers)

`select_backoff` maps a BackoffDescriptor onto exactly one of these.
Policies only compute delays; waiting is the executor's job, using the
sleeper the policy carries.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from retrycase.foundation.config import get_settings

if TYPE_CHECKING:
    from retrycase.annotations import BackoffDescriptor


@runtime_checkable
class Sleeper(Protocol):
    """Strategy for pausing between attempts (overridable clock)."""

    def sleep(self, seconds: float) -> None: ...


@runtime_checkable
class Backoff(Protocol):
    """Protocol for backoff delay calculation.

    Implementations compute the delay before the next retry attempt.
    Attempt numbers are 0-indexed (first retry = attempt 0).
    """

    sleeper: Sleeper | None

    def delay(self, attempt: int) -> float:
        """Calculate delay in seconds for given attempt number."""
        ...


@dataclass(frozen=True, slots=True)
class NoBackoff:
    """Zero delay between attempts."""

    sleeper: Sleeper | None = field(default=None, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        return 0.0


@dataclass(frozen=True, slots=True)
class FixedBackoff:
    """Fixed delay between retries.

    Attributes:
        period: Delay in seconds (default: 1.0)
    """

    period: float = 1.0
    sleeper: Sleeper | None = field(default=None, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        return self.period


@dataclass(frozen=True, slots=True)
class UniformRandomBackoff:
    """Random delay drawn uniformly from [min_period, max_period].

    Attributes:
        min_period: Lower bound in seconds
        max_period: Upper bound in seconds
    """

    min_period: float = 0.5
    max_period: float = 1.5
    sleeper: Sleeper | None = field(default=None, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        return random.uniform(self.min_period, self.max_period)


@dataclass(frozen=True, slots=True)
class ExponentialBackoff:
    """Exponential backoff with cap.

    Delay = min(initial_interval * (multiplier ^ attempt), max_interval)

    Attributes:
        initial_interval: First delay in seconds (default: 0.1)
        multiplier: Exponential growth factor (default: 2.0)
        max_interval: Maximum delay cap in seconds (default: 30.0)
    """

    initial_interval: float = 0.1
    multiplier: float = 2.0
    max_interval: float = 30.0
    sleeper: Sleeper | None = field(default=None, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        return min(self.initial_interval * (self.multiplier ** attempt), self.max_interval)


@dataclass(frozen=True, slots=True)
class ExponentialRandomBackoff:
    """Exponential backoff whose growth is jittered per attempt.

    Each delay is the capped exponential delay scaled by a random factor
    in [1, multiplier), so concurrent retriers spread out.
    """

    initial_interval: float = 0.1
    multiplier: float = 2.0
    max_interval: float = 30.0
    sleeper: Sleeper | None = field(default=None, compare=False, repr=False)

    def delay(self, attempt: int) -> float:
        d = min(self.initial_interval * (self.multiplier ** attempt), self.max_interval)
        return d * (1.0 + random.random() * (self.multiplier - 1.0))


BackoffPolicy = NoBackoff | FixedBackoff | UniformRandomBackoff | ExponentialBackoff | ExponentialRandomBackoff


def default_max_interval() -> float:
    """Cap applied to exponential backoff when max_delay is unset or not above the start delay."""
    return get_settings().retry.max_interval


def select_backoff(descriptor: BackoffDescriptor, sleeper: Sleeper | None = None) -> BackoffPolicy:
    """Select the backoff policy described by `descriptor`.

    Decision order, first match wins:
        1. multiplier > 0: exponential (randomized when `random` is set)
        2. max_delay > start delay: uniform random between the two
        3. otherwise: fixed at the start delay

    The start delay is `delay`, or the legacy `value` when `delay` is 0.

    Args:
        descriptor: Backoff metadata from @retryable
        sleeper: Optional sleeper carried by the built policy

    Returns:
        Exactly one backoff policy
    """
    lo = descriptor.delay if descriptor.delay != 0 else descriptor.value
    hi = descriptor.max_delay
    if descriptor.multiplier > 0:
        cls = ExponentialRandomBackoff if descriptor.random else ExponentialBackoff
        return cls(
            initial_interval=lo,
            multiplier=descriptor.multiplier,
            max_interval=hi if hi > lo else default_max_interval(),
            sleeper=sleeper,
        )
    if hi > lo:
        return UniformRandomBackoff(min_period=lo, max_period=hi, sleeper=sleeper)
    return FixedBackoff(period=lo, sleeper=sleeper)
