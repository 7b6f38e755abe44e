"""Declarative retry metadata.

Immutable Pydantic models produced by the @retryable / @circuit_breaker
decorators and consumed by strategy resolution. Durations are seconds.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveFloat, field_validator

from retrycase.foundation.config import get_settings
from retrycase.retry.policy import ExceptionTypes

_MODEL_CONFIG = ConfigDict(frozen=True, extra="forbid", revalidate_instances="never", validate_default=True)


def _normalize_types(v: object) -> object:
    """Accept a single exception type or any iterable of them."""
    if isinstance(v, type):
        return frozenset({v})
    return frozenset(v) if isinstance(v, (list, tuple, set)) else v


class BackoffDescriptor(BaseModel):
    """Backoff parameters for @retryable.

    Attributes:
        delay: Start delay; 0 means "use `value`"
        value: Legacy start delay, used when `delay` is 0
        max_delay: Upper bound; 0 means unset
        multiplier: Exponential growth factor; 0 means no exponential growth
        random: Jitter the delay (uniform range or randomized exponential)
    """

    model_config = _MODEL_CONFIG

    delay: NonNegativeFloat = 0.0
    value: NonNegativeFloat = Field(default_factory=lambda: get_settings().retry.backoff_value)
    max_delay: NonNegativeFloat = 0.0
    multiplier: NonNegativeFloat = 0.0
    random: bool = False


class RetryDescriptor(BaseModel):
    """Retry metadata attached to a method or its declaring class.

    Attributes:
        max_attempts: Total attempts including the first
        include: Retryable exception types
        exclude: Exception types never retried
        stateful: Correlate retries across calls instead of looping in one call
        interceptor: Registry name of a pre-built interceptor; overrides everything else
        backoff: Backoff parameters
    """

    model_config = _MODEL_CONFIG

    max_attempts: int = Field(default_factory=lambda: get_settings().retry.max_attempts, ge=1)
    include: ExceptionTypes = frozenset()
    exclude: ExceptionTypes = frozenset()
    stateful: bool = False
    interceptor: str | None = None
    backoff: BackoffDescriptor = Field(default_factory=BackoffDescriptor)

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _coerce_types(cls, v: object) -> object:
        return _normalize_types(v)

    @field_validator("interceptor", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: str | None) -> str | None:
        """A blank interceptor name means no interceptor."""
        return v.strip() or None if isinstance(v, str) else v


class CircuitDescriptor(BaseModel):
    """Circuit-breaker metadata companion to a stateful RetryDescriptor.

    Attributes:
        max_attempts: Failures tolerated within open_timeout before opening
        include: Exception types counted as failures
        exclude: Exception types never counted
        open_timeout: Window in seconds for counting failures
        reset_timeout: Seconds an open circuit waits before closing
        label: Circuit name; blank derives one from the method signature
    """

    model_config = _MODEL_CONFIG

    max_attempts: int = Field(default_factory=lambda: get_settings().circuit.max_attempts, ge=1)
    include: ExceptionTypes = frozenset()
    exclude: ExceptionTypes = frozenset()
    open_timeout: PositiveFloat = Field(default_factory=lambda: get_settings().circuit.open_timeout)
    reset_timeout: PositiveFloat = Field(default_factory=lambda: get_settings().circuit.reset_timeout)
    label: str = ""

    @field_validator("include", "exclude", mode="before")
    @classmethod
    def _coerce_types(cls, v: object) -> object:
        return _normalize_types(v)

    @field_validator("label", mode="before")
    @classmethod
    def _strip_label(cls, v: str | None) -> str:
        return (v or "").strip()


def Backoff(
    delay: float = 0.0,
    *,
    value: float | None = None,
    max_delay: float = 0.0,
    multiplier: float = 0.0,
    random: bool = False,
) -> BackoffDescriptor:
    """Build backoff metadata for @retryable.

    Example:
        >>> @retryable(ConnectionError, backoff=Backoff(0.2, multiplier=2.0, max_delay=5.0))
        ... def fetch(url: str) -> bytes: ...
    """
    fields: dict[str, object] = {"delay": delay, "max_delay": max_delay, "multiplier": multiplier, "random": random}
    if value is not None:
        fields["value"] = value
    return BackoffDescriptor(**fields)
