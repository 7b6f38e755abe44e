"""Standardized error handling for retry resolution.

Provides error codes and structured error responses for configuration
failures surfaced while resolving retry strategies.
Uses Pydantic for validation and serialization.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Self

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class ErrorCode(StrEnum):
    """Standard error codes for resolution failures."""
    INTERCEPTOR_NOT_FOUND = "INTERCEPTOR_NOT_FOUND"
    NO_EXECUTOR = "NO_EXECUTOR"
    INVALID_METADATA = "INVALID_METADATA"
    CONTEXT_CACHE_FULL = "CONTEXT_CACHE_FULL"
    UNKNOWN = "UNKNOWN"


class RetryError(BaseModel):
    """Structured error for a method whose retry behavior could not be resolved.

    Attributes:
        method: Signature string of the intercepted method
        message: Human-readable error message
        code: Machine-readable error code
        details: Optional detail (e.g. the missing registry name)
    """

    model_config = ConfigDict(
        frozen=True,
        str_strip_whitespace=True,
        validate_default=True,
        json_schema_extra={
            "title": "Retry Error",
            "description": "Structured error from retry strategy resolution",
            "examples": [{
                "method": "orders.OrderService.place(self, order_id: int)",
                "message": "No interceptor registered under 'auditRetry'",
                "code": "INTERCEPTOR_NOT_FOUND",
            }],
        },
    )

    method: Annotated[str, Field(min_length=1, description="Signature of the intercepted method")]
    message: Annotated[str, Field(min_length=1, description="Human-readable error message")]
    code: ErrorCode = Field(default=ErrorCode.UNKNOWN, description="Machine-readable error classification")
    details: str | None = Field(default=None, description="Optional detail")

    @field_validator("message", mode="before")
    @classmethod
    def _ensure_message(cls, v: str | Exception) -> str:
        """Accept Exception objects and extract message."""
        return str(v) if isinstance(v, Exception) else v

    @computed_field
    @property
    def is_configuration_error(self) -> bool:
        """Whether the failure comes from how the method was configured."""
        return self.code in (ErrorCode.INTERCEPTOR_NOT_FOUND, ErrorCode.INVALID_METADATA)

    @classmethod
    def create(cls, method: str, message: str, code: ErrorCode = ErrorCode.UNKNOWN, *, details: str | None = None) -> Self:
        """Factory method for construction."""
        return cls(method=method, message=message, code=code, details=details)

    def render(self) -> str:
        """Format error for log output."""
        text = f"[{self.code}] {self.method}: {self.message}"
        return f"{text} ({self.details})" if self.details else text

    __str__ = render


class RetryException(Exception):
    """Exception wrapping a RetryError for raising."""

    __slots__ = ("error",)

    def __init__(self, error: RetryError) -> None:
        self.error = error
        super().__init__(error.render())

    @classmethod
    def create(cls, method: str, message: str, code: ErrorCode = ErrorCode.UNKNOWN, *, details: str | None = None) -> Self:
        return cls(RetryError.create(method, message, code, details=details))


class InterceptorNotFound(RetryException, LookupError):
    """No interceptor is registered under the requested name."""

    @classmethod
    def for_name(cls, name: str, method: str = "<registry>") -> Self:
        return cls.create(
            method, f"No interceptor registered under '{name}'",
            ErrorCode.INTERCEPTOR_NOT_FOUND, details=name,
        )


class ExecutorMissing(RetryException):
    """A retry strategy was resolved but no RetryExecutor is configured."""

    @classmethod
    def for_method(cls, method: str) -> Self:
        return cls.create(method, "Retry strategy resolved but no executor is configured", ErrorCode.NO_EXECUTOR)


class ContextCacheFull(RetryException):
    """The retry-context cache reached capacity; stateful keys are leaking."""

    @classmethod
    def for_capacity(cls, capacity: int) -> Self:
        return cls.create(
            "<context-cache>", f"Retry context cache is full ({capacity} entries)",
            ErrorCode.CONTEXT_CACHE_FULL,
            details="stateful keys must be removed once their retry completes",
        )


class InvalidMetadata(RetryException, TypeError):
    """A retry metadata attribute holds something other than its descriptor type."""

    @classmethod
    def for_attribute(cls, method: str, attr: str, found: object) -> Self:
        return cls.create(
            method, f"'{attr}' must hold retry metadata, got {type(found).__name__}",
            ErrorCode.INVALID_METADATA, details=attr,
        )
