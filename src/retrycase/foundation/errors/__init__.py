"""Error handling for retrycase.

- ErrorCode: Standard error codes for resolution failures
- RetryError/RetryException: Structured errors and exceptions
- InterceptorNotFound/ExecutorMissing/InvalidMetadata: Raised from dispatch
"""

from .errors import (
    ContextCacheFull,
    ErrorCode,
    ExecutorMissing,
    InterceptorNotFound,
    InvalidMetadata,
    RetryError,
    RetryException,
)

__all__ = [
    "ContextCacheFull",
    "ErrorCode",
    "ExecutorMissing",
    "InterceptorNotFound",
    "InvalidMetadata",
    "RetryError",
    "RetryException",
]
