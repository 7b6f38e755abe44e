"""Contracts for the retry executor and its stateful collaborators.

retrycase decides *which* policy governs a call; running the attempt loop,
sleeping between attempts, tracking circuit state and invoking recoverers
belongs to an executor implementing `RetryExecutor`.
"""

from __future__ import annotations

from collections.abc import Hashable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from retrycase.interceptor.invocation import MethodInvocation
    from retrycase.interceptor.recovery import RecovererBinding

    from .backoff import BackoffPolicy
    from .context import RetryContextCache
    from .policy import RetryPolicy


@runtime_checkable
class MethodArgumentsKeyGenerator(Protocol):
    """Derives the key correlating stateful retries of the same logical call."""

    def key(self, args: tuple[object, ...]) -> Hashable: ...


@runtime_checkable
class NewMethodArgumentsIdentifier(Protocol):
    """Tells whether arguments start a fresh stateful retry."""

    def is_new(self, args: tuple[object, ...]) -> bool: ...


@runtime_checkable
class RetryExecutor(Protocol):
    """Runs an invocation under a retry policy.

    Implementations call `invocation.proceed()` once per attempt, wait
    `backoff.delay(n)` between attempts (through `backoff.sleeper` when set)
    and either return the first successful result, hand the final failure to
    `recoverer`, or raise it.

    Stateful calls (`stateful=True`) keep their retry context in
    `context_cache` under `key_generator.key(invocation.args)` and rethrow
    each failure to the caller; a circuit-breaker call additionally carries
    the circuit `label`.
    """

    def execute(
        self,
        invocation: MethodInvocation,
        policy: RetryPolicy,
        backoff: BackoffPolicy,
        *,
        recoverer: RecovererBinding | None = None,
        key_generator: MethodArgumentsKeyGenerator | None = None,
        new_arguments_identifier: NewMethodArgumentsIdentifier | None = None,
        stateful: bool = False,
        label: str | None = None,
        context_cache: RetryContextCache | None = None,
    ) -> object: ...
