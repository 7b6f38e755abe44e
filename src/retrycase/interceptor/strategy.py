"""Resolved retry strategies and their assembly from metadata.

A method resolves to exactly one strategy:

    NoStrategy              no metadata: call proceeds untouched
    StatelessStrategy       retry loop inside a single call
    StatefulStrategy        retries correlated across calls by argument key
    CircuitBreakerStrategy  stateful retry that opens after sustained failure
    ExplicitStrategy        a named interceptor from the registry

Precedence in StrategyAssembler.assemble: explicit name, then stateless,
then circuit breaker (stateful + circuit metadata), then stateful.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from retrycase.foundation.errors import ExecutorMissing, InterceptorNotFound
from retrycase.retry import (
    BackoffPolicy,
    CircuitBreakerPolicy,
    MapRetryContextCache,
    NoBackoff,
    SimpleRetryPolicy,
    build_retry_policy,
    select_backoff,
)

from .invocation import Interceptor, MethodInvocation, MethodKey
from .recovery import RecovererBinding, locate_recoverer

if TYPE_CHECKING:
    from retrycase.annotations import CircuitDescriptor, RetryDescriptor
    from retrycase.retry import (
        MethodArgumentsKeyGenerator,
        NewMethodArgumentsIdentifier,
        RetryContextCache,
        RetryExecutor,
        Sleeper,
    )

    from .registry import ComponentRegistry

logger = logging.getLogger("retrycase.strategy")


def _require(executor: RetryExecutor | None, invocation: MethodInvocation) -> RetryExecutor:
    if executor is None:
        raise ExecutorMissing.for_method(str(invocation.key))
    return executor


@dataclass(frozen=True, slots=True)
class NoStrategy:
    """No retry metadata: the call proceeds unmodified."""

    def invoke(self, invocation: MethodInvocation, executor: RetryExecutor | None = None) -> object:
        return invocation.proceed()


NO_STRATEGY = NoStrategy()


@dataclass(frozen=True, slots=True)
class StatelessStrategy:
    policy: SimpleRetryPolicy
    backoff: BackoffPolicy
    recoverer: RecovererBinding | None = None

    def invoke(self, invocation: MethodInvocation, executor: RetryExecutor | None = None) -> object:
        return _require(executor, invocation).execute(
            invocation, self.policy, self.backoff, recoverer=self.recoverer,
        )


@dataclass(frozen=True, slots=True)
class StatefulStrategy:
    policy: SimpleRetryPolicy
    backoff: BackoffPolicy
    recoverer: RecovererBinding | None = None
    key_generator: MethodArgumentsKeyGenerator | None = None
    new_arguments_identifier: NewMethodArgumentsIdentifier | None = None
    context_cache: RetryContextCache | None = field(default=None, compare=False, repr=False)

    def invoke(self, invocation: MethodInvocation, executor: RetryExecutor | None = None) -> object:
        return _require(executor, invocation).execute(
            invocation, self.policy, self.backoff,
            recoverer=self.recoverer,
            key_generator=self.key_generator,
            new_arguments_identifier=self.new_arguments_identifier,
            stateful=True,
            context_cache=self.context_cache,
        )


@dataclass(frozen=True, slots=True)
class CircuitBreakerStrategy:
    policy: CircuitBreakerPolicy
    label: str
    recoverer: RecovererBinding | None = None
    backoff: NoBackoff = field(default_factory=NoBackoff)
    context_cache: RetryContextCache | None = field(default=None, compare=False, repr=False)

    def invoke(self, invocation: MethodInvocation, executor: RetryExecutor | None = None) -> object:
        return _require(executor, invocation).execute(
            invocation, self.policy, self.backoff,
            recoverer=self.recoverer,
            stateful=True,
            label=self.label,
            context_cache=self.context_cache,
        )


@dataclass(frozen=True, slots=True)
class ExplicitStrategy:
    name: str
    interceptor: Interceptor

    def invoke(self, invocation: MethodInvocation, executor: RetryExecutor | None = None) -> object:
        return self.interceptor(invocation)


ResolvedStrategy = NoStrategy | StatelessStrategy | StatefulStrategy | CircuitBreakerStrategy | ExplicitStrategy


class StrategyAssembler:
    """Builds the one strategy a retry descriptor calls for.

    Deterministic for a given descriptor, registry contents and configured
    collaborators (sleeper, key generator, new-arguments identifier,
    context cache).

    Args:
        registry: Source of named interceptors (required only for explicit names)
        sleeper: Carried by every backoff policy built
        key_generator: Stateful retry key derivation
        new_arguments_identifier: Stateful fresh-call detection
        context_cache: Shared by stateful and circuit-breaker strategies
    """

    __slots__ = ("registry", "sleeper", "key_generator", "new_arguments_identifier", "context_cache")

    def __init__(
        self,
        registry: ComponentRegistry | None = None,
        *,
        sleeper: Sleeper | None = None,
        key_generator: MethodArgumentsKeyGenerator | None = None,
        new_arguments_identifier: NewMethodArgumentsIdentifier | None = None,
        context_cache: RetryContextCache | None = None,
    ) -> None:
        self.registry = registry
        self.sleeper = sleeper
        self.key_generator = key_generator
        self.new_arguments_identifier = new_arguments_identifier
        self.context_cache = context_cache if context_cache is not None else MapRetryContextCache()

    def assemble(
        self,
        descriptor: RetryDescriptor,
        circuit: CircuitDescriptor | None = None,
        target: object | None = None,
        method: Callable[..., object] | None = None,
    ) -> ResolvedStrategy:
        """Build the strategy for `method` on `target` described by `descriptor`.

        Raises:
            InterceptorNotFound: explicit interceptor name is not registered
        """
        if descriptor.interceptor:
            return self._explicit(descriptor.interceptor, method)
        if not descriptor.stateful:
            return StatelessStrategy(
                build_retry_policy(descriptor.max_attempts, descriptor.include, descriptor.exclude),
                select_backoff(descriptor.backoff, self.sleeper),
                self._recoverer(target, method),
            )
        if circuit is not None:
            return self._circuit(circuit, target, method)
        return StatefulStrategy(
            build_retry_policy(descriptor.max_attempts, descriptor.include, descriptor.exclude),
            select_backoff(descriptor.backoff, self.sleeper),
            self._recoverer(target, method),
            self.key_generator,
            self.new_arguments_identifier,
            self.context_cache,
        )

    def _explicit(self, name: str, method: Callable[..., object] | None) -> ExplicitStrategy:
        where = str(MethodKey.from_function(method)) if method is not None else "<registry>"
        if self.registry is None:
            raise InterceptorNotFound.for_name(name, where)
        try:
            return ExplicitStrategy(name, self.registry.resolve(name))
        except InterceptorNotFound as exc:
            raise InterceptorNotFound.for_name(name, where) from exc

    def _circuit(self, circuit: CircuitDescriptor, target: object | None, method: Callable[..., object] | None) -> CircuitBreakerStrategy:
        policy = CircuitBreakerPolicy(
            delegate=build_retry_policy(circuit.max_attempts, circuit.include, circuit.exclude),
            open_timeout=circuit.open_timeout,
            reset_timeout=circuit.reset_timeout,
        )
        label = circuit.label or (str(MethodKey.from_function(method)) if method is not None else "circuit")
        logger.debug("Circuit %r: open_timeout=%.1fs reset_timeout=%.1fs", label, circuit.open_timeout, circuit.reset_timeout)
        return CircuitBreakerStrategy(
            policy, label, self._recoverer(target, method),
            NoBackoff(sleeper=self.sleeper), self.context_cache,
        )

    def _recoverer(self, target: object | None, method: Callable[..., object] | None) -> RecovererBinding | None:
        return locate_recoverer(target, method) if method is not None else None
