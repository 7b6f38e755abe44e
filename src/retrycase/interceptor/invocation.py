"""Intercepted calls and the interceptor contract.

Interceptors follow continuation-passing style: each receives a
MethodInvocation and decides whether, and how often, to `proceed()`.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Callable, Protocol, runtime_checkable

from retrycase.annotations import unwrap


@dataclass(frozen=True, slots=True)
class MethodKey:
    """Identity of a callable member: module, qualified name and signature.

    Immutable and hashable; used as the resolution-cache key. Two keys are
    equal only for the same function object, so same-named methods of
    factory-built classes or reloaded modules never share a key. `str()`
    renders the full signature, which is also the default circuit label.
    """

    module: str
    qualname: str
    signature: str
    function: Callable[..., object] | None = field(default=None, repr=False)

    @classmethod
    def from_function(cls, method: Callable[..., object]) -> MethodKey:
        return _key_for(unwrap(method))

    def __str__(self) -> str:
        return f"{self.module}.{self.qualname}{self.signature}"


def _render_signature(func: Callable[..., object]) -> str:
    try:
        return str(inspect.signature(func, eval_str=True))
    except (NameError, AttributeError, SyntaxError, TypeError):  # Unresolvable string annotations
        return str(inspect.signature(func))


@lru_cache(maxsize=2048)
def _key_for(func: Callable[..., object]) -> MethodKey:
    try:
        signature = _render_signature(func)
    except (TypeError, ValueError):  # Builtins without introspectable signatures
        signature = "(...)"
    return MethodKey(
        getattr(func, "__module__", None) or "<unknown>",
        getattr(func, "__qualname__", None) or repr(func),
        signature,
        func,
    )


@dataclass(slots=True)
class MethodInvocation:
    """A single call being routed through retry resolution.

    Attributes:
        method: Underlying function (unbound)
        target: Instance (or class, for classmethods) passed as first argument; None for plain functions
        args: Positional arguments, excluding `target`
        kwargs: Keyword arguments
        owner: Class the method was looked up on (defaults to type(target))

    Example:
        >>> inv = MethodInvocation(OrderService.place, service, (42,))
        >>> inv.proceed()  # == OrderService.place(service, 42)
    """

    method: Callable[..., object]
    target: object | None = None
    args: tuple[object, ...] = ()
    kwargs: dict[str, object] = field(default_factory=dict)
    owner: type | None = None

    def __post_init__(self) -> None:
        self.method = unwrap(self.method)  # type: ignore[assignment]
        if self.owner is None and self.target is not None:
            self.owner = self.target if isinstance(self.target, type) else type(self.target)

    @property
    def key(self) -> MethodKey:
        return MethodKey.from_function(self.method)

    def proceed(self) -> object:
        """Invoke the original method once."""
        if self.target is None:
            return self.method(*self.args, **self.kwargs)
        return self.method(self.target, *self.args, **self.kwargs)


@runtime_checkable
class Interceptor(Protocol):
    """Protocol for method interceptors.

    Example:
        >>> class AuditInterceptor:
        ...     def __call__(self, invocation):
        ...         log.info("calling %s", invocation.key)
        ...         return invocation.proceed()
    """

    def __call__(self, invocation: MethodInvocation) -> object: ...


class Retryable:
    """Marker for objects whose calls are routed through retry resolution."""

    __slots__ = ()
