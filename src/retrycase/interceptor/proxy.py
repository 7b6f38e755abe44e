"""Proxy routing method calls of a target through a RetryDispatcher.

Only regular attribute access is proxied: methods (instance, static and
class methods) come back as dispatching callables, anything else is the
target's own value. Dunder protocols (`len()`, operators) are not
intercepted.
"""

from __future__ import annotations

import inspect
from functools import wraps
from typing import TYPE_CHECKING, Callable

from .invocation import MethodInvocation, Retryable

if TYPE_CHECKING:
    from .dispatch import RetryDispatcher

_MISSING = object()


class RetryProxy(Retryable):
    """Retry-aware view of a target instance.

    Example:
        >>> service = RetryProxy(OrderService(), dispatcher)
        >>> service.place(42)         # dispatched
        >>> service.retries_enabled   # plain attribute, read through
    """

    __slots__ = ("_retry_target", "_retry_dispatcher")

    def __init__(self, target: object, dispatcher: RetryDispatcher) -> None:
        object.__setattr__(self, "_retry_target", target)
        object.__setattr__(self, "_retry_dispatcher", dispatcher)

    def __getattr__(self, name: str) -> object:
        target = self._retry_target
        owner = type(target)
        raw = inspect.getattr_static(target, name, _MISSING)
        if isinstance(raw, staticmethod):
            return self._dispatching(raw.__func__, None, owner)
        if isinstance(raw, classmethod):
            return self._dispatching(raw.__func__, owner, owner)
        if inspect.isfunction(raw) and name not in getattr(target, "__dict__", {}):
            return self._dispatching(raw, target, owner)
        return getattr(target, name)

    def __setattr__(self, name: str, value: object) -> None:
        setattr(self._retry_target, name, value)

    def __repr__(self) -> str:
        return f"RetryProxy({self._retry_target!r})"

    def _dispatching(self, method: Callable[..., object], target: object | None, owner: type) -> Callable[..., object]:
        dispatcher = self._retry_dispatcher

        @wraps(method)
        def dispatched(*args: object, **kwargs: object) -> object:
            return dispatcher.dispatch(MethodInvocation(method, target, args, kwargs, owner))
        return dispatched


def unproxy(obj: object) -> object:
    """The proxied target, or `obj` itself when it is not a RetryProxy."""
    return object.__getattribute__(obj, "_retry_target") if isinstance(obj, RetryProxy) else obj
