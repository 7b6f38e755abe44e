"""Descriptor providers: read retry metadata for a method.

Method-level metadata wins; otherwise the declaring class (and, through
normal attribute inheritance, its bases) supplies it. Circuit metadata is
read from the same level the retry metadata came from, so a method with
its own @retryable never picks up a class-level @circuit_breaker.
"""

from __future__ import annotations

from typing import Callable, Protocol, TypeVar, runtime_checkable

from retrycase.foundation.errors import InvalidMetadata

from .decorators import CIRCUIT_ATTR, RETRYABLE_ATTR, unwrap
from .descriptors import CircuitDescriptor, RetryDescriptor

D = TypeVar("D", RetryDescriptor, CircuitDescriptor)


@runtime_checkable
class DescriptorProvider(Protocol):
    """Source of retry metadata for intercepted methods."""

    def describe(self, method: Callable[..., object], owner: type | None = None) -> RetryDescriptor | None: ...
    def describe_circuit(self, method: Callable[..., object], owner: type | None = None) -> CircuitDescriptor | None: ...


def declaring_class(method: Callable[..., object], owner: type | None) -> type | None:
    """First class on `owner`'s MRO that defines `method` itself."""
    if owner is None:
        return None
    func = unwrap(method)
    name = getattr(func, "__name__", None)
    for klass in owner.__mro__:
        if name in vars(klass) and unwrap(vars(klass)[name]) is func:
            return klass
    return owner


def _checked(found: object, kind: type[D], attr: str, method: Callable[..., object]) -> D | None:
    if found is None or isinstance(found, kind):
        return found
    func = unwrap(method)
    where = f"{getattr(func, '__module__', '<unknown>')}.{getattr(func, '__qualname__', func)!s}"
    raise InvalidMetadata.for_attribute(where, attr, found)


class AttributeDescriptorProvider:
    """Reads descriptors stored by @retryable / @circuit_breaker.

    Raises:
        InvalidMetadata: a metadata attribute holds a foreign object
    """

    __slots__ = ()

    def _lookup(self, attr: str, method: Callable[..., object], owner: type | None) -> object | None:
        if (found := getattr(unwrap(method), attr, None)) is not None:
            return found
        klass = declaring_class(method, owner)
        return getattr(klass, attr, None) if klass is not None else None

    def describe(self, method: Callable[..., object], owner: type | None = None) -> RetryDescriptor | None:
        return _checked(self._lookup(RETRYABLE_ATTR, method, owner), RetryDescriptor, RETRYABLE_ATTR, method)

    def describe_circuit(self, method: Callable[..., object], owner: type | None = None) -> CircuitDescriptor | None:
        func = unwrap(method)
        if getattr(func, RETRYABLE_ATTR, None) is not None:
            found = getattr(func, CIRCUIT_ATTR, None)
        else:
            found = self._lookup(CIRCUIT_ATTR, method, owner)
        return _checked(found, CircuitDescriptor, CIRCUIT_ATTR, method)
