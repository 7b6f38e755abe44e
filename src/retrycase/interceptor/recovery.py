"""Recoverer discovery.

Decides whether a target can recover from exhausted retries and packages
it for the executor. Choosing *which* handler fits a given failure, and
calling it, is the executor's job.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable

from retrycase.annotations import is_recovery_handler

logger = logging.getLogger("retrycase.recovery")


class MethodInvocationRecoverer(ABC):
    """Targets that recover from exhausted retries themselves.

    A target subclassing this is bound directly, without scanning for
    @recover handlers.
    """

    @abstractmethod
    def recover(self, args: tuple[object, ...], cause: BaseException) -> object:
        """Produce a substitute result for a call whose retries are exhausted."""
        ...


@dataclass(frozen=True, slots=True)
class RecovererBinding:
    """A target able to recover, plus the intercepted method it recovers for.

    Attributes:
        target: Instance owning the recovery logic
        method: Intercepted method whose failures are recovered
        handlers: Names of @recover methods on the target's class;
            empty when the target is a MethodInvocationRecoverer
    """

    target: object
    method: Callable[..., object]
    handlers: tuple[str, ...] = ()

    @property
    def is_direct(self) -> bool:
        """Whether the target implements MethodInvocationRecoverer itself."""
        return isinstance(self.target, MethodInvocationRecoverer)


@lru_cache(maxsize=512)
def recovery_handlers(cls: type) -> tuple[str, ...]:
    """Names of @recover-marked members on `cls`, inherited ones included."""
    names: list[str] = []
    for klass in cls.__mro__:
        for name, member in vars(klass).items():
            if name not in names and is_recovery_handler(member):
                names.append(name)
    return tuple(names)


def locate_recoverer(target: object | None, method: Callable[..., object]) -> RecovererBinding | None:
    """Find recovery capability for calls of `method` on `target`.

    Returns:
        Binding when `target` is a MethodInvocationRecoverer or its class has
        @recover handlers; None otherwise (failures then propagate)
    """
    if target is None:
        return None
    if isinstance(target, MethodInvocationRecoverer):
        return RecovererBinding(target, method)
    handlers = recovery_handlers(target if isinstance(target, type) else type(target))
    if not handlers:
        return None
    logger.debug("Found recovery handlers %s for %s", handlers, getattr(method, "__qualname__", method))
    return RecovererBinding(target, method, handlers)
