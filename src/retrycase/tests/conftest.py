"""Shared fixtures: settings isolation and a recording retry executor."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from retrycase.foundation.config import clear_settings_cache
from retrycase.interceptor import MethodInvocation


@dataclass
class ExecuteCall:
    """One recorded RetryExecutor.execute call."""

    invocation: MethodInvocation
    policy: object
    backoff: object
    options: dict[str, object] = field(default_factory=dict)


class RecordingExecutor:
    """Fake RetryExecutor: records each call and proceeds exactly once."""

    def __init__(self) -> None:
        self.calls: list[ExecuteCall] = []

    def execute(self, invocation: MethodInvocation, policy: object, backoff: object, **options: object) -> object:
        self.calls.append(ExecuteCall(invocation, policy, backoff, options))
        return invocation.proceed()


@pytest.fixture(autouse=True)
def fresh_settings() -> object:
    """Reload settings from the environment around each test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()
