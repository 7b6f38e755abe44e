"""Tests for backoff policies and backoff selection."""

import pytest

from retrycase.annotations import Backoff
from retrycase.retry import (
    ExponentialBackoff,
    ExponentialRandomBackoff,
    FixedBackoff,
    NoBackoff,
    UniformRandomBackoff,
    select_backoff,
)


class FakeSleeper:
    def __init__(self) -> None:
        self.slept: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.slept.append(seconds)


# ═════════════════════════════════════════════════════════════════════════════
# Selection
# ═════════════════════════════════════════════════════════════════════════════


def test_fixed_when_no_max_and_no_multiplier() -> None:
    """delay=1s, no max, no multiplier selects fixed 1s."""
    assert select_backoff(Backoff(1.0)) == FixedBackoff(period=1.0)


def test_uniform_when_max_above_min() -> None:
    """delay=1s, max=5s selects uniform random in [1s, 5s]."""
    assert select_backoff(Backoff(1.0, max_delay=5.0)) == UniformRandomBackoff(min_period=1.0, max_period=5.0)


def test_exponential_when_multiplier_set() -> None:
    """delay=1s, max=10s, multiplier=2 selects capped exponential."""
    policy = select_backoff(Backoff(1.0, max_delay=10.0, multiplier=2.0))
    assert policy == ExponentialBackoff(initial_interval=1.0, multiplier=2.0, max_interval=10.0)


def test_exponential_random_when_random_set() -> None:
    """Adding random=True to the exponential case selects the jittered variant."""
    policy = select_backoff(Backoff(1.0, max_delay=10.0, multiplier=2.0, random=True))
    assert policy == ExponentialRandomBackoff(initial_interval=1.0, multiplier=2.0, max_interval=10.0)


def test_zero_delay_falls_back_to_value() -> None:
    """delay=0 uses the legacy value as the start delay."""
    assert select_backoff(Backoff(0.0, value=2.5)) == FixedBackoff(period=2.5)


def test_default_descriptor_is_fixed_one_second() -> None:
    assert select_backoff(Backoff()) == FixedBackoff(period=1.0)


def test_exponential_with_degenerate_max_uses_default_cap() -> None:
    """max_delay not above the start delay falls back to the 30s cap."""
    for max_delay in (0.0, 0.5, 2.0):
        policy = select_backoff(Backoff(2.0, max_delay=max_delay, multiplier=3.0))
        assert isinstance(policy, ExponentialBackoff)
        assert policy.max_interval == 30.0


def test_uniform_ignores_random_flag_without_multiplier() -> None:
    assert isinstance(select_backoff(Backoff(1.0, max_delay=2.0, random=True)), UniformRandomBackoff)


def test_default_cap_follows_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    """RETRYCASE_RETRY_MAX_INTERVAL changes the exponential fallback cap."""
    from retrycase.foundation.config import clear_settings_cache

    monkeypatch.setenv("RETRYCASE_RETRY_MAX_INTERVAL", "12.5")
    clear_settings_cache()
    policy = select_backoff(Backoff(1.0, multiplier=2.0))
    assert policy.max_interval == 12.5


def test_selected_policy_carries_sleeper() -> None:
    """The configured sleeper is attached to whichever policy is built."""
    sleeper = FakeSleeper()
    for descriptor in (Backoff(1.0), Backoff(1.0, max_delay=3.0), Backoff(1.0, multiplier=2.0)):
        assert select_backoff(descriptor, sleeper).sleeper is sleeper


def test_sleeper_excluded_from_equality() -> None:
    assert select_backoff(Backoff(1.0), FakeSleeper()) == select_backoff(Backoff(1.0))


# ═════════════════════════════════════════════════════════════════════════════
# Delays
# ═════════════════════════════════════════════════════════════════════════════


def test_no_backoff_delay() -> None:
    assert NoBackoff().delay(0) == 0.0
    assert NoBackoff().delay(7) == 0.0


def test_exponential_delay_growth_and_cap() -> None:
    policy = ExponentialBackoff(initial_interval=1.0, multiplier=2.0, max_interval=5.0)
    assert [policy.delay(n) for n in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_uniform_delay_within_bounds() -> None:
    policy = UniformRandomBackoff(min_period=0.2, max_period=0.4)
    assert all(0.2 <= policy.delay(n) <= 0.4 for n in range(50))


def test_exponential_random_delay_bounds() -> None:
    """Jittered delay lies in [base, base * multiplier)."""
    policy = ExponentialRandomBackoff(initial_interval=1.0, multiplier=2.0, max_interval=100.0)
    for attempt in range(4):
        base = 2.0 ** attempt
        assert base <= policy.delay(attempt) < base * 2.0
