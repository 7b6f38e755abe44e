"""Tests for retry metadata decorators and the attribute descriptor provider."""

import pytest
from pydantic import ValidationError

from retrycase.annotations import (
    AttributeDescriptorProvider,
    Backoff,
    CircuitDescriptor,
    RetryDescriptor,
    circuit_breaker,
    declaring_class,
    is_recovery_handler,
    recover,
    retryable,
)
from retrycase.foundation.errors import ErrorCode, InvalidMetadata


class IOFailure(Exception):
    pass


@pytest.fixture
def provider() -> AttributeDescriptorProvider:
    return AttributeDescriptorProvider()


# ═════════════════════════════════════════════════════════════════════════════
# Decorators
# ═════════════════════════════════════════════════════════════════════════════


def test_bare_retryable_uses_defaults(provider: AttributeDescriptorProvider) -> None:
    @retryable
    def fetch() -> None: ...

    descriptor = provider.describe(fetch)
    assert descriptor == RetryDescriptor()
    assert descriptor.max_attempts == 3
    assert descriptor.backoff.value == 1.0
    assert not descriptor.stateful


def test_decorators_return_target_unchanged() -> None:
    def fetch() -> None: ...

    assert retryable(IOFailure)(fetch) is fetch
    assert circuit_breaker()(fetch) is fetch
    assert recover(fetch) is fetch


def test_positional_types_override_include(provider: AttributeDescriptorProvider) -> None:
    @retryable(IOFailure, include=[KeyError], max_attempts=5, backoff=Backoff(0.2))
    def fetch() -> None: ...

    descriptor = provider.describe(fetch)
    assert descriptor.include == frozenset({IOFailure})
    assert descriptor.max_attempts == 5
    assert descriptor.backoff.delay == 0.2


def test_blank_interceptor_name_means_none() -> None:
    assert RetryDescriptor(interceptor="   ").interceptor is None
    assert RetryDescriptor(interceptor=" auditRetry ").interceptor == "auditRetry"


def test_single_type_accepted_for_include() -> None:
    assert RetryDescriptor(include=IOFailure).include == frozenset({IOFailure})


def test_invalid_metadata_rejected_at_decoration() -> None:
    with pytest.raises(ValidationError):
        retryable(max_attempts=0)
    with pytest.raises(ValidationError):
        retryable(include=[str])  # type: ignore[list-item]
    with pytest.raises(ValidationError):
        circuit_breaker(reset_timeout=-1.0)
    with pytest.raises(ValidationError):
        Backoff(-1.0)


def test_descriptors_are_frozen() -> None:
    descriptor = RetryDescriptor()
    with pytest.raises(ValidationError):
        descriptor.stateful = True  # type: ignore[misc]


def test_circuit_breaker_implies_stateful_retry(provider: AttributeDescriptorProvider) -> None:
    @circuit_breaker(IOFailure, max_attempts=2, open_timeout=1.0, reset_timeout=3.0, label="  inventory  ")
    def stock() -> int: ...

    descriptor = provider.describe(stock)
    circuit = provider.describe_circuit(stock)
    assert descriptor is not None and descriptor.stateful
    assert descriptor.include == frozenset({IOFailure})
    assert circuit == CircuitDescriptor(
        max_attempts=2, include=frozenset({IOFailure}), open_timeout=1.0, reset_timeout=3.0, label="inventory",
    )


def test_circuit_breaker_keeps_explicit_retryable(provider: AttributeDescriptorProvider) -> None:
    @circuit_breaker()
    @retryable(stateful=False, max_attempts=7)
    def stock() -> int: ...

    descriptor = provider.describe(stock)
    assert descriptor.max_attempts == 7
    assert not descriptor.stateful


def test_circuit_defaults_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from retrycase.foundation.config import clear_settings_cache

    monkeypatch.setenv("RETRYCASE_CIRCUIT_RESET_TIMEOUT", "45")
    clear_settings_cache()
    assert CircuitDescriptor().reset_timeout == 45.0
    assert CircuitDescriptor().open_timeout == 5.0


def test_recover_marks_static_and_class_methods() -> None:
    class Service:
        @recover
        def plain(self, exc: Exception) -> None: ...

        @staticmethod
        @recover
        def inner(exc: Exception) -> None: ...

        @recover
        @staticmethod
        def outer(exc: Exception) -> None: ...

        @recover
        @classmethod
        def klass(cls, exc: Exception) -> None: ...

        def other(self) -> None: ...

    members = vars(Service)
    assert all(is_recovery_handler(members[n]) for n in ("plain", "inner", "outer", "klass"))
    assert not is_recovery_handler(members["other"])


# ═════════════════════════════════════════════════════════════════════════════
# Provider
# ═════════════════════════════════════════════════════════════════════════════


@retryable(max_attempts=4)
class Inventory:
    def release(self) -> None: ...

    @retryable(IOFailure)
    def reserve(self) -> None: ...


class Warehouse(Inventory):
    def audit(self) -> None: ...


def test_method_metadata_wins_over_class(provider: AttributeDescriptorProvider) -> None:
    descriptor = provider.describe(Inventory.reserve, Inventory)
    assert descriptor.include == frozenset({IOFailure})
    assert descriptor.max_attempts == 3


def test_class_metadata_applies_to_undecorated_methods(provider: AttributeDescriptorProvider) -> None:
    assert provider.describe(Inventory.release, Inventory).max_attempts == 4


def test_subclass_inherits_class_metadata(provider: AttributeDescriptorProvider) -> None:
    assert provider.describe(Warehouse.audit, Warehouse).max_attempts == 4
    assert provider.describe(Warehouse.release, Warehouse).max_attempts == 4


def test_no_metadata_is_none(provider: AttributeDescriptorProvider) -> None:
    class Plain:
        def run(self) -> None: ...

    assert provider.describe(Plain.run, Plain) is None
    assert provider.describe_circuit(Plain.run, Plain) is None
    assert provider.describe(Plain.run) is None


def test_declaring_class_found_on_mro() -> None:
    assert declaring_class(Warehouse.release, Warehouse) is Inventory
    assert declaring_class(Warehouse.audit, Warehouse) is Warehouse
    assert declaring_class(Warehouse.audit, None) is None


def test_bound_method_reads_function_metadata(provider: AttributeDescriptorProvider) -> None:
    assert provider.describe(Inventory().reserve, Inventory).include == frozenset({IOFailure})


def test_circuit_read_from_same_level_as_retry_metadata(provider: AttributeDescriptorProvider) -> None:
    """Own @retryable ignores a class @circuit_breaker; inherited retry metadata keeps it."""
    @circuit_breaker(label="ledger")
    class Ledger:
        @retryable(stateful=True)
        def post(self) -> None: ...

        def close(self) -> None: ...

    assert provider.describe_circuit(Ledger.post, Ledger) is None
    assert provider.describe_circuit(Ledger.close, Ledger).label == "ledger"
    assert provider.describe(Ledger.close, Ledger).stateful


def test_foreign_metadata_attribute_rejected(provider: AttributeDescriptorProvider) -> None:
    def fetch() -> None: ...

    fetch.__retryable__ = {"max_attempts": 2}  # type: ignore[attr-defined]
    with pytest.raises(InvalidMetadata) as info:
        provider.describe(fetch)
    assert info.value.error.code == ErrorCode.INVALID_METADATA
    assert info.value.error.method.endswith("fetch")
    assert info.value.error.details == "__retryable__"
    assert info.value.error.is_configuration_error
