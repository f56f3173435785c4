"""Tests for fold error types (struct and exception variants)."""

from __future__ import annotations

import pytest
from hypothesis import HealthCheck, given, settings

from klaw_fold.errors import (
    AlreadySettled,
    AlreadySettledError,
    ElementError,
    ElementFailed,
    FoldError,
    FoldTimeout,
    FoldTimeoutError,
    SeedError,
    SeedFailed,
    SourceFailed,
    SourceResolutionError,
    StepError,
    StepFailed,
)
from tests.strategies import exceptions


class TestFoldFailures:
    """Round trips between fold failure structs and exceptions."""

    def test_source_failed(self) -> None:
        cause = OSError('disk')
        exc = SourceFailed(cause).to_exception()
        assert isinstance(exc, SourceResolutionError)
        assert isinstance(exc, FoldError)
        assert exc.cause is cause
        assert exc.__cause__ is cause
        assert exc.to_struct() == SourceFailed(cause)
        assert 'Source failed to resolve' in str(exc)

    def test_seed_failed(self) -> None:
        cause = ValueError('seed')
        exc = SeedFailed(cause).to_exception()
        assert isinstance(exc, SeedError)
        assert exc.to_struct() == SeedFailed(cause)

    def test_element_failed(self) -> None:
        cause = KeyError('k')
        exc = ElementFailed(3, cause).to_exception()
        assert isinstance(exc, ElementError)
        assert exc.index == 3
        assert exc.__cause__ is cause
        assert str(exc).startswith('Element 3 failed')
        assert exc.to_struct() == ElementFailed(3, cause)

    def test_step_failed(self) -> None:
        cause = ZeroDivisionError('div')
        exc = StepFailed(1, cause).to_exception()
        assert isinstance(exc, StepError)
        assert exc.index == 1
        assert str(exc).startswith('Step 1 failed')
        assert exc.to_struct() == StepFailed(1, cause)

    def test_kinds(self) -> None:
        cause = ValueError()
        assert SourceFailed(cause).kind == 'source'
        assert SeedFailed(cause).kind == 'seed'
        assert ElementFailed(0, cause).kind == 'element'
        assert StepFailed(0, cause).kind == 'step'
        assert SourceFailed(cause).index is None
        assert SeedFailed(cause).index is None

    def test_structs_are_frozen(self) -> None:
        failure = StepFailed(0, ValueError())
        with pytest.raises(AttributeError):
            failure.index = 1  # type: ignore[misc]

    def test_structs_compare_by_cause_identity(self) -> None:
        assert ElementFailed(0, ValueError('a')) != ElementFailed(0, ValueError('a'))

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(cause=exceptions)
    def test_exception_round_trip(self, cause: Exception) -> None:
        for failure in (SourceFailed(cause), SeedFailed(cause), ElementFailed(2, cause), StepFailed(2, cause)):
            assert failure.to_exception().to_struct() == failure


class TestPromiseErrors:
    """Deferred and wait() errors."""

    def test_already_settled(self) -> None:
        exc = AlreadySettled().to_exception()
        assert isinstance(exc, AlreadySettledError)
        assert str(exc) == 'Deferred already settled'
        assert exc.to_struct() == AlreadySettled()

    def test_timeout(self) -> None:
        exc = FoldTimeout(0.5).to_exception()
        assert isinstance(exc, FoldTimeoutError)
        assert isinstance(exc, TimeoutError)
        assert exc.seconds == 0.5
        assert str(exc) == 'Promise did not settle within 0.5s'
        assert exc.to_struct() == FoldTimeout(0.5)
