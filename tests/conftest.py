"""Pytest configuration and shared fixtures for klaw-fold tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from typing import Any

import pytest

from klaw_fold._config import reset
from klaw_fold._logging import clear_log_hooks


@pytest.fixture(autouse=True)
def clean_config(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Isolate each test from the environment and from init() calls."""
    for name in ('KLAW_FOLD_LOG_LEVEL', 'KLAW_FOLD_LOG_FORMAT', 'KLAW_FOLD_TRACE'):
        monkeypatch.delenv(name, raising=False)
    reset()
    clear_log_hooks()
    yield
    reset()
    clear_log_hooks()


def _plus(acc: Any, value: Any) -> Any:
    # None is a hole and counts as zero
    return (acc or 0) + (value or 0)


def _append(acc: str, value: Any) -> str:
    return acc + str(value)


@pytest.fixture
def plus() -> Callable[[Any, Any], Any]:
    """Addition step treating None as zero."""
    return _plus


@pytest.fixture
def append() -> Callable[[str, Any], str]:
    """String concatenation step (not commutative)."""
    return _append
