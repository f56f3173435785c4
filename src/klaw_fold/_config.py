"""Fold configuration: FoldConfig, initialization, and environment detection."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from klaw_fold._logging import configure_logging

__all__ = [
    'FoldConfig',
    'get_config',
    'init',
    'reset',
]

_TRUTHY = frozenset({'1', 'true', 'yes', 'on'})


@dataclass(frozen=True)
class FoldConfig:
    """Configuration for klaw-fold.

    Attributes:
        log_level: Logging level (e.g., "DEBUG", "INFO"). None = silent.
        json_output: Render logs as JSON (True) or colored console output.
        trace_steps: Emit a debug event for every step invocation.
    """

    log_level: str | None = None
    json_output: bool = True
    trace_steps: bool = False


# Global configuration (set by init())
_config: FoldConfig | None = None


def _detect_log_level() -> str | None:
    """Read KLAW_FOLD_LOG_LEVEL; empty or unset means silent."""
    level = os.environ.get('KLAW_FOLD_LOG_LEVEL', '').strip().upper()
    return level or None


def _detect_json_output() -> bool:
    """Read KLAW_FOLD_LOG_FORMAT ("json" or "console"), defaulting to json."""
    fmt = os.environ.get('KLAW_FOLD_LOG_FORMAT', '').strip().lower()
    if fmt == 'console':
        return False
    if fmt and fmt != 'json':
        logging.warning("Unknown KLAW_FOLD_LOG_FORMAT value '%s', defaulting to json", fmt)
    return True


def _detect_trace_steps() -> bool:
    """Read KLAW_FOLD_TRACE as a boolean flag."""
    return os.environ.get('KLAW_FOLD_TRACE', '').strip().lower() in _TRUTHY


def _detect_config() -> FoldConfig:
    return FoldConfig(
        log_level=_detect_log_level(),
        json_output=_detect_json_output(),
        trace_steps=_detect_trace_steps(),
    )


def init(
    log_level: str | None = None,
    *,
    json_output: bool | None = None,
    trace_steps: bool | None = None,
) -> FoldConfig:
    """Initialize klaw-fold with the given configuration.

    Arguments left as None are detected from the environment.

    Args:
        log_level: Logging level ("DEBUG", "INFO", etc.). None = silent.
        json_output: Emit JSON logs (True) or console logs (False).
        trace_steps: Log every step invocation at debug level.

    Returns:
        The FoldConfig that was set.

    Example:
        ```python
        from klaw_fold import init

        init(log_level="DEBUG", trace_steps=True)
        ```
    """
    global _config  # noqa: PLW0603

    _config = FoldConfig(
        log_level=log_level if log_level is not None else _detect_log_level(),
        json_output=json_output if json_output is not None else _detect_json_output(),
        trace_steps=trace_steps if trace_steps is not None else _detect_trace_steps(),
    )

    if _config.log_level is not None:
        configure_logging(_config.log_level, json_output=_config.json_output)

    return _config


def get_config() -> FoldConfig:
    """Get the current configuration.

    Returns the config set by init(). When init() has not been called yet,
    the config is detected from the environment and kept, but logging is left
    as the application configured it: only init() installs a log handler.

    Example:
        ```python
        from klaw_fold import init, get_config

        init(log_level="INFO")
        print(get_config().log_level)  # INFO
        ```
    """
    global _config  # noqa: PLW0603
    if _config is None:
        _config = _detect_config()
    return _config


def reset() -> None:
    """Forget the configuration set by init()."""
    global _config  # noqa: PLW0603
    _config = None
