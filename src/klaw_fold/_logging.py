"""Structured logging for klaw-fold.

Fold events (``reduce.failed``, ``reduce.done``, ...) are structlog events
rendered through stdlib logging by a ProcessorFormatter, so they share one
output format (JSON or console) with every other log record of the process.
Each fold binds a ``fold_id`` so the events of one reduce() call can be told
apart when several folds interleave on the loop.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, TextIO

import structlog

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    'add_log_hook',
    'clear_log_hooks',
    'configure_logging',
    'get_logger',
    'remove_log_hook',
]

_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

_log_hooks: list[Callable[[dict[str, Any]], None]] = []


def _run_log_hooks(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Processor handing a copy of every event to the registered hooks."""
    for hook in _log_hooks:
        try:
            hook(event_dict.copy())
        except Exception:
            pass  # a failing hook must not break logging
    return event_dict


def _shared_processors() -> list[Any]:
    """Processors run for both fold events and foreign stdlib records."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.stdlib.ExtraAdder(),
        _run_log_hooks,
    ]


def _level_number(level: str) -> int:
    name = level.strip().upper()
    if name not in _LEVELS:
        msg = f'Unknown log level {level!r}, expected one of {", ".join(_LEVELS)}'
        raise ValueError(msg)
    return getattr(logging, name)


def configure_logging(
    level: str = 'INFO',
    *,
    json_output: bool = True,
    stream: TextIO | None = None,
) -> None:
    """Route structlog through stdlib logging with a single root handler.

    Replaces the root logger's handlers. Fold events are emitted at debug
    level, so they only show up when `level` is "DEBUG".

    Args:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL").
        json_output: If True, emit JSON logs. If False, use console output.
        stream: Where to write; defaults to stderr.

    Raises:
        ValueError: If `level` is not a known logging level.
    """
    level_number = _level_number(level)
    stream = stream if stream is not None else sys.stderr

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *_shared_processors(),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    renderer: Any
    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_shared_processors(),
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level_number)


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Get a structlog logger with `initial_values` bound to every event."""
    return structlog.get_logger(name, **initial_values)


# --- Logging Hooks ---


def add_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Register a hook to be called for each log entry.

    Hooks receive a copy of the event dict, e.g. to count fold failures by
    ``kind``.
    """
    _log_hooks.append(hook)


def remove_log_hook(hook: Callable[[dict[str, Any]], None]) -> None:
    """Remove a previously registered log hook."""
    if hook in _log_hooks:
        _log_hooks.remove(hook)


def clear_log_hooks() -> None:
    """Remove all registered log hooks."""
    _log_hooks.clear()
