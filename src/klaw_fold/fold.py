"""Asynchronous left fold over collections of maybe-asynchronous values.

`reduce()` folds a sequence whose elements may be awaitables, where the
sequence itself and the initial accumulator may also be awaitables. The fold
is built as a chain of promises, one link per element: link ``i`` waits for
link ``i - 1``, then for element ``i``, then calls the step function and waits
for its result if that is awaitable. Steps therefore always run in index
order, whatever order the elements settle in, and the first failure in chain
order skips every later step.

Example:
    ```python
    import operator
    from klaw_fold import Deferred, reduce, resolve

    async def main():
        assert await reduce([1, resolve(2), 3], operator.add) == 6
        assert await reduce(resolve([1, 2, 3]), operator.add, 1) == 7
        assert await reduce([], operator.add) is None
    ```
"""

from __future__ import annotations

import asyncio
import inspect
import itertools
from collections.abc import Callable, Iterable, Mapping
from functools import partial
from typing import Any, Final

from klaw_fold._config import get_config
from klaw_fold._logging import get_logger
from klaw_fold.errors import (
    ElementFailed,
    ReduceFailure,
    SeedFailed,
    SourceFailed,
    StepFailed,
)
from klaw_fold.promise import Promise, is_awaitable, resolve
from klaw_fold.result import Err, Ok, Result

__all__ = ['NO_SEED', 'reduce', 'try_reduce']

_fold_ids = itertools.count(1)

_SCALARS = (str, bytes, bytearray)


class _NoSeed:
    """Marker for an omitted initial value (distinct from an explicit None)."""

    __slots__ = ()

    def __repr__(self) -> str:
        return 'NO_SEED'


NO_SEED: Final = _NoSeed()


def _normalize(value: Any) -> list[tuple[Any, Any]] | None:
    """Turn a resolved source into (index, item) pairs, or None if it is not a sequence.

    Sequences and other iterables are indexed by position. Mappings are read
    in iteration order and indexed by key, so only the entries that exist
    are folded.
    """
    if isinstance(value, _SCALARS):
        return None
    if isinstance(value, Mapping):
        return list(value.items())
    if isinstance(value, Iterable):
        return list(enumerate(value))
    return None


def _step_arity(step: Callable[..., Any]) -> int:
    """How many of (acc, value, index, total) the step accepts positionally.

    Callables without an inspectable signature (``min``, ``max`` and other
    builtins with several call forms) get the binary form.
    """
    try:
        parameters = inspect.signature(step).parameters.values()
    except (TypeError, ValueError):
        return 2
    count = 0
    for parameter in parameters:
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            return 4
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return max(2, min(count, 4))


def _discard(item: Any) -> None:
    """Stop caring about an element the fold will never reach."""
    if inspect.iscoroutine(item):
        item.close()
    elif isinstance(item, Promise):
        item.then(None, lambda _: None)
    elif asyncio.isfuture(item):
        item.add_done_callback(lambda f: f.cancelled() or f.exception())


class _Fold:
    """State for a single reduce() call.

    Holds the step, the normalized entries and the first failure. Nothing here
    outlives the call; every link of the chain closes over this object.
    Positions walk the entries in order; the index handed to the step and
    reported in failures is the entry's own index (its key for mappings).
    """

    __slots__ = ('_arity', '_logger', '_trace', 'entries', 'failure', 'initial', 'reached', 'step')

    def __init__(self, step: Callable[..., Any], initial: Any) -> None:
        config = get_config()
        self.step = step
        self.initial = initial
        self.entries: list[tuple[Any, Any]] = []
        self.reached = -1
        self.failure: ReduceFailure | None = None
        self._arity = _step_arity(step)
        self._logger = get_logger(__name__, fold_id=next(_fold_ids)) if config.log_level is not None else None
        self._trace = self._logger is not None and config.trace_steps

    @property
    def seeded(self) -> bool:
        return self.initial is not NO_SEED

    def run(self, source: Any) -> Any:
        try:
            entries = _normalize(source)
        except (Exception, asyncio.CancelledError) as exc:
            self._record(SourceFailed(exc))
            raise

        if entries is None:
            if self._logger is not None:
                self._logger.debug('reduce.skipped', source_type=type(source).__name__)
            return self._seed() if self.seeded else None

        self.entries = entries
        carry: Promise[Any] | None = self._seed() if self.seeded else None
        for position in range(len(entries)):
            if carry is None:
                carry = self._element(position)
            else:
                carry = carry.then(partial(self._link, position))

        if carry is None:
            return None
        return carry.then(self._done)

    def _seed(self) -> Promise[Any]:
        return resolve(self.initial).then(None, self._seed_failed)

    def _element(self, position: int) -> Promise[Any]:
        self.reached = position
        index, item = self.entries[position]
        return resolve(item).then(None, partial(self._element_failed, index))

    def _link(self, position: int, acc: Any) -> Promise[Any]:
        return self._element(position).then(partial(self._apply, self.entries[position][0], acc))

    def _apply(self, index: Any, acc: Any, value: Any) -> Any:
        if self._trace:
            self._logger.debug('reduce.step', index=index)
        args = (acc, value, index, len(self.entries))
        try:
            outcome = self.step(*args[: self._arity])
        except (Exception, asyncio.CancelledError) as exc:
            self._record(StepFailed(index, exc))
            raise
        if is_awaitable(outcome):
            return resolve(outcome).then(None, partial(self._step_failed, index))
        return outcome

    def _done(self, value: Any) -> Any:
        if self._logger is not None:
            self._logger.debug('reduce.done', items=len(self.entries))
        return value

    # --- failure recording ---

    def source_failed(self, error: BaseException) -> Any:
        self._record(SourceFailed(error))
        raise error

    def _seed_failed(self, error: BaseException) -> Any:
        self._record(SeedFailed(error))
        raise error

    def _element_failed(self, index: Any, error: BaseException) -> Any:
        self._record(ElementFailed(index, error))
        raise error

    def _step_failed(self, index: Any, error: BaseException) -> Any:
        self._record(StepFailed(index, error))
        raise error

    def _record(self, failure: ReduceFailure) -> None:
        if self.failure is not None:
            return
        self.failure = failure
        if self._logger is not None:
            self._logger.debug(
                'reduce.failed',
                kind=failure.kind,
                index=failure.index,
                error=repr(failure.cause),
            )
        for _, item in self.entries[self.reached + 1 :]:
            _discard(item)

    def report(self, error: BaseException) -> Err[ReduceFailure]:
        """Turn the recorded failure into an Err; anything unrecorded propagates."""
        if self.failure is None:
            raise error
        return Err(self.failure)


def reduce[A](
    source: Any,
    step: Callable[..., Any],
    initial: Any = NO_SEED,
) -> Promise[A | None]:
    """Fold a maybe-asynchronous sequence of maybe-asynchronous values.

    Must be called while an event loop is running. Returns at once; the
    returned promise settles when the fold completes.

    Args:
        source: A sequence (list, tuple, generator, mapping, ...)
            of items, or an awaitable resolving to one. Items may be plain
            values or awaitables. If the resolved source is not a sequence
            (including str and bytes), the fold is skipped.
        step: Called as ``step(acc, value, index, total)``, where ``index`` is
            the position, or the key for mappings. Only as many arguments as
            it accepts are passed (at least ``acc`` and ``value``). May return
            an awaitable.
        initial: Initial accumulator, plain or awaitable. When omitted, the
            first element is the initial accumulator and is not stepped.

    Returns:
        A promise for the final accumulator; the resolved `initial` when the
        sequence is empty or not a sequence; None when it is empty and no
        `initial` was given. It is rejected with the first failure in index
        order: the source's, the initial value's, an element's, or the
        step's, unchanged.

    Example:
        ```python
        async def example():
            concat = lambda acc, value: acc + str(value)
            assert await reduce([resolve(1), 2, 3], concat, "") == "123"
        ```
    """
    fold = _Fold(step, initial)
    return resolve(source).then(fold.run, fold.source_failed)


def try_reduce[A](
    source: Any,
    step: Callable[..., Any],
    initial: Any = NO_SEED,
) -> Promise[Result[A | None, ReduceFailure]]:
    """Like reduce(), but the promise always fulfils with a Result.

    Returns:
        A promise for Ok(final accumulator), or Err with a struct from
        `klaw_fold.errors` naming the kind of failure, the failing index
        where there is one, and the original exception.

    Example:
        ```python
        async def example():
            outcome = await try_reduce([1, reject(KeyError("x"))], operator.add)
            assert isinstance(outcome.unwrap_err(), ElementFailed)
        ```
    """
    fold = _Fold(step, initial)
    return resolve(source).then(fold.run, fold.source_failed).then(Ok, fold.report)
