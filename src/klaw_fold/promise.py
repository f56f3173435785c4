"""Promise: a settleable unit with then-style continuation chaining.

A Promise wraps an asyncio.Future of the running loop. It settles at most once,
either fulfilled with a value or rejected with an exception, and lets callers
register reactions with `then()`. Reactions always run from the event loop
(`call_soon`), never synchronously inside the registering call, even when the
promise has already settled.

Example:
    ```python
    from klaw_fold import Deferred, resolve

    async def main():
        deferred = Deferred()
        doubled = deferred.promise.then(lambda x: x * 2)
        deferred.resolve(21)
        assert await doubled == 42

        assert await resolve(1).then(lambda x: resolve(x + 1)) == 2
    ```
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Callable, Generator
from functools import partial
from typing import Any

import anyio

from klaw_fold.errors import AlreadySettled, FoldTimeoutError
from klaw_fold.result import Err, Ok, Result

__all__ = ['Deferred', 'Promise', 'is_awaitable', 'reject', 'resolve']


def is_awaitable(value: Any) -> bool:
    """Return True if value is something resolve() would wait on."""
    return isinstance(value, Promise) or asyncio.isfuture(value) or inspect.isawaitable(value)


def _failure_of(future: asyncio.Future[Any]) -> BaseException | None:
    """Return the exception a settled future failed with, or None.

    Reading the exception marks it as retrieved, so asyncio does not report
    it as never consumed.
    """
    if future.cancelled():
        return asyncio.CancelledError()
    return future.exception()


def _fail(target: asyncio.Future[Any], error: BaseException) -> None:
    if target.done():
        return
    if isinstance(error, asyncio.CancelledError):
        target.cancel()
    else:
        target.set_exception(error)


def _copy_outcome(target: asyncio.Future[Any], source: asyncio.Future[Any]) -> None:
    if target.done():
        # still consume the outcome so it is not reported as unretrieved
        _failure_of(source)
        return
    error = _failure_of(source)
    if error is None:
        target.set_result(source.result())
    else:
        _fail(target, error)


def _adopt(target: asyncio.Future[Any], value: Any) -> None:
    """Settle target with value, following it first if it is awaitable."""
    if target.done():
        return
    if not is_awaitable(value):
        target.set_result(value)
        return
    source = resolve(value)._future
    if source is target:
        target.set_exception(TypeError('A promise cannot be resolved with itself'))
        return
    source.add_done_callback(partial(_copy_outcome, target))


class Promise[T]:
    """Awaitable, settle-once result of an asynchronous operation.

    Promises are created by `resolve()`, `reject()`, `Deferred`, or by chaining
    with `then()`. Awaiting a promise returns its value or raises its error.

    Note:
        Promises belong to the event loop that was running when they were
        created and must be used from that loop.
    """

    __slots__ = ('_future',)

    def __init__(self, future: asyncio.Future[T]) -> None:
        """Wrap an existing future.

        Args:
            future: The future whose settlement this promise reports.
        """
        self._future = future

    def __await__(self) -> Generator[Any, Any, T]:
        return self._future.__await__()

    def __repr__(self) -> str:
        if self.is_pending():
            return '<Promise pending>'
        error = _failure_of(self._future)
        if error is None:
            return f'<Promise fulfilled {self._future.result()!r}>'
        return f'<Promise rejected {error!r}>'

    def is_pending(self) -> bool:
        """Return True until the promise settles."""
        return not self._future.done()

    def is_fulfilled(self) -> bool:
        """Return True if the promise settled with a value."""
        return self._future.done() and _failure_of(self._future) is None

    def is_rejected(self) -> bool:
        """Return True if the promise settled with an error."""
        return self._future.done() and _failure_of(self._future) is not None

    def then[U](
        self,
        on_fulfilled: Callable[[T], Any] | None = None,
        on_rejected: Callable[[BaseException], Any] | None = None,
    ) -> Promise[U]:
        """Register reactions to settlement and return the chained promise.

        The chained promise settles with whatever the invoked handler returns
        (awaiting it first if it is awaitable), or is rejected with the
        exception the handler raises. A missing handler passes the outcome
        through unchanged.

        Args:
            on_fulfilled: Called with the value when this promise fulfils.
            on_rejected: Called with the error when this promise rejects.

        Returns:
            A new promise for the handler's outcome.

        Example:
            ```python
            async def example():
                p = reject(ValueError("boom")).then(None, lambda e: str(e))
                assert await p == "boom"
            ```
        """
        chained: asyncio.Future[U] = self._future.get_loop().create_future()

        def react(source: asyncio.Future[T]) -> None:
            if chained.done():
                _failure_of(source)
                return
            error = _failure_of(source)
            if error is None:
                if on_fulfilled is None:
                    chained.set_result(source.result())  # type: ignore[arg-type]
                    return
                handler: Callable[[Any], Any] = on_fulfilled
                argument: Any = source.result()
            else:
                if on_rejected is None:
                    _fail(chained, error)
                    return
                handler, argument = on_rejected, error
            try:
                outcome = handler(argument)
            except (Exception, asyncio.CancelledError) as exc:
                _fail(chained, exc)
                return
            _adopt(chained, outcome)

        self._future.add_done_callback(react)
        return Promise(chained)

    def catch[U](self, on_rejected: Callable[[BaseException], Any]) -> Promise[T | U]:
        """Shorthand for ``then(None, on_rejected)``."""
        return self.then(None, on_rejected)

    async def settled(self) -> Result[T, BaseException]:
        """Wait for settlement without raising.

        Returns:
            Ok(value) if the promise fulfilled, Err(exception) if it rejected.
        """
        await asyncio.wait((self._future,))
        error = _failure_of(self._future)
        if error is None:
            return Ok(self._future.result())
        return Err(error)

    async def wait(self, timeout: float | None = None) -> T:
        """Await the promise, giving up after `timeout` seconds.

        Timing out does not cancel the promise; it keeps running and can be
        awaited again.

        Args:
            timeout: Seconds to wait. None waits indefinitely.

        Returns:
            The fulfilled value.

        Raises:
            FoldTimeoutError: If the promise did not settle in time.
        """
        if timeout is None:
            return await self
        with anyio.move_on_after(timeout):
            return await asyncio.shield(self._future)
        raise FoldTimeoutError(timeout)


def resolve[T](value: T | Promise[T] | Any = None) -> Promise[T]:
    """Normalize a maybe-asynchronous value into a Promise.

    - a Promise is returned unchanged;
    - an asyncio Future or Task is adopted;
    - a coroutine or other awaitable is scheduled as a task and adopted;
    - anything else becomes an already fulfilled promise.

    Must be called while an event loop is running.

    Example:
        ```python
        async def example():
            assert await resolve(1) == 1
            assert await resolve(asyncio.sleep(0, result=2)) == 2
        ```
    """
    if isinstance(value, Promise):
        return value
    if asyncio.isfuture(value) or inspect.isawaitable(value):
        return Promise(asyncio.ensure_future(value))
    future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
    future.set_result(value)  # type: ignore[arg-type]
    return Promise(future)


def reject(error: BaseException) -> Promise[Any]:
    """Create an already rejected promise.

    Args:
        error: The exception to reject with.

    Raises:
        TypeError: If error is not an exception instance.
    """
    if not isinstance(error, BaseException):
        msg = f'Promises can only be rejected with exceptions, got {type(error).__name__}'
        raise TypeError(msg)
    future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
    _fail(future, error)
    return Promise(future)


class Deferred[T]:
    """Producer side of a Promise: create it pending, settle it later.

    Can only be settled once. After resolve() or reject(), subsequent calls
    raise AlreadySettledError; the try_* variants return Err(AlreadySettled)
    instead. Resolving with an awaitable locks the deferred to that awaitable's
    eventual outcome.

    Example:
        ```python
        async def example():
            deferred = Deferred()
            deferred.resolve(42)
            assert await deferred.promise == 42
        ```
    """

    __slots__ = ('_future', '_promise', '_settled')

    def __init__(self) -> None:
        self._future: asyncio.Future[T] = asyncio.get_running_loop().create_future()
        self._promise: Promise[T] = Promise(self._future)
        self._settled = False

    @property
    def promise(self) -> Promise[T]:
        """The promise this deferred settles."""
        return self._promise

    def resolve(self, value: T | Any = None) -> None:
        """Fulfil the promise with value (or adopt value if awaitable).

        Raises:
            AlreadySettledError: If the deferred was already settled.
        """
        if self._settled:
            raise AlreadySettled().to_exception()
        self._settled = True
        _adopt(self._future, value)

    def reject(self, error: BaseException) -> None:
        """Reject the promise with error.

        Raises:
            AlreadySettledError: If the deferred was already settled.
            TypeError: If error is not an exception instance.
        """
        if not isinstance(error, BaseException):
            msg = f'Promises can only be rejected with exceptions, got {type(error).__name__}'
            raise TypeError(msg)
        if self._settled:
            raise AlreadySettled().to_exception()
        self._settled = True
        _fail(self._future, error)

    def try_resolve(self, value: T | Any = None) -> Result[None, AlreadySettled]:
        """Fulfil the promise without raising.

        Returns:
            Ok(None) if settled now, Err(AlreadySettled) if already settled.
        """
        if self._settled:
            return Err(AlreadySettled())
        self.resolve(value)
        return Ok(None)

    def try_reject(self, error: BaseException) -> Result[None, AlreadySettled]:
        """Reject the promise without raising.

        Returns:
            Ok(None) if settled now, Err(AlreadySettled) if already settled.
        """
        if self._settled:
            return Err(AlreadySettled())
        self.reject(error)
        return Ok(None)
