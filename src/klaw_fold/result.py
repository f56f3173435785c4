"""Rust-like Result for the non-raising fold APIs.

`Promise.settled()`, `Deferred.try_resolve()` and `try_reduce()` report their
outcome as a Result instead of raising. The error side holds either an
exception or one of the struct variants from `klaw_fold.errors`.

Example:
    ```python
    from klaw_fold import Ok, Err, resolve

    async def main():
        outcome = await resolve(42).settled()
        match outcome:
            case Ok(value):
                print(value)  # 42
            case Err(error):
                print(error)
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = ['Err', 'Ok', 'Result']


@dataclass(slots=True, frozen=True)
class Ok[T]:
    """Successful outcome containing a value of type T.

    Attributes:
        value: The successful result value.
    """

    value: T
    __match_args__ = ('value',)

    def is_ok(self) -> bool:
        """Return True, indicating this is a successful result."""
        return True

    def is_err(self) -> bool:
        """Return False, indicating this is not an error result."""
        return False

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        """Transform the value using a function.

        Args:
            f: A callable that takes the value and returns a new value of type U.

        Returns:
            Ok[U]: A new Ok containing the transformed value.
        """
        return Ok(f(self.value))

    def map_err(self, f: Callable[[Any], Any]) -> Ok[T]:
        """Transform the error (no-op for Ok)."""
        return self

    def and_then[U, E](self, f: Callable[[T], Ok[U] | Err[E]]) -> Ok[U] | Err[E]:
        """Chain a computation that may fail.

        Args:
            f: A callable that takes the value and returns a Result.

        Returns:
            The result of applying f to the value.
        """
        return f(self.value)

    def unwrap(self) -> T:
        """Unwrap the value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Unwrap the value; the default is unused for Ok."""
        return self.value

    def unwrap_err(self) -> Any:
        """Unwrap the error (panics for Ok).

        Raises:
            AssertionError: Always raised for Ok instances.
        """
        raise AssertionError(f'called unwrap_err() on Ok({self.value!r})')

    def __repr__(self) -> str:
        return f'Ok({self.value!r})'


@dataclass(slots=True, frozen=True)
class Err[E]:
    """Failed outcome containing an error of type E.

    The error is either an exception or a struct with a ``to_exception()``
    method (see `klaw_fold.errors`).

    Attributes:
        error: The error that occurred.
    """

    error: E
    __match_args__ = ('error',)

    def is_ok(self) -> bool:
        """Return False, indicating this is not a successful result."""
        return False

    def is_err(self) -> bool:
        """Return True, indicating this is an error result."""
        return True

    def map(self, f: Callable[[Any], Any]) -> Err[E]:
        """Transform the value (no-op for Err)."""
        return self

    def map_err[F](self, f: Callable[[E], F]) -> Err[F]:
        """Transform the error using a function.

        Args:
            f: A callable that takes the error and returns a new error.

        Returns:
            Err[F]: A new Err containing the transformed error.
        """
        return Err(f(self.error))

    def and_then(self, f: Callable[[Any], Any]) -> Err[E]:
        """Chain a computation (short-circuits for Err)."""
        return self

    def unwrap(self) -> Any:
        """Unwrap the value (raises for Err).

        Raises:
            BaseException: The contained exception, or the exception variant
                of the contained error struct.
        """
        error: Any = self.error
        if isinstance(error, BaseException):
            raise error
        to_exception = getattr(error, 'to_exception', None)
        if to_exception is not None:
            raise to_exception()
        raise AssertionError(f'called unwrap() on Err({error!r})')

    def unwrap_or(self, default: Any) -> Any:
        """Return the default, since there is no value."""
        return default

    def unwrap_err(self) -> E:
        """Unwrap the error."""
        return self.error

    def __repr__(self) -> str:
        return f'Err({self.error!r})'


type Result[T, E] = Ok[T] | Err[E]
