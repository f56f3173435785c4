"""Fold error types: dual struct+exception for Result and raise-based code.

`reduce()` always fails with the original exception. The struct variants
describe *where* that exception came from and are what `try_reduce()` reports;
the exception variants chain the original cause for raise-based callers.
"""

from __future__ import annotations

from collections.abc import Hashable

import msgspec

__all__ = [
    'AlreadySettled',
    'AlreadySettledError',
    'ElementError',
    'ElementFailed',
    'FoldError',
    'FoldTimeout',
    'FoldTimeoutError',
    'ReduceFailure',
    'SeedError',
    'SeedFailed',
    'SourceFailed',
    'SourceResolutionError',
    'StepError',
    'StepFailed',
]


class FoldError(Exception):
    """Base class for fold failure exceptions."""

    kind: str = 'fold'

    def __init__(self, message: str, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(message)
        self.__cause__ = cause


# --- Fold failures ---


class SourceFailed(msgspec.Struct, frozen=True):
    """The input source failed before producing a sequence."""

    cause: BaseException

    kind = 'source'
    index = None

    def to_exception(self) -> SourceResolutionError:
        """Convert to exception for raise-based code."""
        return SourceResolutionError(self.cause)


class SourceResolutionError(FoldError):
    """The input source failed before producing a sequence - exception variant."""

    kind = 'source'

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f'Source failed to resolve: {cause!r}', cause)

    def to_struct(self) -> SourceFailed:
        """Convert to struct for Result-based code."""
        return SourceFailed(self.cause)


class SeedFailed(msgspec.Struct, frozen=True):
    """The initial accumulator failed to resolve."""

    cause: BaseException

    kind = 'seed'
    index = None

    def to_exception(self) -> SeedError:
        """Convert to exception for raise-based code."""
        return SeedError(self.cause)


class SeedError(FoldError):
    """The initial accumulator failed to resolve - exception variant."""

    kind = 'seed'

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f'Initial value failed to resolve: {cause!r}', cause)

    def to_struct(self) -> SeedFailed:
        """Convert to struct for Result-based code."""
        return SeedFailed(self.cause)


class ElementFailed(msgspec.Struct, frozen=True):
    """An element's awaitable failed before contributing to the fold.

    `index` is the element's position, or its key when the source is a mapping.
    """

    index: Hashable
    cause: BaseException

    kind = 'element'

    def to_exception(self) -> ElementError:
        """Convert to exception for raise-based code."""
        return ElementError(self.index, self.cause)


class ElementError(FoldError):
    """An element's awaitable failed - exception variant."""

    kind = 'element'

    def __init__(self, index: Hashable, cause: BaseException) -> None:
        self.index = index
        super().__init__(f'Element {index} failed: {cause!r}', cause)

    def to_struct(self) -> ElementFailed:
        """Convert to struct for Result-based code."""
        return ElementFailed(self.index, self.cause)


class StepFailed(msgspec.Struct, frozen=True):
    """The step function raised, or returned an awaitable that failed."""

    index: Hashable
    cause: BaseException

    kind = 'step'

    def to_exception(self) -> StepError:
        """Convert to exception for raise-based code."""
        return StepError(self.index, self.cause)


class StepError(FoldError):
    """The step function failed - exception variant."""

    kind = 'step'

    def __init__(self, index: Hashable, cause: BaseException) -> None:
        self.index = index
        super().__init__(f'Step {index} failed: {cause!r}', cause)

    def to_struct(self) -> StepFailed:
        """Convert to struct for Result-based code."""
        return StepFailed(self.index, self.cause)


type ReduceFailure = SourceFailed | SeedFailed | ElementFailed | StepFailed


# --- Promise errors ---


class AlreadySettled(msgspec.Struct, frozen=True, gc=False):
    """Deferred was already resolved or rejected - struct variant."""

    def to_exception(self) -> AlreadySettledError:
        """Convert to exception for raise-based code."""
        return AlreadySettledError()


class AlreadySettledError(Exception):
    """Deferred was already resolved or rejected - exception variant."""

    def __init__(self) -> None:
        super().__init__('Deferred already settled')

    def to_struct(self) -> AlreadySettled:
        """Convert to struct for Result-based code."""
        return AlreadySettled()


class FoldTimeout(msgspec.Struct, frozen=True, gc=False):
    """Waiting on a promise timed out - struct variant."""

    seconds: float

    def to_exception(self) -> FoldTimeoutError:
        """Convert to exception for raise-based code."""
        return FoldTimeoutError(self.seconds)


class FoldTimeoutError(TimeoutError):
    """Waiting on a promise timed out - exception variant."""

    def __init__(self, seconds: float) -> None:
        self.seconds = seconds
        super().__init__(f'Promise did not settle within {seconds}s')

    def to_struct(self) -> FoldTimeout:
        """Convert to struct for Result-based code."""
        return FoldTimeout(self.seconds)
