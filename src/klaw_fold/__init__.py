"""klaw-fold: asynchronous reduce over maybe-asynchronous collections.

Flat imports (preferred):
    from klaw_fold import reduce, try_reduce, resolve, reject, Deferred, Promise
    from klaw_fold import Ok, Err, Result

Submodule imports (for organization):
    from klaw_fold.fold import reduce, try_reduce, NO_SEED
    from klaw_fold.promise import Promise, Deferred
    from klaw_fold.errors import ElementFailed, StepFailed
"""

# Config
from klaw_fold._config import FoldConfig, get_config, init

# Errors
from klaw_fold.errors import (
    AlreadySettled,
    AlreadySettledError,
    ElementError,
    ElementFailed,
    FoldError,
    FoldTimeout,
    FoldTimeoutError,
    ReduceFailure,
    SeedError,
    SeedFailed,
    SourceFailed,
    SourceResolutionError,
    StepError,
    StepFailed,
)

# Fold
from klaw_fold.fold import NO_SEED, reduce, try_reduce

# Promise
from klaw_fold.promise import Deferred, Promise, is_awaitable, reject, resolve

# Result types
from klaw_fold.result import Err, Ok, Result

__all__ = [
    'NO_SEED',
    'AlreadySettled',
    'AlreadySettledError',
    'Deferred',
    'ElementError',
    'ElementFailed',
    'Err',
    'FoldConfig',
    'FoldError',
    'FoldTimeout',
    'FoldTimeoutError',
    'Ok',
    'Promise',
    'ReduceFailure',
    'Result',
    'SeedError',
    'SeedFailed',
    'SourceFailed',
    'SourceResolutionError',
    'StepError',
    'StepFailed',
    'get_config',
    'init',
    'is_awaitable',
    'reduce',
    'reject',
    'resolve',
    'try_reduce',
]

__version__ = '0.1.0'
