"""Hypothesis strategies and awaitable helpers for klaw-fold tests."""

import asyncio
from typing import Any

from hypothesis import strategies as st

# -----------------------------------------------------------------------------
# Basic value strategies
# -----------------------------------------------------------------------------

integers = st.integers(min_value=-1000, max_value=1000)
texts = st.text(alphabet='abcxyz', min_size=0, max_size=3)

# Exception strategies
exceptions = st.sampled_from([
    ValueError('test'),
    TypeError('test'),
    RuntimeError('test'),
])

# -----------------------------------------------------------------------------
# Fold input strategies
# -----------------------------------------------------------------------------

# (value, deliver_async) pairs: the flag decides whether the item is passed
# as a plain value or as a promise
int_items = st.lists(st.tuples(integers, st.booleans()), max_size=12)
text_items = st.lists(st.tuples(texts, st.booleans()), max_size=12)

# per-item delays, to shuffle real-time settlement order
delays = st.lists(st.sampled_from([0.0, 0.001, 0.002]), min_size=12, max_size=12)


# -----------------------------------------------------------------------------
# Awaitable helpers
# -----------------------------------------------------------------------------


async def delayed[T](value: T, delay: float = 0.0) -> T:
    """Coroutine that produces value after delay seconds."""
    await asyncio.sleep(delay)
    return value


async def failing(error: BaseException, delay: float = 0.0) -> Any:
    """Coroutine that raises error after delay seconds."""
    await asyncio.sleep(delay)
    raise error
