"""Fixed-size batching for bulk submission.

This module groups an ordered stream into bounded tuples. Input is
consumed lazily so line-oriented sources are only read one window
ahead of the batch being submitted.
"""

from __future__ import annotations

from itertools import islice
from typing import Iterable, Iterator, TypeVar

from core.errors import ImportConfigError

ItemT = TypeVar("ItemT")


def iter_batches(items: Iterable[ItemT], batch_size: int) -> Iterator[tuple[ItemT, ...]]:
    """Split items into ordered batches of ``batch_size``.

    Args:
        items: Ordered items to group.
        batch_size: Maximum batch length.

    Returns:
        Lazy iterator of non-empty batches; only the last may be short.

    Raises:
        ImportConfigError: If batch size is not a positive integer. Raised
            on call, before any item is consumed.
    """
    validate_batch_size(batch_size)
    return _generate_batches(iter(items), batch_size)


def validate_batch_size(batch_size: object) -> int:
    """Return a validated batch size.

    Raises:
        ImportConfigError: If value is not a positive integer.
    """
    if isinstance(batch_size, bool) or not isinstance(batch_size, int):
        raise ImportConfigError(
            f"Invalid bulk size {batch_size!r}: expected a positive integer. "
            "Set --bulk-size to a number such as 1000."
        )
    if batch_size <= 0:
        raise ImportConfigError(
            f"Invalid bulk size {batch_size}: expected a positive integer. "
            "Set --bulk-size to a number such as 1000."
        )
    return batch_size


def _generate_batches(iterator: Iterator[ItemT], batch_size: int) -> Iterator[tuple[ItemT, ...]]:
    while True:
        batch = tuple(islice(iterator, batch_size))
        if not batch:
            return
        yield batch
