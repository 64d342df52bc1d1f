"""
Sequence helpers.
"""
from typing import List, Sequence, TypeVar

T = TypeVar('T')


def vec_extract_every_nth_elm(data: Sequence[T], nth: int) -> List[T]:
    """
    Keep only every n'th element of a sequence.

    Indices 0, nth, 2*nth, ... are taken while the index is below
    ``len(data) - nth``, so the last ``nth`` elements are never included.

    Args:
        data: Sequence with a number of entries
        nth: Defines the reduction of entries to only every n'th

    Returns:
        List with reduced entries
    """
    if nth < 1:
        raise ValueError(f"nth must be at least 1, got {nth}")

    # TODO: decide whether the last nth-wide window should contribute a sample;
    # callers currently rely on it being skipped
    return [data[k] for k in range(0, len(data) - nth, nth)]
