"""Finding natural runs, and extending short ones to the minimum run length."""

from collections.abc import Callable, MutableSequence
from typing import Any, Optional, TypeVar

T = TypeVar("T")

LessThan = Callable[[Any, Any], bool]

# runs shorter than min_run_length(n) are padded out with insertion sort, and
# min_run_length never returns more than this.
MIN_MERGE = 32


def min_run_length(n: int) -> int:
    """
    Return the minimum run length for a sequence of length ``n``.

    If ``n < MIN_MERGE`` this is ``n`` itself: the whole sequence is handled by a
    single insertion sort. Otherwise the result is in ``[MIN_MERGE // 2,
    MIN_MERGE]`` and chosen so that ``n / min_run`` is close to, but not above,
    a power of two, which keeps the final merges balanced.
    """
    if n < 0:
        raise ValueError(f"n={n} must be non-negative")
    r = 0  # becomes 1 if any 1 bits are shifted off
    while n >= MIN_MERGE:
        r |= n & 1
        n >>= 1
    return n + r


def reverse_range(seq: MutableSequence[T], lo: int, hi: int) -> None:
    """Reverse ``seq[lo:hi]`` in place."""
    hi -= 1
    while lo < hi:
        seq[lo], seq[hi] = seq[hi], seq[lo]
        lo += 1
        hi -= 1


def count_run(
    seq: MutableSequence[T], start: int, end: int, less: LessThan
) -> tuple[int, bool]:
    """
    Return ``(length, descending)`` for the run beginning at ``start``.

    A run is either non-decreasing (``a0 <= a1 <= a2 ...``) or strictly
    decreasing (``a0 > a1 > a2 ...``). The strictness of the descending case
    is what makes reversing it safe for stability: no two equal elements can
    be swapped past each other.
    """
    assert 0 <= start < end <= len(seq)
    run_hi = start + 1
    if run_hi == end:
        return 1, False

    if less(seq[run_hi], seq[start]):
        run_hi += 1
        while run_hi < end and less(seq[run_hi], seq[run_hi - 1]):
            run_hi += 1
        return run_hi - start, True

    run_hi += 1
    while run_hi < end and not less(seq[run_hi], seq[run_hi - 1]):
        run_hi += 1
    return run_hi - start, False


def count_run_and_make_ascending(
    seq: MutableSequence[T], start: int, end: int, less: LessThan
) -> tuple[int, bool]:
    """
    Like |count_run|, but reverses a descending run in place so that it is
    ascending. Returns ``(length, was_descending)``.
    """
    length, descending = count_run(seq, start, end, less)
    if descending:
        reverse_range(seq, start, start + length)
    return length, descending


def upper_bound(seq: MutableSequence[T], lo: int, hi: int, x: T, less: LessThan) -> int:
    # like bisect.bisect_right, but driven by an arbitrary `less` predicate:
    # returns the first position in seq[lo:hi] whose element is greater than x,
    # so x lands after anything it compares equal to.
    while lo < hi:
        mid = (lo + hi) // 2
        if less(x, seq[mid]):
            hi = mid
        else:
            lo = mid + 1
    return lo


def binary_insertion_sort(
    seq: MutableSequence[T],
    lo: int,
    hi: int,
    less: LessThan,
    start: Optional[int] = None,
) -> None:
    """
    Stable binary insertion sort of ``seq[lo:hi]``.

    ``seq[lo:start]`` must already be sorted; if ``start`` is omitted only the
    first element is assumed to be. Each later element is inserted after any
    equal elements already placed, so the sort is stable.
    """
    if start is None:
        start = min(lo + 1, hi)
    assert lo <= start <= hi <= len(seq)
    if start == lo:
        start += 1

    for i in range(start, hi):
        pivot = seq[i]
        pos = upper_bound(seq, lo, i, pivot, less)
        if pos == i:
            continue
        # shift seq[pos:i] right by one to make room
        for j in range(i, pos, -1):
            seq[j] = seq[j - 1]
        seq[pos] = pivot


def extend_run(
    seq: MutableSequence[T],
    start: int,
    run_length: int,
    end: int,
    min_run: int,
    less: LessThan,
) -> int:
    """
    Grow the run at ``start`` to ``min(min_run, end - start)`` elements if it is
    shorter than ``min_run``, and return the new run length.
    """
    if run_length >= min_run:
        return run_length
    force = min(min_run, end - start)
    binary_insertion_sort(seq, start, start + force, less, start=start + run_length)
    return force
