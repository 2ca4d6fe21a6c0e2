"""The sort driver: split the input into runs, and merge them."""

import logging
import operator
from collections.abc import Callable, Iterable, Mapping, MutableSequence
from typing import Any, Optional, TypeVar

from pytimsort.config import debug_checks_enabled
from pytimsort.merge import MergeBuffer
from pytimsort.runs import (
    LessThan,
    count_run_and_make_ascending,
    extend_run,
    min_run_length,
    reverse_range,
)
from pytimsort.stack import Run, RunStack
from pytimsort.stats import CountingLess, SortStats

logger = logging.getLogger(__name__)

T = TypeVar("T")


class InvalidOrderingError(ValueError):
    """Raised in debug mode when ``less`` is not a strict weak ordering."""


def sort(
    seq: MutableSequence[T],
    less: LessThan = operator.lt,
    *,
    key: Optional[Callable[[T], Any]] = None,
    reverse: bool = False,
    stats: Optional[SortStats] = None,
    debug: Optional[bool] = None,
) -> None:
    """
    Sort ``seq`` in place, so that ``less(seq[i + 1], seq[i])`` is false for
    every ``i``. The sort is stable: elements which compare equal keep their
    relative order.

    ``less`` must be a strict weak ordering, and defaults to ``<``. ``key`` and
    ``reverse`` behave as for :meth:`list.sort`, and ``key`` is called exactly
    once per element. Pass a |SortStats| as ``stats`` to record what the sort
    did.

    With ``debug=True`` (or ``PYTIMSORT_DEBUG=1`` in the environment) the sort
    checks that no element is less than itself, and that the result is
    ordered, raising |InvalidOrderingError| otherwise.
    """
    if isinstance(seq, Mapping) or not (
        hasattr(seq, "__setitem__") and hasattr(seq, "__len__")
    ):
        raise TypeError(
            f"can only sort a mutable sequence in place, not {type(seq).__name__}"
        )
    debug = debug_checks_enabled(debug)
    if stats is not None:
        stats.reset()
        stats.length = len(seq)

    if key is None:
        _sort(seq, less, reverse=reverse, stats=stats, debug=debug)
        return

    # decorate with the keys, sort the pairs, and write the values back.
    decorated = [(key(value), value) for value in seq]
    _sort(
        decorated,
        lambda a, b: less(a[0], b[0]),
        reverse=reverse,
        stats=stats,
        debug=debug,
    )
    for i, (_, value) in enumerate(decorated):
        seq[i] = value


def _sort(
    seq: MutableSequence[T],
    less: LessThan,
    *,
    reverse: bool,
    stats: Optional[SortStats],
    debug: bool,
) -> None:
    n = len(seq)
    if n < 2:
        return

    if reverse:
        # reversing before and after the sort keeps equal elements in their
        # original order, which sorting with a flipped predicate would not.
        reverse_range(seq, 0, n)
        try:
            _timsort(seq, less, stats=stats, debug=debug)
        finally:
            reverse_range(seq, 0, n)
        return

    _timsort(seq, less, stats=stats, debug=debug)


def timsorted(
    iterable: Iterable[T],
    less: LessThan = operator.lt,
    *,
    key: Optional[Callable[[T], Any]] = None,
    reverse: bool = False,
) -> list[T]:
    """Return a new sorted list of the values in ``iterable``, like |sorted|."""
    values = list(iterable)
    sort(values, less, key=key, reverse=reverse)
    return values


def _check_irreflexive(seq: MutableSequence[T], less: LessThan) -> None:
    for i in range(len(seq)):
        value = seq[i]
        if less(value, value):
            raise InvalidOrderingError(
                f"less({value!r}, {value!r}) returned True at index {i}; "
                "the ordering must be irreflexive"
            )


def _check_ordered(seq: MutableSequence[T], less: LessThan) -> None:
    for i in range(1, len(seq)):
        if less(seq[i], seq[i - 1]):
            raise InvalidOrderingError(
                f"result is out of order at index {i}: less({seq[i]!r}, "
                f"{seq[i - 1]!r}) is True. The ordering must be a strict weak order."
            )


def _timsort(
    seq: MutableSequence[T],
    less: LessThan,
    *,
    stats: Optional[SortStats],
    debug: bool,
) -> None:
    n = len(seq)
    if debug:
        _check_irreflexive(seq, less)

    check_less = less
    if stats is not None:
        less = CountingLess(less, stats)

    min_run = min_run_length(n)
    buffer: MergeBuffer[T] = MergeBuffer()
    stack: RunStack[T] = RunStack(seq, less, buffer)

    # March over the sequence once, left to right, finding natural runs and
    # extending short ones to min_run elements.
    start = 0
    try:
        while start < n:
            run_length, descending = count_run_and_make_ascending(
                seq, start, n, less
            )
            natural_length = run_length
            run_length = extend_run(seq, start, run_length, n, min_run, less)

            if stats is not None:
                stats.natural_runs += 1
                stats.reversed_runs += descending
                stats.extended_runs += run_length > natural_length

            stack.push(Run(start, run_length))
            stack.merge_collapse()
            start += run_length

        assert start == n
        stack.merge_force_collapse()
        assert list(stack) == [Run(0, n)]
    finally:
        if stats is not None:
            stats.min_run = min_run
            stats.merges = stack.merges
            stats.max_stack_depth = stack.max_depth
            stats.buffer_capacity = buffer.capacity
        buffer.clear()

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "sorted %d elements: min_run=%d merges=%d max_stack_depth=%d",
            n,
            min_run,
            stack.merges,
            stack.max_depth,
        )

    if debug:
        _check_ordered(seq, check_less)
