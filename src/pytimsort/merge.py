from collections.abc import MutableSequence
from typing import Any, Generic, TypeVar

from pytimsort.runs import LessThan

T = TypeVar("T")


class MergeBuffer(Generic[T]):
    """
    Scratch space for merging two adjacent runs.

    The buffer holds a copy of the left run while it is merged with the right
    run. It only ever grows, so over one sort call its capacity is the longest
    left run merged so far.
    """

    def __init__(self) -> None:
        self._items: list[Any] = []

    @property
    def capacity(self) -> int:
        return len(self._items)

    def ensure_capacity(self, n: int) -> None:
        if n > len(self._items):
            self._items.extend([None] * (n - len(self._items)))

    def clear(self) -> None:
        # drop references to the caller's elements once the sort is done
        self._items = []

    def merge(
        self, seq: MutableSequence[T], start: int, mid: int, end: int, less: LessThan
    ) -> None:
        """
        Merge the sorted ranges ``seq[start:mid]`` and ``seq[mid:end]`` into one
        sorted range ``seq[start:end]``.

        On ties the element from the left range is placed first. If ``less``
        raises, the remaining buffered elements are still written back, so
        ``seq`` is left holding a permutation of its original contents.
        """
        assert 0 <= start <= mid <= end <= len(seq)
        left_len = mid - start
        if left_len == 0 or mid == end:
            return

        self.ensure_capacity(left_len)
        buf = self._items
        for k in range(left_len):
            buf[k] = seq[start + k]

        i = 0  # next element of the left run, in buf
        j = mid  # next element of the right run, still in seq
        dest = start
        try:
            while i < left_len and j < end:
                right = seq[j]
                if less(right, buf[i]):
                    seq[dest] = right
                    j += 1
                else:
                    seq[dest] = buf[i]
                    i += 1
                dest += 1
        finally:
            # whatever is left of the right run is already in place; the gap
            # seq[dest:j] is exactly the size of what is left of the left run.
            assert j - dest == left_len - i
            while i < left_len:
                seq[dest] = buf[i]
                i += 1
                dest += 1
