import logging
from collections.abc import Iterator, MutableSequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from pytimsort.merge import MergeBuffer
from pytimsort.runs import LessThan

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Run:
    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


class RunStack(Generic[T]):
    """
    The runs found so far which are still waiting to be merged, in order of
    position in the sequence.

    After every push, adjacent runs are merged until the lengths of the top
    three runs A, B, C (C on top) satisfy

    1. A > B + C
    2. B > C

    so run lengths grow at least as fast as the Fibonacci numbers going down
    the stack. That bounds the depth of the stack by O(log n), and tends to
    merge runs of similar size with each other.
    """

    def __init__(
        self, seq: MutableSequence[T], less: LessThan, buffer: MergeBuffer[T]
    ) -> None:
        self.seq = seq
        self.less = less
        self.buffer = buffer
        self.runs: list[Run] = []
        self.merges = 0
        self.max_depth = 0

    def __len__(self) -> int:
        return len(self.runs)

    def __iter__(self) -> Iterator[Run]:
        return iter(self.runs)

    def lengths(self) -> list[int]:
        return [run.length for run in self.runs]

    def push(self, run: Run) -> None:
        assert run.length > 0
        assert run.end <= len(self.seq)
        if self.runs:
            assert self.runs[-1].end == run.start, (self.runs[-1], run)
        else:
            assert run.start == 0, run
        self.runs.append(run)
        self.max_depth = max(self.max_depth, len(self.runs))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "pushed run start=%d length=%d, stack=%s",
                run.start,
                run.length,
                self.lengths(),
            )

    def merge_at_top(self) -> None:
        """Merge the top two runs on the stack into one."""
        assert len(self.runs) >= 2
        run2 = self.runs.pop()
        run1 = self.runs.pop()
        assert run1.end == run2.start
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "merging runs [%d:%d] and [%d:%d]",
                run1.start,
                run1.end,
                run2.start,
                run2.end,
            )
        self.buffer.merge(self.seq, run1.start, run1.end, run2.end, self.less)
        self.merges += 1
        self.runs.append(Run(run1.start, run1.length + run2.length))

    def merge_collapse(self) -> None:
        """Merge runs until the stack invariants hold again."""
        runs = self.runs
        while len(runs) > 1:
            if len(runs) >= 3 and runs[-3].length <= runs[-2].length + runs[-1].length:
                self.merge_at_top()
            elif runs[-2].length <= runs[-1].length:
                self.merge_at_top()
            else:
                break

    def merge_force_collapse(self) -> None:
        """Regardless of invariants, merge runs until only one remains."""
        while len(self.runs) > 1:
            self.merge_at_top()
