from dataclasses import asdict, dataclass, fields
from typing import Any

from pytimsort.runs import LessThan


@dataclass
class SortStats:
    """
    Counters describing what a single call to |sort| did.

    Pass an instance as ``stats=`` to collect them. Each call resets the
    instance first, so reusing one only ever shows the most recent sort.
    Counting comparisons wraps the predicate, so this is slightly slower than
    an uninstrumented sort.
    """

    length: int = 0
    min_run: int = 0
    comparisons: int = 0
    # runs as found in the input, before any extension to min_run
    natural_runs: int = 0
    # natural runs which were descending, and reversed in place
    reversed_runs: int = 0
    # runs padded out to min_run with insertion sort
    extended_runs: int = 0
    merges: int = 0
    max_stack_depth: int = 0
    buffer_capacity: int = 0

    def reset(self) -> None:
        for field in fields(self):
            setattr(self, field.name, 0)

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    def summary(self) -> str:
        return ", ".join(f"{name}={value}" for name, value in self.as_dict().items())


class CountingLess:
    """Wraps a predicate, counting calls into a |SortStats|."""

    def __init__(self, less: LessThan, stats: SortStats) -> None:
        self.less = less
        self.stats = stats

    def __call__(self, a: Any, b: Any) -> bool:
        self.stats.comparisons += 1
        return self.less(a, b)
