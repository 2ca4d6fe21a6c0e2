"""An adaptive, stable, in-place merge sort over mutable sequences."""

from pytimsort.merge import MergeBuffer
from pytimsort.runs import MIN_MERGE, min_run_length
from pytimsort.stack import Run, RunStack
from pytimsort.stats import SortStats
from pytimsort.timsort import InvalidOrderingError, sort, timsorted

__version__ = "26.10.01"
__all__: list[str] = [
    "MIN_MERGE",
    "InvalidOrderingError",
    "MergeBuffer",
    "Run",
    "RunStack",
    "SortStats",
    "min_run_length",
    "sort",
    "timsorted",
]
