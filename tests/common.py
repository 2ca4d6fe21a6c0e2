import operator
from collections import Counter


def by_first(a, b):
    return a[0] < b[0]


def is_ordered(values, less=operator.lt):
    return all(not less(values[i], values[i - 1]) for i in range(1, len(values)))


def same_elements(a, b):
    return Counter(a) == Counter(b)


def tagged(values):
    # pair each value with its input position, so stability can be checked by
    # comparing only the first component.
    return [(value, i) for i, value in enumerate(values)]


class Flaky:
    """A predicate which raises after a set number of comparisons."""

    def __init__(self, budget, less=operator.lt):
        self.budget = budget
        self.less = less

    def __call__(self, a, b):
        if self.budget <= 0:
            raise RuntimeError("comparison budget exhausted")
        self.budget -= 1
        return self.less(a, b)
