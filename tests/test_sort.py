import array
import copy
import logging
import operator
from collections.abc import MutableSequence
from random import Random

import pytest
from common import Flaky, by_first, is_ordered, same_elements, tagged
from hypothesis import given, strategies as st
from strategies import (
    any_lists,
    nearly_sorted_lists,
    reversed_lists,
    shuffled_block_lists,
)

from pytimsort import InvalidOrderingError, SortStats, min_run_length, sort, timsorted


@given(any_lists())
def test_sort_matches_builtin(values):
    expected = sorted(values)
    sort(values)
    assert values == expected


@given(any_lists(st.integers(0, 5)))
def test_sort_is_stable(values):
    items = tagged(values)
    expected = sorted(items, key=lambda item: item[0])
    sort(items, by_first)
    assert items == expected


@given(any_lists(st.floats(allow_nan=False)))
def test_sort_is_idempotent(values):
    sort(values)
    once = list(values)
    sort(values)
    assert values == once


@given(any_lists())
def test_sort_is_a_permutation(values):
    original = list(values)
    sort(values)
    assert len(values) == len(original)
    assert same_elements(values, original)
    assert is_ordered(values)


@given(st.lists(st.text()), st.sampled_from([lambda a, b: a < b, lambda a, b: a > b]))
def test_sort_with_custom_predicate(values, less):
    sort(values, less)
    assert is_ordered(values, less)


@pytest.mark.parametrize("values", [[], [1]])
def test_trivial_inputs_do_no_comparisons(values):
    stats = SortStats()
    original = list(values)
    sort(values, stats=stats)
    assert values == original
    assert stats.comparisons == 0
    assert stats.length == len(values)


def test_small_example():
    values = [5, 3, 4, 1, 2]
    sort(values)
    assert values == [1, 2, 3, 4, 5]


def test_ties_keep_input_order():
    values = [(1, "a"), (1, "b"), (0, "c")]
    sort(values, by_first)
    assert values == [(0, "c"), (1, "a"), (1, "b")]


def test_sorted_input_is_a_single_run():
    values = list(range(10_000))
    stats = SortStats()
    sort(values, stats=stats)
    assert values == list(range(10_000))
    assert stats.natural_runs == 1
    assert stats.extended_runs == 0
    assert stats.merges == 0
    assert stats.comparisons == 9_999
    assert stats.buffer_capacity == 0


def test_short_sorted_input_is_a_single_run():
    values = list(range(20))
    stats = SortStats()
    sort(values, stats=stats)
    assert values == list(range(20))
    assert stats.natural_runs == 1
    assert stats.merges == 0


def test_descending_input_is_reversed():
    values = list(range(1000, 0, -1))
    stats = SortStats()
    sort(values, stats=stats)
    assert values == list(range(1, 1001))
    assert stats.reversed_runs == 1
    assert stats.merges == 0


def test_shuffled_blocks():
    random = Random(0)
    values = list(range(10_000))
    for i in range(0, len(values), 100):
        block = values[i : i + 100]
        random.shuffle(block)
        values[i : i + 100] = block
    stats = SortStats()
    sort(values, stats=stats)
    assert values == list(range(10_000))
    assert stats.merges > 0
    # balanced merging keeps the stack shallow
    assert stats.max_stack_depth <= 2 * (10_000).bit_length()


@given(shuffled_block_lists())
def test_shuffled_block_lists(values):
    expected = sorted(values)
    sort(values)
    assert values == expected


@given(nearly_sorted_lists())
def test_nearly_sorted_lists(values):
    expected = sorted(values)
    sort(values)
    assert values == expected


@given(reversed_lists(st.integers(0, 3)))
def test_reversed_lists_with_duplicates_are_stable(values):
    items = tagged(values)
    expected = sorted(items, key=lambda item: item[0])
    sort(items, by_first)
    assert items == expected


@given(st.lists(st.integers()))
def test_stats_are_consistent(values):
    stats = SortStats()
    sort(values, stats=stats)
    if len(values) >= 2:
        assert stats.min_run == min_run_length(len(values))
        assert stats.merges == stats.natural_runs - 1
        assert stats.reversed_runs <= stats.natural_runs
        assert stats.extended_runs <= stats.natural_runs
        assert stats.buffer_capacity <= len(values) - 1
    assert stats.summary().startswith(f"length={len(values)}, min_run=")


@given(st.lists(st.integers(0, 10)), st.booleans())
def test_key_and_reverse_match_builtin(values, reverse):
    items = tagged(values)
    expected = sorted(items, key=lambda item: item[0], reverse=reverse)
    sort(items, key=lambda item: item[0], reverse=reverse)
    assert items == expected


@given(st.lists(st.integers()))
def test_key_is_called_once_per_element(values):
    calls = []

    def key(value):
        calls.append(value)
        return -value

    sort(values, key=key)
    assert len(calls) == len(values)
    assert values == sorted(values, key=lambda v: -v)


def test_key_is_called_for_a_single_element():
    calls = []
    values = [7]
    sort(values, key=lambda value: calls.append(value) or value)
    assert calls == [7]
    assert values == [7]


@given(st.lists(st.integers()))
def test_timsorted_returns_a_new_list(values):
    original = list(values)
    result = timsorted(iter(values), reverse=True)
    assert result == sorted(original, reverse=True)
    assert values == original


class Wrapped(MutableSequence):
    def __init__(self, values):
        self.values = list(values)

    def __getitem__(self, i):
        return self.values[i]

    def __setitem__(self, i, value):
        self.values[i] = value

    def __delitem__(self, i):
        del self.values[i]

    def __len__(self):
        return len(self.values)

    def insert(self, i, value):
        self.values.insert(i, value)


@given(any_lists(st.integers(-1000, 1000)))
def test_sorts_other_mutable_sequences(values):
    wrapped = Wrapped(values)
    arr = array.array("i", values)
    sort(wrapped)
    sort(arr)
    assert wrapped.values == sorted(values)
    assert arr.tolist() == sorted(values)


@pytest.mark.parametrize("seq", [(3, 1, 2), "cba", frozenset({1, 2}), {1: "a", 0: "b"}])
def test_rejects_non_sequences(seq):
    original = copy.copy(seq)
    with pytest.raises(TypeError):
        sort(seq)
    assert seq == original


@given(any_lists(), st.integers(0, 200), st.booleans())
def test_exceptions_from_less_propagate_and_keep_a_permutation(values, budget, reverse):
    original = list(values)
    try:
        sort(values, Flaky(budget), reverse=reverse)
    except RuntimeError:
        pass
    else:
        assert is_ordered(values, (lambda a, b: a > b) if reverse else operator.lt)
    assert same_elements(values, original)


def test_exceptions_from_key_propagate():
    values = [3, 2, 1, 0]

    with pytest.raises(ZeroDivisionError):
        sort(values, key=lambda v: 1 / v)
    assert values == [3, 2, 1, 0]


def test_debug_rejects_reflexive_ordering():
    with pytest.raises(InvalidOrderingError):
        sort([1, 2, 3], lambda a, b: a <= b, debug=True)


def test_debug_is_off_by_default(monkeypatch):
    monkeypatch.delenv("PYTIMSORT_DEBUG", raising=False)
    values = [2, 1, 3]
    sort(values, lambda a, b: a <= b)
    assert values == [1, 2, 3]


def test_debug_from_environment(monkeypatch):
    monkeypatch.setenv("PYTIMSORT_DEBUG", "1")
    with pytest.raises(InvalidOrderingError):
        sort([2, 1], lambda a, b: a <= b)
    # an explicit argument wins over the environment
    values = [2, 1]
    sort(values, lambda a, b: a <= b, debug=False)
    assert values == [1, 2]


def test_debug_checks_pass_for_valid_orderings():
    values = list(range(100, 0, -1))
    sort(values, debug=True)
    assert values == list(range(1, 101))


def test_debug_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="pytimsort")
    values = list(range(100))
    Random(0).shuffle(values)
    sort(values)
    messages = [record.getMessage() for record in caplog.records]
    assert any(m.startswith("pushed run") for m in messages)
    assert any(m.startswith("merging runs") for m in messages)
    assert any(m.startswith("sorted 100 elements") for m in messages)


def test_reused_stats_describe_the_latest_sort():
    stats = SortStats()
    values = list(range(80))
    Random(0).shuffle(values)
    sort(values, stats=stats)
    assert stats.merges > 0

    sort([2, 1], stats=stats)
    fresh = SortStats()
    sort([2, 1], stats=fresh)
    assert stats == fresh
    assert stats.length == 2
    assert stats.natural_runs == 1
    assert stats.merges == 0


def test_reused_stats_are_reset_for_trivial_inputs():
    stats = SortStats()
    sort([3, 2, 1], stats=stats)
    sort([], stats=stats)
    assert stats == SortStats()
