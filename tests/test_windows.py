"""
Tests for push-based windowers and element-level sequence operations.
"""
import pytest

from hkt_engine.transformers import (
    Grouped,
    GroupedStatefullyUntil,
    GroupedUntil,
    GroupedWhile,
    Sliding,
)
from hkt_engine.transformers import sequence_ops as ops


def run(windower, items):
    windows = []
    for item in items:
        windows.extend(windower.push(item))
    return windows + windower.finish()


class TestSliding:
    """Test sliding windows."""

    def test_step_one(self):
        assert run(Sliding(2), [1, 2, 3]) == [[1, 2], [2, 3]]

    def test_short_input_yields_partial(self):
        assert run(Sliding(3), [1, 2]) == [[1, 2]]

    def test_empty_input(self):
        assert run(Sliding(2), []) == []

    def test_increment_two(self):
        assert run(Sliding(3, 2), [1, 2, 3, 4, 5, 6]) == [[1, 2, 3], [3, 4, 5], [5, 6]]

    def test_increment_larger_than_size_skips(self):
        assert run(Sliding(2, 3), [1, 2, 3, 4, 5, 6, 7]) == [[1, 2], [4, 5], [7]]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            Sliding(0)


class TestGrouped:
    """Test batching windowers."""

    def test_grouped(self):
        assert run(Grouped(2), [1, 2, 3, 4, 5]) == [[1, 2], [3, 4], [5]]

    def test_grouped_until_inclusive(self):
        assert run(GroupedUntil(lambda x: x % 3 == 0), [1, 2, 3, 4, 5]) == [[1, 2, 3], [4, 5]]

    def test_grouped_while(self):
        assert run(GroupedWhile(lambda x: x < 3), [1, 2, 3, 1]) == [[1, 2, 3], [1]]

    def test_grouped_statefully_until(self):
        """The predicate sees the batch so far, current element included."""
        windower = GroupedStatefullyUntil(lambda batch, x: sum(batch) >= 5)
        assert run(windower, [2, 2, 2, 1, 4]) == [[2, 2, 2], [1, 4]]


class TestSequenceOps:
    """Test per-inner element operations."""

    def test_scan_left(self):
        assert list(ops.scan_left([1, 2, 3], 0, lambda a, b: a + b)) == [0, 1, 3, 6]

    def test_scan_right(self):
        assert list(ops.scan_right(["a", "b"], "", lambda x, acc: acc + x)) == ["", "b", "ba"]

    def test_distinct_handles_unhashable(self):
        assert list(ops.distinct([1, [2], 1, [2], 3])) == [1, [2], 3]

    def test_take_and_drop_until(self):
        assert list(ops.take_until([1, 2, 3, 4], lambda x: x == 3)) == [1, 2]
        assert list(ops.drop_until([1, 2, 3, 4], lambda x: x == 3)) == [3, 4]

    def test_skip_and_limit_last(self):
        assert list(ops.skip_last([1, 2, 3, 4], 1)) == [1, 2, 3]
        assert list(ops.limit_last([1, 2, 3, 4], 2)) == [3, 4]
        assert list(ops.limit_last([1, 2], 0)) == []

    def test_intersperse(self):
        assert list(ops.intersperse([1, 2, 3], 0)) == [1, 0, 2, 0, 3]

    def test_on_empty(self):
        assert list(ops.on_empty_get([], lambda: 9)) == [9]
        assert list(ops.on_empty_get([1], lambda: 9)) == [1]
        with pytest.raises(KeyError):
            list(ops.on_empty_throw([], lambda: KeyError("none")))

    def test_cycle_variants(self):
        assert list(ops.cycle([1, 2], 2)) == [1, 2, 1, 2]
        assert list(ops.cycle_while([1, 2, 3], lambda x: x < 3)) == [1, 2]
        assert list(ops.cycle_until([], lambda x: True)) == []

    def test_combine_neighbours(self):
        result = ops.combine([1, 1, 5, 7, 7], lambda a, b: a == b, lambda a, b: a + b)
        assert list(result) == [2, 5, 14]

    def test_slice(self):
        assert list(ops.slice_(range(10), 2, 5)) == [2, 3, 4]
