"""Tests for the timing allocator."""

import math

import pytest

from shorts_factory.core.exceptions import InvalidInput
from shorts_factory.services.timing_allocator import allocate


@pytest.mark.parametrize("total,count", [(35.0, 3), (35.0, 5), (1.0, 1), (59.97, 7), (0.5, 13)])
def test_slices_partition_total_duration(total, count):
    """Slices are contiguous, start at 0 and end exactly at the total."""
    slices = allocate(total, count)

    assert len(slices) == count
    assert slices[0].start == 0.0
    assert slices[-1].end == total
    for previous, current in zip(slices, slices[1:]):
        assert current.start == previous.end
    for i, time_slice in enumerate(slices):
        assert time_slice.index == i
        assert time_slice.end > time_slice.start
        assert math.isclose(time_slice.duration, total / count, rel_tol=1e-9)


def test_35_seconds_over_3_images():
    """Three images over 35 seconds get 11.667s each."""
    slices = allocate(35.0, 3)

    assert [round(s.start, 3) for s in slices] == [0.0, 11.667, 23.333]
    assert [round(s.end, 3) for s in slices] == [11.667, 23.333, 35.0]


def test_integer_duration_is_accepted():
    slices = allocate(10, 2)
    assert [(s.start, s.end) for s in slices] == [(0.0, 5.0), (5.0, 10.0)]


def test_many_slices_do_not_drift():
    """The last boundary is exact even for many slices."""
    slices = allocate(35.0, 1000)
    assert slices[-1].end == 35.0
    assert math.isclose(slices[500].start, 17.5)


@pytest.mark.parametrize("count", [0, -1, 2.5, True, "3"])
def test_invalid_count_raises(count):
    with pytest.raises(InvalidInput):
        allocate(35.0, count)


@pytest.mark.parametrize("total", [0, -5.0, float("nan"), float("inf"), "35"])
def test_invalid_duration_raises(total):
    with pytest.raises(InvalidInput):
        allocate(total, 3)


def test_invalid_input_is_a_value_error():
    with pytest.raises(ValueError):
        allocate(0, 1)


def test_weights_give_proportional_shares():
    slices = allocate(30.0, 3, weights=[1, 2, 3])

    assert [round(s.duration, 6) for s in slices] == [5.0, 10.0, 15.0]
    assert slices[-1].end == 30.0


@pytest.mark.parametrize("weights", [[1, 2], [1, 0, 1], [1, -1, 1], [1, float("nan"), 1]])
def test_bad_weights_raise(weights):
    with pytest.raises(InvalidInput):
        allocate(30.0, 3, weights=weights)


@pytest.mark.parametrize("weights", [[1, 1e-20], [1e-20, 1, 1e-20]])
def test_weights_collapsing_a_slice_raise(weights):
    with pytest.raises(InvalidInput, match="no duration"):
        allocate(30.0, len(weights), weights=weights)


def test_too_many_slices_for_tiny_duration_raise():
    with pytest.raises(InvalidInput):
        allocate(5e-324, 2)
