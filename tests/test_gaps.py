"""Tests for :mod:`acc_director.core.gaps`."""

from __future__ import annotations

import math

import numpy as np
import pytest

from acc_director.core.gaps import circular_distance, compute_front_gaps, spline_order
from acc_director.errors import MissingTrackError

from tests.helpers import build_car


def test_front_gaps_follow_spline_order() -> None:
    cars = [build_car(1, 0.30), build_car(2, 0.10), build_car(3, 0.15)]

    gaps = compute_front_gaps(cars, 2000.0)

    assert set(gaps) == {1, 3}
    assert math.isclose(gaps[3], 0.05 * 2000.0)
    assert math.isclose(gaps[1], 0.15 * 2000.0)


def test_spline_minimum_receives_no_gap() -> None:
    rng = np.random.default_rng(3)
    splines = rng.random(12)
    cars = [build_car(index, float(spline)) for index, spline in enumerate(splines)]

    gaps = compute_front_gaps(cars, 5793.0)

    leader = int(np.argmin(splines))
    assert leader not in gaps
    assert len(gaps) == len(cars) - 1
    assert all(0.0 <= value < 5793.0 for value in gaps.values())


def test_gap_folds_across_start_finish_line() -> None:
    cars = [build_car(1, 0.99), build_car(2, 0.01)]

    gaps = compute_front_gaps(cars, 1000.0)

    assert gaps == {1: pytest.approx(20.0)}


def test_positions_slightly_outside_unit_range_are_tolerated() -> None:
    cars = [build_car(1, -0.005), build_car(2, 1.005)]

    gaps = compute_front_gaps(cars, 1000.0)

    assert gaps[2] == pytest.approx(10.0)


def test_circular_distance_is_vectorised() -> None:
    folded = circular_distance(np.array([0.98, 0.25, 1.75, 0.0]))

    np.testing.assert_allclose(folded, [0.02, 0.25, 0.25, 0.0])


@pytest.mark.parametrize("track_meters", [0.0, -1.0])
def test_missing_track_length_raises(track_meters: float) -> None:
    with pytest.raises(MissingTrackError):
        compute_front_gaps([build_car(1, 0.1), build_car(2, 0.2)], track_meters)


def test_fewer_than_two_cars_is_a_no_op() -> None:
    assert compute_front_gaps([], 1000.0) == {}
    assert compute_front_gaps([build_car(1, 0.5)], 1000.0) == {}
    assert compute_front_gaps([build_car(1, 0.5), build_car(2)], 1000.0) == {}


def test_spline_order_skips_unpositioned_cars_and_keeps_ties_stable() -> None:
    cars = [build_car(5, 0.4), build_car(6), build_car(7, 0.2), build_car(8, 0.4)]

    ordered = [car.car_index for car in spline_order(cars)]

    assert ordered == [7, 5, 8]
