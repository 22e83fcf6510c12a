"""Front-gap computation over spline-ordered cars."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..errors import MissingTrackError
from .cars import CarState

__all__ = ["circular_distance", "compute_front_gaps", "spline_order"]


def circular_distance(distance: np.ndarray | float) -> np.ndarray:
    """Fold absolute spline distances onto the unit circle.

    Whole laps are removed first so positions slightly outside ``[0, 1)``
    are tolerated, then the shorter arc is kept: ``0.99`` and ``0.01`` are
    ``0.02`` apart, never ``0.98``.
    """

    folded = np.mod(np.abs(np.asarray(distance, dtype=float)), 1.0)
    return np.minimum(folded, 1.0 - folded)


def spline_order(cars: Sequence[CarState]) -> list[CarState]:
    """Return ``cars`` with known positions sorted ascending, ties kept stable."""

    positioned = [car for car in cars if car.spline_position is not None]
    if not positioned:
        return []
    splines = np.fromiter(
        (car.spline_position for car in positioned), dtype=float, count=len(positioned)
    )
    order = np.argsort(splines, kind="stable")
    return [positioned[int(index)] for index in order]


def compute_front_gaps(cars: Sequence[CarState], track_meters: float) -> dict[int, float]:
    """Return ``car_index -> meters`` to the spline-ahead neighbour.

    The car with the smallest spline position is absent from the result.
    Raises :class:`MissingTrackError` when ``track_meters`` is not positive.
    """

    if not track_meters or track_meters <= 0.0:
        raise MissingTrackError(track_meters)

    ordered = spline_order(cars)
    if len(ordered) < 2:
        return {}

    splines = np.fromiter(
        (car.spline_position for car in ordered), dtype=float, count=len(ordered)
    )
    meters = circular_distance(np.diff(splines)) * float(track_meters)
    return {car.car_index: float(gap) for car, gap in zip(ordered[1:], meters)}
