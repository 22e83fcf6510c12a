"""Broadcast weight heuristics.

``broadcast_weight`` scores how camera-worthy a car is from its own front
gap, the race position of the car it is chasing and pit-lane activity on
either car.  Larger is more interesting.  The cooldown deduction stored on
the car is subtracted from the sum so a car that was just shown loses
priority.

Proximity brackets (meters to the car ahead):

=========  ===================
gap        score
=========  ===================
<= 1       10000
<= 5       1000
<= 10      100
<= 30      90
<= 50      70
<= 100     70 down to 40
<= 200     40 down to 0
> 200      0
=========  ===================
"""

from __future__ import annotations

from typing import Optional, Sequence

from .cars import CarLocation, CarState

__all__ = [
    "POSITION_BONUSES",
    "broadcast_weight",
    "pit_bonus",
    "position_bonus",
    "proximity_score",
    "score_cars",
]


POSITION_BONUSES: tuple[int, ...] = (25, 18, 15, 12, 10, 8, 6, 4, 2, 1)

_STEP_BRACKETS: tuple[tuple[float, int], ...] = (
    (1.0, 10000),
    (5.0, 1000),
    (10.0, 100),
    (30.0, 90),
    (50.0, 70),
)

PIT_ENTRY_BONUS = 5
PIT_EXIT_BONUS = 10
CHASING_PIT_EXIT_BONUS = 20
CHASING_PIT_EXIT_CLOSE_BONUS = 30
CHASING_PIT_EXIT_RANGE = 500.0
CHASING_PIT_EXIT_CLOSE_RANGE = 200.0


def _interpolate(gap: float, start: float, end: float, high: int, low: int) -> int:
    # Linear from ``high`` at ``start`` to ``low`` at ``end``, truncated.
    return low + int((end - gap) / (end - start) * (high - low))


def proximity_score(gap_meters: float) -> int:
    """Return the proximity term for a front gap expressed in meters."""

    for limit, score in _STEP_BRACKETS:
        if gap_meters <= limit:
            return score
    if gap_meters <= 100.0:
        return _interpolate(gap_meters, 50.0, 100.0, 70, 40)
    if gap_meters <= 200.0:
        return _interpolate(gap_meters, 100.0, 200.0, 40, 0)
    return 0


def position_bonus(race_position: int) -> int:
    """Bonus for chasing a car in the top ten (``0`` outside or when unknown)."""

    if 1 <= race_position <= len(POSITION_BONUSES):
        return POSITION_BONUSES[race_position - 1]
    return 0


def pit_bonus(car: CarState, car_ahead: Optional[CarState]) -> int:
    bonus = 0
    if car.location is CarLocation.PIT_ENTRY:
        bonus += PIT_ENTRY_BONUS
    if car.location is CarLocation.PIT_EXIT:
        bonus += PIT_EXIT_BONUS
    if (
        car_ahead is not None
        and car_ahead.location is CarLocation.PIT_EXIT
        and car.gap_front_meters < CHASING_PIT_EXIT_RANGE
    ):
        bonus += CHASING_PIT_EXIT_BONUS
        if car.gap_front_meters < CHASING_PIT_EXIT_CLOSE_RANGE:
            bonus += CHASING_PIT_EXIT_CLOSE_BONUS
    return bonus


def broadcast_weight(car: CarState, car_ahead: Optional[CarState]) -> int:
    """Score ``car`` against the car directly ahead of it in spline order.

    ``car_ahead`` is ``None`` for the car with the smallest spline position,
    which then only collects its proximity and own pit terms.  The result
    may be negative once the cooldown deduction outweighs the other terms.
    """

    weight = proximity_score(car.gap_front_meters)
    if car_ahead is not None:
        weight += position_bonus(car_ahead.position)
    weight += pit_bonus(car, car_ahead)
    return weight - car.cooldown


def score_cars(ordered: Sequence[CarState]) -> dict[int, int]:
    """Return fresh weights for spline-ordered cars, each paired with its predecessor."""

    weights: dict[int, int] = {}
    previous: Optional[CarState] = None
    for car in ordered:
        weights[car.car_index] = broadcast_weight(car, previous)
        previous = car
    return weights
