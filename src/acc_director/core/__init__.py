"""Track, car and scoring primitives used by the director."""

from __future__ import annotations

from .cars import CarLocation, CarState, CarTable, DriverInfo
from .cooldown import decay_cooldowns
from .gaps import circular_distance, compute_front_gaps, spline_order
from .track import Track
from .weights import (
    POSITION_BONUSES,
    broadcast_weight,
    pit_bonus,
    position_bonus,
    proximity_score,
    score_cars,
)

__all__ = [
    "CarLocation",
    "CarState",
    "CarTable",
    "DriverInfo",
    "POSITION_BONUSES",
    "Track",
    "broadcast_weight",
    "circular_distance",
    "compute_front_gaps",
    "decay_cooldowns",
    "pit_bonus",
    "position_bonus",
    "proximity_score",
    "score_cars",
    "spline_order",
]
