"""Candidate filtering and ranking for automatic focus switches."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from ..core.cars import CarLocation, CarState

__all__ = [
    "RankedCandidate",
    "adjusted_weight",
    "is_candidate",
    "rank_candidates",
]


@dataclass(frozen=True, slots=True)
class RankedCandidate:
    """One car's standing in a tick's ranking."""

    car_index: int
    score: int
    weight: int
    cooldown: int
    gap_front_meters: float
    label: str = ""


def adjusted_weight(car: CarState) -> int:
    """Ranking score: the stored weight less the cooldown, floored at zero."""

    return max(car.broadcast_weight - car.cooldown, 0)


def is_candidate(car: CarState) -> bool:
    """Cars that are moving, out of the pit lane and have a measured gap."""

    return (
        car.gap_front_meters > 0.0
        and car.location is not CarLocation.PITLANE
        and car.kmh != 0.0
    )


def rank_candidates(
    cars: Iterable[CarState],
    rng: np.random.Generator,
) -> list[RankedCandidate]:
    """Rank eligible cars by adjusted weight, best first.

    Each candidate draws a random key for this call only; equal scores are
    ordered by that key so exact ties resolve uniformly at random while the
    order between different scores stays deterministic.
    """

    candidates: Sequence[CarState] = [car for car in cars if is_candidate(car)]
    if not candidates:
        return []
    scores = np.fromiter(
        (adjusted_weight(car) for car in candidates), dtype=np.int64, count=len(candidates)
    )
    keys = rng.random(len(candidates))
    order = np.lexsort((keys, -scores))
    ranked: list[RankedCandidate] = []
    for index in order:
        car = candidates[int(index)]
        ranked.append(
            RankedCandidate(
                car_index=car.car_index,
                score=int(scores[index]),
                weight=car.broadcast_weight,
                cooldown=car.cooldown,
                gap_front_meters=car.gap_front_meters,
                label=car.label,
            )
        )
    return ranked
