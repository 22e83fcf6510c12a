"""Per-tick cooldown transform applied before cars are scored."""

from __future__ import annotations

from typing import Iterable, Optional

from .cars import CarState

__all__ = ["decay_cooldowns"]


def decay_cooldowns(
    cars: Iterable[CarState],
    focused_index: Optional[int],
    elapsed_seconds: float,
) -> dict[int, int]:
    """Return the next cooldown deduction of every car.

    Cars off camera halve their deduction (integer division) so they drift
    back towards zero.  The focused car's deduction tracks how long it has
    been shown, in whole seconds.
    """

    shown_for = max(0, int(elapsed_seconds))
    return {
        car.car_index: shown_for if car.car_index == focused_index else car.cooldown // 2
        for car in cars
    }
