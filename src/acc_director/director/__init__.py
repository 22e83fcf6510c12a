"""Automatic camera director: ranking, time gating and settings."""

from __future__ import annotations

from .clock import Clock, ManualClock, SystemClock
from .loop import Director, DirectorMode, DirectorState, TickOutcome
from .ranking import (
    RankedCandidate,
    adjusted_weight,
    is_candidate,
    rank_candidates,
)
from .settings import DEFAULT_MINIMUM_SWITCH_INTERVAL, DirectorSettings

__all__ = [
    "Clock",
    "DEFAULT_MINIMUM_SWITCH_INTERVAL",
    "Director",
    "DirectorMode",
    "DirectorSettings",
    "DirectorState",
    "ManualClock",
    "RankedCandidate",
    "SystemClock",
    "TickOutcome",
    "adjusted_weight",
    "is_candidate",
    "rank_candidates",
]
