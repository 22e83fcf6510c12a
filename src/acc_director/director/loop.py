"""Time-gated automatic camera director.

Once per realtime tick the director refreshes front gaps for display.  When
armed and the minimum switch interval has elapsed since the last automatic
switch, it decays cooldowns, rescores every car, ranks the eligible ones and
focuses the winner if it is not already on screen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from ..commands import CommandSink, RequestHudPage, SetCamera, SetFocus
from ..core.cars import CarTable
from ..core.cooldown import decay_cooldowns
from ..core.gaps import compute_front_gaps, spline_order
from ..core.track import Track
from ..core.weights import score_cars
from ..errors import EmptyCandidateSetError, MissingTrackError, UnknownCarError
from .clock import Clock, SystemClock
from .ranking import RankedCandidate, rank_candidates
from .settings import DirectorSettings

__all__ = ["Director", "DirectorMode", "DirectorState", "TickOutcome"]


logger = logging.getLogger(__name__)


class DirectorMode(str, Enum):
    IDLE = "idle"
    ARMED = "armed"


@dataclass(slots=True)
class DirectorState:
    """Mutable per-session director bookkeeping."""

    minimum_interval: float
    auto_switch_enabled: bool = False
    focused_car_index: Optional[int] = None
    last_switch_time: Optional[float] = None

    @property
    def mode(self) -> DirectorMode:
        return DirectorMode.ARMED if self.auto_switch_enabled else DirectorMode.IDLE

    def elapsed(self, now: float) -> float:
        if self.last_switch_time is None:
            return 0.0
        return now - self.last_switch_time

    def gate_open(self, now: float) -> bool:
        if self.last_switch_time is None:
            return True
        return now - self.last_switch_time >= self.minimum_interval


@dataclass(frozen=True, slots=True)
class TickOutcome:
    """What a single tick did.

    ``reason`` is one of ``idle``, ``missing_track``, ``gated``,
    ``switched``, ``unchanged``, ``no_candidates`` or ``error``.  Without a
    track length no weights are computed and nothing is switched.
    """

    timestamp: float
    reason: str
    gaps_updated: bool = False
    switched_to: Optional[int] = None
    ranking: tuple[RankedCandidate, ...] = ()

    @property
    def switched(self) -> bool:
        return self.switched_to is not None


class Director:
    """Automatic focus selection for one broadcast session."""

    def __init__(
        self,
        cars: CarTable,
        sink: CommandSink,
        *,
        settings: DirectorSettings | None = None,
        clock: Clock | None = None,
        rng: np.random.Generator | None = None,
    ) -> None:
        settings = settings or DirectorSettings()
        self._cars = cars
        self._sink = sink
        self._clock: Clock = clock or SystemClock()
        self._rng = rng if rng is not None else np.random.default_rng(settings.seed)
        self._state = DirectorState(
            minimum_interval=settings.minimum_switch_interval,
            auto_switch_enabled=settings.auto_switch_enabled,
        )

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------
    @property
    def state(self) -> DirectorState:
        return self._state

    @property
    def mode(self) -> DirectorMode:
        return self._state.mode

    @property
    def focused_car_index(self) -> Optional[int]:
        return self._state.focused_car_index

    def enable(self) -> None:
        self._set_auto_switch(True)

    def disable(self) -> None:
        self._set_auto_switch(False)

    def toggle(self) -> DirectorMode:
        self._set_auto_switch(not self._state.auto_switch_enabled)
        return self.mode

    def _set_auto_switch(self, enabled: bool) -> None:
        if self._state.auto_switch_enabled == enabled:
            return
        self._state.auto_switch_enabled = enabled
        logger.info(
            "Auto switch %s",
            "armed" if enabled else "idle",
            extra={"event": "director.mode", "context": {"mode": self.mode.value}},
        )

    # ------------------------------------------------------------------
    # Manual requests
    # ------------------------------------------------------------------
    def request_focus(self, car_index: int) -> None:
        """Focus ``car_index`` on operator request.

        The switch timer is left untouched so the automatic gate keeps its
        own rhythm.
        """

        if car_index not in self._cars:
            raise UnknownCarError(car_index)
        self._sink.submit(SetFocus(car_index))
        self._state.focused_car_index = car_index

    def request_camera(self, camera_set: str, camera_name: str) -> None:
        self._sink.submit(SetCamera(camera_set, camera_name))

    def request_hud_page(self, page: str) -> None:
        self._sink.submit(RequestHudPage(page))

    # ------------------------------------------------------------------
    # Tick processing
    # ------------------------------------------------------------------
    def update_gaps(self, track: Optional[Track]) -> bool:
        """Refresh front gaps; returns ``False`` when the track length is unknown."""

        try:
            gaps = compute_front_gaps(list(self._cars), track.meters if track else 0.0)
        except MissingTrackError:
            logger.debug(
                "Skipping gap update without track length",
                extra={"event": "director.missing_track"},
            )
            return False
        self._cars.apply_gaps(gaps)
        return True

    def tick(self, track: Optional[Track]) -> TickOutcome:
        """Process one realtime tick; never raises."""

        now = self._clock.now()
        gaps_updated = False
        try:
            gaps_updated = self.update_gaps(track)
            if not self._state.auto_switch_enabled:
                return TickOutcome(now, "idle", gaps_updated)
            if not gaps_updated:
                return TickOutcome(now, "missing_track")
            if not self._state.gate_open(now):
                return TickOutcome(now, "gated", gaps_updated)
            ranking = self._rescore_and_rank(now)
            return self._commit(now, ranking, gaps_updated)
        except EmptyCandidateSetError:
            logger.debug(
                "No focus candidates this tick",
                extra={"event": "director.no_candidates", "context": {"cars": len(self._cars)}},
            )
            return TickOutcome(now, "no_candidates", gaps_updated)
        except Exception:
            logger.exception(
                "Director tick failed",
                extra={"event": "director.tick_error", "context": {"cars": len(self._cars)}},
            )
            return TickOutcome(now, "error", gaps_updated)

    def rank(self) -> list[RankedCandidate]:
        """Rank the table as it stands, without rescoring or switching."""

        return rank_candidates(spline_order(list(self._cars)), self._rng)

    def _rescore_and_rank(self, now: float) -> list[RankedCandidate]:
        ordered = spline_order(list(self._cars))
        cooldowns = decay_cooldowns(
            ordered, self._state.focused_car_index, self._state.elapsed(now)
        )
        self._cars.apply_cooldowns(cooldowns)
        self._cars.apply_weights(score_cars(ordered))
        ranking = rank_candidates(ordered, self._rng)
        if not ranking:
            raise EmptyCandidateSetError("No car passed the focus candidate filter")
        return ranking

    def _commit(
        self, now: float, ranking: list[RankedCandidate], gaps_updated: bool
    ) -> TickOutcome:
        best = ranking[0]
        if best.car_index == self._state.focused_car_index:
            return TickOutcome(now, "unchanged", gaps_updated, ranking=tuple(ranking))

        previous = self._state.focused_car_index
        self._sink.submit(SetFocus(best.car_index))
        self._state.focused_car_index = best.car_index
        self._state.last_switch_time = now
        logger.info(
            "Focus switched to car %s",
            best.car_index,
            extra={
                "event": "director.switch",
                "context": {
                    "previous": previous,
                    "car_index": best.car_index,
                    "score": best.score,
                    "gap_front_meters": round(best.gap_front_meters, 2),
                },
            },
        )
        return TickOutcome(now, "switched", gaps_updated, best.car_index, tuple(ranking))
