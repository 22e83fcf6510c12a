"""Per-source session tying inbound events to the director.

A :class:`BroadcastSession` owns the track model, the car table and a
:class:`~acc_director.director.Director`.  The transport calls the typed
``on_*`` methods (or :meth:`BroadcastSession.dispatch`) serially; sessions
share no mutable state, so independent sources can run side by side.
"""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterable, Callable, Mapping, Optional

import numpy as np

from ..commands import CommandSink
from ..core.cars import CarTable
from ..core.track import Track, freeze_camera_sets
from ..director.clock import Clock
from ..director.loop import Director, TickOutcome
from ..director.settings import DirectorSettings
from ..errors import UnknownCarError
from .messages import (
    EntryListUpdate,
    RealtimeCarUpdate,
    RealtimeUpdate,
    TelemetryEvent,
    TrackUpdate,
)

__all__ = ["BroadcastSession"]


logger = logging.getLogger(__name__)


class BroadcastSession:
    """Consume one telemetry stream and drive its camera director."""

    def __init__(
        self,
        sink: CommandSink,
        *,
        settings: DirectorSettings | None = None,
        clock: Clock | None = None,
        rng: np.random.Generator | None = None,
        name: str = "session",
    ) -> None:
        self.name = name
        self.cars = CarTable()
        self.track: Optional[Track] = None
        self.director = Director(self.cars, sink, settings=settings, clock=clock, rng=rng)
        self.external_focus: Optional[int] = None
        self.active_camera_set = ""
        self.active_camera = ""
        self.current_hud_page = ""
        self.session_time = 0.0
        self.last_outcome: Optional[TickOutcome] = None
        self._closed = False
        self._statistics = {"events": 0, "ticks": 0, "switches": 0, "unknown_cars": 0, "dropped": 0}
        self._handlers: Mapping[type, Callable[[object], Optional[TickOutcome]]] = {
            TrackUpdate: self.on_track_update,
            EntryListUpdate: self.on_entry_list_update,
            RealtimeUpdate: self.on_realtime_update,
            RealtimeCarUpdate: self.on_realtime_car_update,
        }  # type: ignore[dict-item]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def statistics(self) -> dict[str, int]:
        return dict(self._statistics)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.director.disable()
        logger.info(
            "Session closed",
            extra={
                "event": "session.closed",
                "context": {"session": self.name, **self._statistics},
            },
        )

    # ------------------------------------------------------------------
    # Typed update methods
    # ------------------------------------------------------------------
    def on_track_update(self, update: TrackUpdate) -> None:
        """Replace the track on a new identifier, refresh broadcast options otherwise."""

        if self.track is None or self.track.track_id != update.track_id:
            self.track = Track(
                track_id=update.track_id,
                name=update.track_name,
                meters=float(update.track_meters),
                camera_sets=freeze_camera_sets(update.camera_sets),
                hud_pages=tuple(update.hud_pages),
            )
            logger.info(
                "Track %s (%.0f m)",
                update.track_name or update.track_id,
                update.track_meters,
                extra={
                    "event": "session.track",
                    "context": {"session": self.name, "track_id": update.track_id},
                },
            )
            return
        self.track = self.track.with_broadcast_options(update.camera_sets, update.hud_pages)

    def on_entry_list_update(self, update: EntryListUpdate) -> None:
        self.cars.upsert_entry(update)

    def on_realtime_car_update(self, update: RealtimeCarUpdate) -> None:
        """Store car telemetry; updates for cars missing from the entry list are dropped."""

        try:
            self.cars.apply_realtime(update)
        except UnknownCarError as exc:
            self._statistics["unknown_cars"] += 1
            logger.debug(
                "Dropping realtime update for unknown car %s",
                exc.car_index,
                extra={"event": "session.unknown_car", "context": {"session": self.name}},
            )

    def on_realtime_update(self, update: RealtimeUpdate) -> TickOutcome:
        """Run one director tick."""

        self.external_focus = update.focused_car_index
        self.session_time = float(update.session_time)
        self.active_camera_set = update.active_camera_set
        self.active_camera = update.active_camera
        self.current_hud_page = update.current_hud_page
        self.cars.mark_focused(update.focused_car_index)

        outcome = self.director.tick(self.track)
        self._statistics["ticks"] += 1
        if outcome.switched:
            self._statistics["switches"] += 1
            logger.info(
                "Car %s on air at session time %.1f s",
                outcome.switched_to,
                self.session_time,
                extra={
                    "event": "session.switch",
                    "context": {
                        "session": self.name,
                        "car_index": outcome.switched_to,
                        "session_time": self.session_time,
                    },
                },
            )
        self.last_outcome = outcome
        return outcome

    # ------------------------------------------------------------------
    # Manual pass-through requests
    # ------------------------------------------------------------------
    def request_focus(self, car_index: int) -> None:
        self.director.request_focus(car_index)

    def request_camera(self, camera_set: str, camera_name: str) -> None:
        if self.track is not None and self.track.camera_sets and not self.track.has_camera(
            camera_set, camera_name
        ):
            logger.warning(
                "Camera %s/%s is not advertised by the track",
                camera_set,
                camera_name,
                extra={"event": "session.unknown_camera", "context": {"session": self.name}},
            )
        self.director.request_camera(camera_set, camera_name)

    def request_hud_page(self, page: str) -> None:
        self.director.request_hud_page(page)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------
    def dispatch(self, event: TelemetryEvent) -> Optional[TickOutcome]:
        """Route ``event`` to its typed handler; events after :meth:`close` are dropped."""

        if self._closed:
            self._statistics["dropped"] += 1
            return None
        handler = self._handlers.get(type(event))
        if handler is None:
            raise TypeError(f"Unsupported telemetry event {event!r}")
        self._statistics["events"] += 1
        return handler(event)

    async def run(self, events: AsyncIterable[TelemetryEvent]) -> None:
        """Consume ``events`` one at a time until exhausted, closed or cancelled."""

        try:
            async for event in events:
                if self._closed:
                    break
                self.dispatch(event)
        except asyncio.CancelledError:
            self.close()
            raise
