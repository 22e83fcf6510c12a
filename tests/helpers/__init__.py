"""Builders and fakes shared by the test-suite."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from acc_director.commands import Command, SetFocus
from acc_director.core.cars import CarLocation, CarState, CarTable, DriverInfo
from acc_director.telemetry.messages import (
    EntryListUpdate,
    RealtimeCarUpdate,
    RealtimeUpdate,
    TelemetryEvent,
    TrackUpdate,
)

TRACK_METERS = 1000.0


class RecordingSink:
    """Command sink that keeps every submitted command in order."""

    def __init__(self) -> None:
        self.commands: List[Command] = []

    def submit(self, command: Command) -> None:
        self.commands.append(command)

    @property
    def focus_targets(self) -> List[int]:
        return [command.car_index for command in self.commands if isinstance(command, SetFocus)]


def build_car(
    car_index: int,
    spline_position: Optional[float] = None,
    *,
    position: int = 0,
    location: CarLocation = CarLocation.TRACK,
    kmh: float = 120.0,
    gap_front_meters: float = 0.0,
    cooldown: int = 0,
    broadcast_weight: int = 0,
    race_number: int = 0,
) -> CarState:
    return CarState(
        car_index=car_index,
        race_number=race_number,
        spline_position=spline_position,
        position=position,
        location=location,
        kmh=kmh,
        gap_front_meters=gap_front_meters,
        cooldown=cooldown,
        broadcast_weight=broadcast_weight,
    )


def build_table(cars: Iterable[CarState]) -> CarTable:
    table = CarTable()
    for car in cars:
        table.upsert_entry(EntryListUpdate(car_index=car.car_index, race_number=car.race_number))
        stored = table[car.car_index]
        stored.spline_position = car.spline_position
        stored.position = car.position
        stored.location = car.location
        stored.kmh = car.kmh
        stored.gap_front_meters = car.gap_front_meters
        stored.cooldown = car.cooldown
        stored.broadcast_weight = car.broadcast_weight
    return table


def entry(car_index: int, race_number: int = 0, short_name: str = "") -> EntryListUpdate:
    drivers: Tuple[DriverInfo, ...] = (DriverInfo(short_name=short_name),) if short_name else ()
    return EntryListUpdate(car_index=car_index, race_number=race_number, drivers=drivers)


def car_update(
    car_index: int,
    spline_position: float,
    *,
    position: int = 0,
    location: CarLocation = CarLocation.TRACK,
    kmh: float = 150.0,
) -> RealtimeCarUpdate:
    return RealtimeCarUpdate(
        car_index=car_index,
        spline_position=spline_position,
        position=position,
        location=location,
        kmh=kmh,
    )


def track_update(meters: float = TRACK_METERS, track_id: str = "monza") -> TrackUpdate:
    return TrackUpdate(track_id=track_id, track_name=track_id.title(), track_meters=meters)


def tick_events(
    cars: Sequence[Tuple[int, float, int]],
    *,
    focused_car_index: Optional[int] = None,
) -> List[TelemetryEvent]:
    """Realtime car updates for ``(index, spline, position)`` triples plus the tick."""

    events: List[TelemetryEvent] = [
        car_update(index, spline, position=position) for index, spline, position in cars
    ]
    events.append(RealtimeUpdate(focused_car_index=focused_car_index))
    return events


def seeded_rng(seed: int = 7) -> np.random.Generator:
    return np.random.default_rng(seed)


__all__ = [
    "RecordingSink",
    "TRACK_METERS",
    "build_car",
    "build_table",
    "car_update",
    "entry",
    "recorded_race",
    "seeded_rng",
    "tick_events",
    "track_update",
]


def recorded_race() -> List[Tuple[float, TelemetryEvent]]:
    """A short timed race: car 2 chases car 1, then car 3 dives in between them."""

    events: List[Tuple[float, TelemetryEvent]] = [(0.0, track_update())]
    events.extend((0.0, entry(index, race_number=index)) for index in (1, 2, 3))
    timestamp = 1.0
    for layout in (
        [(1, 0.10, 2), (2, 0.108, 5), (3, 0.50, 3)],
        [(1, 0.12, 2), (2, 0.13, 5), (3, 0.124, 3)],
        [(1, 0.14, 2), (2, 0.15, 5), (3, 0.144, 3)],
        [(1, 0.16, 2), (2, 0.17, 5), (3, 0.164, 3)],
    ):
        events.extend((timestamp, event) for event in tick_events(layout))
        timestamp += 2.0
    return events

