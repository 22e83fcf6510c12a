"""Per-car live state and the table that owns it."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterator, Mapping, Optional, TYPE_CHECKING

from ..errors import UnknownCarError

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ..telemetry.messages import EntryListUpdate, RealtimeCarUpdate

__all__ = ["CarLocation", "CarState", "CarTable", "DriverInfo"]


class CarLocation(IntEnum):
    """Where a car currently is, as reported by the realtime feed."""

    NONE = 0
    TRACK = 1
    PITLANE = 2
    PIT_ENTRY = 3
    PIT_EXIT = 4

    @classmethod
    def coerce(cls, value: "CarLocation | int | str") -> "CarLocation":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_").replace(" ", "_")
            aliases = {"PITENTRY": "PIT_ENTRY", "PITEXIT": "PIT_EXIT", "PIT_LANE": "PITLANE"}
            key = aliases.get(key, key)
            try:
                return cls[key]
            except KeyError:
                raise ValueError(f"Unknown car location {value!r}") from None
        return cls(int(value))


@dataclass(frozen=True, slots=True)
class DriverInfo:
    first_name: str = ""
    last_name: str = ""
    short_name: str = ""


@dataclass(slots=True)
class CarState:
    """Live telemetry of one car plus the director bookkeeping attached to it."""

    car_index: int
    team_name: str = ""
    race_number: int = 0
    car_model_type: int = 0
    cup_category: int = 0
    current_driver_index: int = 0
    drivers: tuple[DriverInfo, ...] = ()

    spline_position: Optional[float] = None
    position: int = 0
    location: CarLocation = CarLocation.NONE
    kmh: float = 0.0
    gear: int = 0
    laps: int = 0
    delta: int = 0
    cup_position: int = 0
    track_position: int = 0

    gap_front_meters: float = 0.0
    broadcast_weight: int = 0
    cooldown: int = 0
    focused: bool = False

    @property
    def has_position(self) -> bool:
        return self.spline_position is not None

    @property
    def driver(self) -> Optional[DriverInfo]:
        if 0 <= self.current_driver_index < len(self.drivers):
            return self.drivers[self.current_driver_index]
        return None

    @property
    def label(self) -> str:
        driver = self.driver
        name = driver.short_name or driver.last_name if driver else ""
        if name:
            return f"#{self.race_number} {name}"
        return f"#{self.race_number}" if self.race_number else f"car {self.car_index}"


@dataclass(slots=True)
class CarTable:
    """Insertion-ordered ``car_index -> CarState`` mapping for one session."""

    _cars: dict[int, CarState] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self._cars)

    def __iter__(self) -> Iterator[CarState]:
        return iter(self._cars.values())

    def __contains__(self, car_index: object) -> bool:
        return car_index in self._cars

    def get(self, car_index: int) -> Optional[CarState]:
        return self._cars.get(car_index)

    def __getitem__(self, car_index: int) -> CarState:
        try:
            return self._cars[car_index]
        except KeyError:
            raise UnknownCarError(car_index) from None

    def upsert_entry(self, update: "EntryListUpdate") -> CarState:
        """Create the car on first sighting and refresh its entry-list metadata."""

        car = self._cars.get(update.car_index)
        if car is None:
            car = CarState(car_index=update.car_index)
            self._cars[update.car_index] = car
        car.team_name = update.team_name
        car.race_number = update.race_number
        car.car_model_type = update.car_model_type
        car.cup_category = update.cup_category
        car.current_driver_index = update.current_driver_index
        car.drivers = tuple(update.drivers)
        return car

    def apply_realtime(self, update: "RealtimeCarUpdate") -> CarState:
        """Store per-tick telemetry; unknown indices raise :class:`UnknownCarError`."""

        car = self[update.car_index]
        car.spline_position = float(update.spline_position)
        car.position = int(update.position)
        car.location = CarLocation.coerce(update.location)
        car.kmh = float(update.kmh)
        car.gear = int(update.gear)
        car.laps = int(update.laps)
        car.delta = int(update.delta)
        car.cup_position = int(update.cup_position)
        car.track_position = int(update.track_position)
        return car

    def mark_focused(self, car_index: Optional[int]) -> None:
        for car in self._cars.values():
            car.focused = car.car_index == car_index

    def apply_gaps(self, gaps: Mapping[int, float]) -> None:
        for car_index, meters in gaps.items():
            self._cars[car_index].gap_front_meters = float(meters)

    def apply_cooldowns(self, cooldowns: Mapping[int, int]) -> None:
        for car_index, value in cooldowns.items():
            self._cars[car_index].cooldown = int(value)

    def apply_weights(self, weights: Mapping[int, int]) -> None:
        for car_index, value in weights.items():
            self._cars[car_index].broadcast_weight = int(value)
