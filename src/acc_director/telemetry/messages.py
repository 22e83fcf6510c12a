"""Structured inbound events produced by the broadcasting transport.

The transport decodes wire packets into these frozen dataclasses.  Mapping
helpers convert them to and from JSON-friendly dictionaries, tagged with a
``type`` discriminator, for recordings and tests.
"""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from ..core.cars import CarLocation, DriverInfo
from ..core.track import freeze_camera_sets
from ..errors import TelemetryFormatError

__all__ = [
    "EntryListUpdate",
    "RealtimeCarUpdate",
    "RealtimeUpdate",
    "TelemetryEvent",
    "TrackUpdate",
    "event_from_mapping",
    "event_to_mapping",
]


@dataclass(frozen=True, slots=True)
class TrackUpdate:
    track_id: str
    track_name: str
    track_meters: float
    camera_sets: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    hud_pages: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class EntryListUpdate:
    car_index: int
    team_name: str = ""
    race_number: int = 0
    car_model_type: int = 0
    cup_category: int = 0
    current_driver_index: int = 0
    drivers: tuple[DriverInfo, ...] = ()


@dataclass(frozen=True, slots=True)
class RealtimeUpdate:
    """Session-wide realtime packet; one per tick."""

    focused_car_index: Optional[int] = None
    session_time: float = 0.0
    active_camera_set: str = ""
    active_camera: str = ""
    current_hud_page: str = ""


@dataclass(frozen=True, slots=True)
class RealtimeCarUpdate:
    car_index: int
    spline_position: float
    position: int = 0
    location: CarLocation = CarLocation.TRACK
    kmh: float = 0.0
    gear: int = 0
    laps: int = 0
    delta: int = 0
    cup_position: int = 0
    track_position: int = 0


TelemetryEvent = Union[TrackUpdate, EntryListUpdate, RealtimeUpdate, RealtimeCarUpdate]


_EVENT_TYPES: Mapping[str, type] = MappingProxyType(
    {
        "track": TrackUpdate,
        "entry": EntryListUpdate,
        "realtime": RealtimeUpdate,
        "car": RealtimeCarUpdate,
    }
)
_TYPE_NAMES: Mapping[type, str] = MappingProxyType(
    {cls: name for name, cls in _EVENT_TYPES.items()}
)


def _drivers(value: Any) -> tuple[DriverInfo, ...]:
    drivers: list[DriverInfo] = []
    for item in value or ():
        if not isinstance(item, ABCMapping):
            raise TypeError(f"driver entries must be mappings, got {item!r}")
        drivers.append(
            DriverInfo(
                first_name=str(item.get("first_name", "")),
                last_name=str(item.get("last_name", "")),
                short_name=str(item.get("short_name", "")),
            )
        )
    return tuple(drivers)


def _camera_sets(value: Any) -> Mapping[str, tuple[str, ...]]:
    if value and not isinstance(value, ABCMapping):
        raise TypeError(f"camera_sets must be a mapping, got {value!r}")
    return freeze_camera_sets(value or None)


def _optional_int(value: Any) -> Optional[int]:
    return None if value is None else int(value)


_COERCERS: Mapping[str, Callable[[Any], Any]] = MappingProxyType(
    {
        "track_id": str,
        "track_name": str,
        "track_meters": float,
        "camera_sets": _camera_sets,
        "hud_pages": lambda value: tuple(str(page) for page in value or ()),
        "car_index": int,
        "team_name": str,
        "race_number": int,
        "car_model_type": int,
        "cup_category": int,
        "current_driver_index": int,
        "drivers": _drivers,
        "focused_car_index": _optional_int,
        "session_time": float,
        "active_camera_set": str,
        "active_camera": str,
        "current_hud_page": str,
        "spline_position": float,
        "position": int,
        "location": CarLocation.coerce,
        "kmh": float,
        "gear": int,
        "laps": int,
        "delta": int,
        "cup_position": int,
        "track_position": int,
    }
)


def event_from_mapping(payload: Mapping[str, Any]) -> TelemetryEvent:
    """Build an event from a ``type``-tagged mapping.

    Unknown keys are ignored.  Missing required fields, unknown event types
    and values that cannot be coerced raise :class:`TelemetryFormatError`.
    """

    if not isinstance(payload, ABCMapping):
        raise TelemetryFormatError(f"Event payload must be a mapping, got {type(payload).__name__}")
    kind = payload.get("type")
    event_type = _EVENT_TYPES.get(str(kind)) if kind is not None else None
    if event_type is None:
        raise TelemetryFormatError(f"Unknown event type {kind!r}")

    arguments: dict[str, Any] = {}
    for entry in fields(event_type):
        if entry.name not in payload:
            continue
        try:
            arguments[entry.name] = _COERCERS[entry.name](payload[entry.name])
        except (TypeError, ValueError) as exc:
            raise TelemetryFormatError(
                f"Invalid value for '{entry.name}' in {kind} event: {payload[entry.name]!r}"
            ) from exc
    try:
        return event_type(**arguments)
    except TypeError as exc:
        raise TelemetryFormatError(f"Incomplete {kind} event: {exc}") from exc


def _plain(value: Any) -> Any:
    if isinstance(value, CarLocation):
        return value.name.lower()
    if isinstance(value, DriverInfo):
        return {
            "first_name": value.first_name,
            "last_name": value.last_name,
            "short_name": value.short_name,
        }
    if isinstance(value, ABCMapping):
        return {str(key): _plain(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_plain(item) for item in value]
    return value


def event_to_mapping(event: TelemetryEvent) -> dict[str, Any]:
    """Return the JSON-friendly ``type``-tagged form of ``event``."""

    try:
        kind = _TYPE_NAMES[type(event)]
    except KeyError:
        raise TypeError(f"Unsupported event {event!r}") from None
    payload: dict[str, Any] = {"type": kind}
    for entry in fields(event):
        payload[entry.name] = _plain(getattr(event, entry.name))
    return payload
