"""Inbound telemetry events, sessions and recordings."""

from __future__ import annotations

from .messages import (
    EntryListUpdate,
    RealtimeCarUpdate,
    RealtimeUpdate,
    TelemetryEvent,
    TrackUpdate,
    event_from_mapping,
    event_to_mapping,
)
from .recording import TimedEvent, iter_events, replay, write_events
from .session import BroadcastSession

__all__ = [
    "BroadcastSession",
    "EntryListUpdate",
    "RealtimeCarUpdate",
    "RealtimeUpdate",
    "TelemetryEvent",
    "TimedEvent",
    "TrackUpdate",
    "event_from_mapping",
    "event_to_mapping",
    "iter_events",
    "replay",
    "write_events",
]
