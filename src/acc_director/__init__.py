"""Automated camera director for motorsport broadcast telemetry.

The package turns the realtime car telemetry of a broadcasting feed into a
low-frequency sequence of camera focus decisions.  Front gaps between cars
are measured along the track spline, each car is scored for how camera-worthy
it is, and a time-gated director switches the broadcast focus to the best
candidate.
"""

from ._version import __version__
from .commands import (
    CallbackSink,
    CommandSink,
    LoggingSink,
    QueuedCommandSink,
    RequestHudPage,
    SetCamera,
    SetFocus,
)
from .core import (
    CarLocation,
    CarState,
    CarTable,
    Track,
    broadcast_weight,
    compute_front_gaps,
    decay_cooldowns,
)
from .director import (
    Director,
    DirectorMode,
    DirectorSettings,
    ManualClock,
    SystemClock,
    TickOutcome,
    rank_candidates,
)
from .errors import (
    DirectorError,
    EmptyCandidateSetError,
    MissingTrackError,
    TelemetryFormatError,
    UnknownCarError,
)
from .telemetry import (
    BroadcastSession,
    EntryListUpdate,
    RealtimeCarUpdate,
    RealtimeUpdate,
    TrackUpdate,
    iter_events,
    replay,
    write_events,
)

__all__ = [
    "BroadcastSession",
    "CallbackSink",
    "CarLocation",
    "CarState",
    "CarTable",
    "CommandSink",
    "Director",
    "DirectorError",
    "DirectorMode",
    "DirectorSettings",
    "EmptyCandidateSetError",
    "EntryListUpdate",
    "LoggingSink",
    "ManualClock",
    "MissingTrackError",
    "QueuedCommandSink",
    "RealtimeCarUpdate",
    "RealtimeUpdate",
    "RequestHudPage",
    "SetCamera",
    "SetFocus",
    "SystemClock",
    "TelemetryFormatError",
    "TickOutcome",
    "Track",
    "TrackUpdate",
    "UnknownCarError",
    "__version__",
    "broadcast_weight",
    "compute_front_gaps",
    "decay_cooldowns",
    "iter_events",
    "rank_candidates",
    "replay",
    "write_events",
]
