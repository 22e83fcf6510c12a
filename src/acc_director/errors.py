"""Exception hierarchy shared by the director components."""

from __future__ import annotations

__all__ = [
    "DirectorError",
    "EmptyCandidateSetError",
    "MissingTrackError",
    "TelemetryFormatError",
    "UnknownCarError",
]


class DirectorError(RuntimeError):
    """Base class for recoverable director failures."""


class MissingTrackError(DirectorError):
    """Raised when a gap conversion needs a track length that is not known."""

    def __init__(self, track_meters: float | None = None) -> None:
        self.track_meters = track_meters
        super().__init__(f"Track length is not available (track_meters={track_meters!r})")


class UnknownCarError(DirectorError, KeyError):
    """Raised when an update references a car index never seen in the entry list."""

    def __init__(self, car_index: int) -> None:
        self.car_index = car_index
        super().__init__(f"Unknown car index {car_index}")

    def __str__(self) -> str:
        return f"Unknown car index {self.car_index}"


class EmptyCandidateSetError(DirectorError):
    """Raised when no car survives the focus candidate filter."""


class TelemetryFormatError(DirectorError, ValueError):
    """Raised when a recorded or decoded event payload is malformed."""
