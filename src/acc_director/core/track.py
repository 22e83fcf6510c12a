"""Track model used to convert spline progress into physical distances."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from ..errors import MissingTrackError

__all__ = ["Track", "freeze_camera_sets"]


def freeze_camera_sets(
    payload: Mapping[str, Iterable[str]] | None,
) -> Mapping[str, tuple[str, ...]]:
    """Return an immutable ``camera set -> camera names`` mapping."""

    if not payload:
        return MappingProxyType({})
    frozen: dict[str, tuple[str, ...]] = {}
    for name, cameras in payload.items():
        if isinstance(cameras, (str, bytes)):
            frozen[str(name)] = (str(cameras),)
        else:
            frozen[str(name)] = tuple(str(camera) for camera in cameras)
    return MappingProxyType(frozen)


@dataclass(frozen=True, slots=True)
class Track:
    """Immutable description of the circuit reported by the telemetry feed.

    A new instance is created whenever the feed reports a different
    ``track_id``; camera sets and HUD pages may be refreshed for the same
    identifier through :meth:`with_broadcast_options`.
    """

    track_id: str
    name: str
    meters: float
    camera_sets: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    hud_pages: tuple[str, ...] = ()

    @property
    def has_length(self) -> bool:
        return self.meters > 0.0

    def require_length(self) -> float:
        """Return the track length, raising :class:`MissingTrackError` if unknown."""

        if not self.has_length:
            raise MissingTrackError(self.meters)
        return float(self.meters)

    def with_broadcast_options(
        self,
        camera_sets: Mapping[str, Iterable[str]] | None,
        hud_pages: Iterable[str] | None,
    ) -> "Track":
        return Track(
            track_id=self.track_id,
            name=self.name,
            meters=self.meters,
            camera_sets=freeze_camera_sets(camera_sets) if camera_sets else self.camera_sets,
            hud_pages=tuple(hud_pages) if hud_pages else self.hud_pages,
        )

    def has_camera(self, camera_set: str, camera_name: str) -> bool:
        cameras = self.camera_sets.get(camera_set)
        return cameras is not None and camera_name in cameras
