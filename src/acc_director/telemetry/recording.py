"""Newline-delimited JSON recordings of inbound telemetry events."""

from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import IO, Any, Iterable, Iterator, Tuple

from ..director.clock import ManualClock
from ..director.loop import TickOutcome
from ..errors import TelemetryFormatError
from .messages import TelemetryEvent, event_from_mapping, event_to_mapping
from .session import BroadcastSession

__all__ = ["TimedEvent", "iter_events", "replay", "write_events"]


TimedEvent = Tuple[float, TelemetryEvent]

_GZIP_MAGIC = b"\x1f\x8b"


def write_events(
    events: Iterable[TimedEvent],
    path: str | Path,
    *,
    compress: bool | None = None,
) -> None:
    """Persist ``(timestamp, event)`` pairs to ``path``.

    Parameters
    ----------
    events:
        Pairs of arrival time in seconds and decoded event.
    path:
        Destination file.  Parent directories are created automatically.
    compress:
        Force gzip on or off.  By default files ending in ``.gz`` are
        compressed.
    """

    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)
    if compress is None:
        compress = destination.suffix in {".gz", ".gzip"}

    handle: IO[str]
    if compress:
        handle = gzip.open(destination, "wt", encoding="utf8")
    else:
        handle = destination.open("w", encoding="utf8")
    with handle:
        for timestamp, event in events:
            payload = {"t": float(timestamp), **event_to_mapping(event)}
            json.dump(payload, handle, sort_keys=True)
            handle.write("\n")


def iter_events(path: str | Path) -> Iterator[TimedEvent]:
    """Yield ``(timestamp, event)`` pairs written by :func:`write_events`.

    Plain and gzip-compressed files are both accepted.  Malformed lines raise
    :class:`TelemetryFormatError` naming the offending line.
    """

    source = Path(path)
    if not source.exists():
        raise FileNotFoundError(f"Telemetry recording {source} does not exist")

    with source.open("rb") as head:
        compressed = head.read(2) == _GZIP_MAGIC

    if compressed:
        with gzip.open(source, "rt", encoding="utf8") as handle:
            yield from _iter_lines(handle, source)
    else:
        with source.open("r", encoding="utf8") as handle:
            yield from _iter_lines(handle, source)


def _iter_lines(handle: Iterable[str], source: Path) -> Iterator[TimedEvent]:
    for number, line in enumerate(handle, start=1):
        if not line.strip():
            continue
        try:
            payload: Any = json.loads(line)
        except json.JSONDecodeError as exc:
            raise TelemetryFormatError(f"{source}:{number}: invalid JSON ({exc.msg})") from exc
        if not isinstance(payload, dict):
            raise TelemetryFormatError(f"{source}:{number}: expected a JSON object")
        try:
            timestamp = float(payload.get("t", 0.0))
            event = event_from_mapping(payload)
        except TelemetryFormatError as exc:
            raise TelemetryFormatError(f"{source}:{number}: {exc}") from exc
        except (TypeError, ValueError) as exc:
            raise TelemetryFormatError(f"{source}:{number}: invalid timestamp") from exc
        yield timestamp, event


def replay(
    session: BroadcastSession,
    events: Iterable[TimedEvent],
    clock: ManualClock,
) -> list[TickOutcome]:
    """Feed recorded events through ``session`` with ``clock`` following their timestamps.

    ``clock`` must be the clock the session's director was built with.
    Returns the outcome of every realtime tick.
    """

    outcomes: list[TickOutcome] = []
    for timestamp, event in events:
        if session.closed:
            break
        if timestamp > clock.now():
            clock.set(timestamp)
        outcome = session.dispatch(event)
        if outcome is not None:
            outcomes.append(outcome)
    return outcomes
