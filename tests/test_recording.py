from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from acc_director.director import DirectorSettings, ManualClock
from acc_director.errors import TelemetryFormatError
from acc_director.telemetry import BroadcastSession, iter_events, replay, write_events

from tests.helpers import RecordingSink, recorded_race, seeded_rng


@pytest.mark.parametrize("name", ["race.jsonl", "race.jsonl.gz"])
def test_recordings_preserve_events(tmp_path: Path, name: str) -> None:
    events = recorded_race()
    target = tmp_path / "nested" / name

    write_events(events, target)

    assert list(iter_events(target)) == events


def test_gzip_is_detected_from_content(tmp_path: Path) -> None:
    target = tmp_path / "race.log"
    write_events(recorded_race(), target, compress=True)

    with target.open("rb") as handle:
        assert handle.read(2) == b"\x1f\x8b"
    assert len(list(iter_events(target))) == len(recorded_race())


def test_malformed_lines_name_their_location(tmp_path: Path) -> None:
    target = tmp_path / "broken.jsonl"
    target.write_text('{"t": 0, "type": "realtime"}\n\n{"t": 1, "type": "nope"}\n', encoding="utf8")

    with pytest.raises(TelemetryFormatError, match=r"broken\.jsonl:3"):
        list(iter_events(target))


def test_invalid_json_is_reported(tmp_path: Path) -> None:
    target = tmp_path / "broken.jsonl.gz"
    with gzip.open(target, "wt", encoding="utf8") as handle:
        handle.write("not json\n")

    with pytest.raises(TelemetryFormatError, match="invalid JSON"):
        list(iter_events(target))


def test_missing_recording_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        list(iter_events(tmp_path / "absent.jsonl"))


def test_replay_follows_recorded_timestamps() -> None:
    clock = ManualClock(0.0)
    sink = RecordingSink()
    settings = DirectorSettings(minimum_switch_interval=3.0, auto_switch_enabled=True)
    session = BroadcastSession(sink, settings=settings, clock=clock, rng=seeded_rng())

    outcomes = replay(session, recorded_race(), clock)

    assert [outcome.timestamp for outcome in outcomes] == [1.0, 3.0, 5.0, 7.0]
    assert [outcome.reason for outcome in outcomes] == ["switched", "gated", "switched", "gated"]
    assert sink.focus_targets == [2, 3]
    assert clock.now() == 7.0
