"""``replay`` command: run a recording through the director."""

from __future__ import annotations

import argparse
import json
from typing import Any, List, Mapping, Sequence, Tuple

from acc_director.cli.io import load_recording
from acc_director.commands import CallbackSink, Command, SetFocus, command_to_mapping
from acc_director.director.clock import ManualClock
from acc_director.director.ranking import RankedCandidate
from acc_director.director.settings import DirectorSettings
from acc_director.telemetry.recording import replay
from acc_director.telemetry.session import BroadcastSession

__all__ = ["handle_replay", "render_ranking"]


IssuedCommand = Tuple[float, Command]


def _resolve_settings(namespace: argparse.Namespace, config: Mapping[str, Any]) -> DirectorSettings:
    settings = DirectorSettings.from_config(config)
    return settings.with_overrides(
        minimum_switch_interval=getattr(namespace, "min_interval", None),
        auto_switch_enabled=getattr(namespace, "auto_switch", None),
        seed=getattr(namespace, "seed", None),
    )


def _render_text(
    issued: Sequence[IssuedCommand], labels: Mapping[int, str]
) -> List[str]:
    lines: List[str] = []
    for timestamp, command in issued:
        payload = dict(command_to_mapping(command))
        name = payload.pop("command")
        if isinstance(command, SetFocus):
            label = labels.get(command.car_index, "")
            suffix = f" ({label})" if label else ""
            lines.append(f"{timestamp:10.3f}  {name} car={command.car_index}{suffix}")
        else:
            details = " ".join(f"{key}={value}" for key, value in payload.items())
            lines.append(f"{timestamp:10.3f}  {name} {details}")
    return lines


def render_ranking(ranking: Sequence[RankedCandidate]) -> List[str]:
    """Format a ranking as a fixed-width table."""

    if not ranking:
        return ["No focus candidates."]
    lines = [f"{'rank':>4} {'car':>4} {'score':>6} {'weight':>6} {'cooldown':>8} {'gap_m':>8}  label"]
    for rank, candidate in enumerate(ranking, start=1):
        lines.append(
            f"{rank:>4} {candidate.car_index:>4} {candidate.score:>6} {candidate.weight:>6} "
            f"{candidate.cooldown:>8} {candidate.gap_front_meters:>8.1f}  {candidate.label}"
        )
    return lines


def handle_replay(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    events = load_recording(namespace.recording)
    settings = _resolve_settings(namespace, config)

    clock = ManualClock(events[0][0] if events else 0.0)
    issued: List[IssuedCommand] = []
    sink = CallbackSink(lambda command: issued.append((clock.now(), command)))
    session = BroadcastSession(
        sink, settings=settings, clock=clock, name=namespace.recording.name
    )
    outcomes = replay(session, events, clock)
    session.close()

    if namespace.format == "json":
        lines = [
            json.dumps({"t": timestamp, **command_to_mapping(command)}, sort_keys=True)
            for timestamp, command in issued
        ]
        if namespace.explain:
            lines.extend(
                json.dumps(
                    {
                        "rank": rank,
                        "car_index": candidate.car_index,
                        "score": candidate.score,
                        "weight": candidate.weight,
                        "cooldown": candidate.cooldown,
                        "gap_front_meters": candidate.gap_front_meters,
                    },
                    sort_keys=True,
                )
                for rank, candidate in enumerate(session.director.rank(), start=1)
            )
        return "\n".join(lines)

    labels = {car.car_index: car.label for car in session.cars}
    lines = _render_text(issued, labels)
    switches = sum(1 for outcome in outcomes if outcome.switched)
    lines.append(f"{len(outcomes)} ticks, {switches} automatic switches")
    if namespace.explain:
        lines.append("")
        lines.extend(render_ranking(session.director.rank()))
    return "\n".join(lines)
