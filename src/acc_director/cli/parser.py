"""Argument parsing helpers for the acc-director CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from .replay import handle_replay


def _add_common_arguments(parser: argparse.ArgumentParser, logging_cfg: Mapping[str, Any]) -> None:
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml (or its directory) holding [tool.acc_director].",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg_raw = config.get("logging", {})
    logging_cfg = dict(logging_cfg_raw) if isinstance(logging_cfg_raw, Mapping) else {}

    parser = argparse.ArgumentParser(
        prog="acc-director",
        description="Automatic camera director for race broadcast telemetry.",
    )
    _add_common_arguments(parser, logging_cfg)

    subparsers = parser.add_subparsers(dest="command", required=True)

    replay_parser = subparsers.add_parser(
        "replay",
        help="Replay a JSON-lines telemetry recording through the director.",
    )
    replay_parser.add_argument(
        "recording",
        type=Path,
        help="Recording produced by acc_director.telemetry.write_events (.jsonl or .jsonl.gz).",
    )
    replay_parser.add_argument(
        "--auto-switch",
        dest="auto_switch",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Arm or disarm automatic switching (default: director.auto_switch_enabled).",
    )
    replay_parser.add_argument(
        "--min-interval",
        dest="min_interval",
        type=float,
        default=None,
        help="Minimum seconds between automatic switches (default: director.minimum_switch_interval).",
    )
    replay_parser.add_argument(
        "--seed",
        dest="seed",
        type=int,
        default=None,
        help="Seed for the tie-breaking random generator.",
    )
    replay_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the candidate ranking after the last event.",
    )
    replay_parser.add_argument(
        "--format",
        dest="format",
        choices=("text", "json"),
        default="text",
        help="Output format for issued commands.",
    )
    replay_parser.set_defaults(handler=handle_replay)

    return parser


__all__ = ["build_parser"]
