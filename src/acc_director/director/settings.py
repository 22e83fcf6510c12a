"""Director configuration parsed from TOML payloads."""

from __future__ import annotations

import math
from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from ..commands import DEFAULT_COMMAND_QUEUE_SIZE

__all__ = ["DEFAULT_MINIMUM_SWITCH_INTERVAL", "DirectorSettings"]


DEFAULT_MINIMUM_SWITCH_INTERVAL = 3.0


def _as_mapping(value: Any) -> Mapping[str, Any]:
    if isinstance(value, ABCMapping):
        return value
    return {}


def _coerce_bool(value: Any, fallback: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
    return fallback


def _coerce_interval(value: Any, fallback: float) -> float:
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return fallback
    if not math.isfinite(numeric) or numeric < 0.0:
        return fallback
    return numeric


def _coerce_positive_int(value: Any, fallback: int) -> int:
    try:
        numeric = int(value)
    except (TypeError, ValueError):
        return fallback
    if numeric <= 0:
        return fallback
    return numeric


def _coerce_seed(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class DirectorSettings:
    """Immutable auto-director options."""

    minimum_switch_interval: float = DEFAULT_MINIMUM_SWITCH_INTERVAL
    auto_switch_enabled: bool = False
    seed: Optional[int] = None
    command_queue_size: int = DEFAULT_COMMAND_QUEUE_SIZE

    @classmethod
    def from_config(cls, config: Mapping[str, Any] | None = None) -> "DirectorSettings":
        """Build settings from a configuration mapping.

        Options are read from the ``[director]`` table when present, falling
        back to top-level keys.  Both ``snake_case`` names and the camel-case
        spellings used by broadcasting clients (``minimumSwitchIntervalSeconds``,
        ``autoSwitchEnabled``) are accepted.  Invalid values keep the
        defaults.
        """

        payload = dict(_as_mapping(config))
        section = _as_mapping(payload.get("director"))
        merged = {**payload, **section}
        defaults = cls()

        interval_raw = merged.get(
            "minimum_switch_interval",
            merged.get("minimumSwitchIntervalSeconds", defaults.minimum_switch_interval),
        )
        enabled_raw = merged.get(
            "auto_switch_enabled",
            merged.get("autoSwitchEnabled", defaults.auto_switch_enabled),
        )
        return cls(
            minimum_switch_interval=_coerce_interval(
                interval_raw, defaults.minimum_switch_interval
            ),
            auto_switch_enabled=_coerce_bool(enabled_raw, defaults.auto_switch_enabled),
            seed=_coerce_seed(merged.get("seed")),
            command_queue_size=_coerce_positive_int(
                merged.get("command_queue_size"), defaults.command_queue_size
            ),
        )

    def with_overrides(self, **overrides: Any) -> "DirectorSettings":
        """Return a copy with the non-``None`` ``overrides`` applied."""

        values = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **values)
