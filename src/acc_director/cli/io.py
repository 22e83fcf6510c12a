"""Configuration and recording loaders for the acc-director CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from acc_director.cli.errors import CliError
from acc_director.configuration import load_project_config, resolve_pyproject_path
from acc_director.errors import TelemetryFormatError
from acc_director.telemetry.recording import TimedEvent, iter_events

CONFIG_ENV_VAR = "ACC_DIRECTOR_CONFIG"


def _iter_unique_paths(candidates: List[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml``.

    Lookup order: the explicit ``path``, the ``ACC_DIRECTOR_CONFIG``
    environment variable, then the working directory.  The first file that
    carries a ``[tool.acc_director]`` table wins; ``_config_path`` records
    which one (``None`` when nothing was found).
    """

    bases: List[Path] = []
    if path is not None:
        bases.append(path)
    env_config = os.environ.get(CONFIG_ENV_VAR)
    if env_config:
        bases.append(Path(env_config))
    bases.append(Path.cwd())

    candidates = [
        candidate
        for candidate in (resolve_pyproject_path(base) for base in bases)
        if candidate is not None
    ]
    for candidate in _iter_unique_paths(candidates):
        loaded = load_project_config(candidate)
        if not loaded:
            continue
        payload, resolved = loaded
        payload["_config_path"] = str(resolved)
        return payload

    return {"_config_path": None}


def load_recording(source: Path) -> List[TimedEvent]:
    """Read a telemetry recording, translating failures into :class:`CliError`."""

    if not source.exists():
        raise CliError(
            f"Telemetry recording {source} does not exist",
            category="not_found",
            context={"path": str(source)},
        )
    try:
        return list(iter_events(source))
    except TelemetryFormatError as exc:
        raise CliError(
            str(exc), category="io", context={"path": str(source)}
        ) from exc
    except OSError as exc:
        raise CliError(
            f"Unable to read telemetry recording {source}: {exc}",
            category="io",
            context={"path": str(source)},
        ) from exc


__all__ = ["CONFIG_ENV_VAR", "load_cli_config", "load_recording"]
