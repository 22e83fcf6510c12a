"""Package version, from installed metadata or the checkout's changelog."""

from __future__ import annotations

import re
from importlib import metadata
from pathlib import Path

from packaging.version import InvalidVersion, Version

_CHANGELOG = Path(__file__).resolve().parents[2] / "CHANGELOG.md"
_HEADING = re.compile(r"^## v(\d+\.\d+\.\d+)\b", re.MULTILINE)


def _load_version() -> str:
    try:
        raw = metadata.version("acc-director")
    except metadata.PackageNotFoundError:
        # Source checkout without an installed distribution.
        text = _CHANGELOG.read_text(encoding="utf-8") if _CHANGELOG.is_file() else ""
        match = _HEADING.search(text)
        if match is None:
            raise RuntimeError("Unable to determine the acc_director version") from None
        raw = match.group(1)

    try:
        release = Version(raw).release
    except InvalidVersion as exc:
        raise RuntimeError(f"Invalid acc_director version {raw!r}") from exc
    if len(release) != 3:
        raise RuntimeError(f"acc_director version {raw!r} is not MAJOR.MINOR.PATCH")
    return raw


__version__ = _load_version()

__all__ = ["__version__"]
