"""Logging configuration shared by the CLI and embedding applications."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Optional

__all__ = ["JsonFormatter", "setup_logging"]


_STRUCTURED_FIELDS = ("event", "category", "status_code", "context")
_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_HANDLER_MARKER = "_acc_director_handler"


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects.

    Structured values passed through ``extra`` (``event``, ``category``,
    ``status_code`` and ``context``) are promoted to top-level keys.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, sort_keys=True)


def _resolve_level(value: Any) -> int:
    if isinstance(value, int):
        return value
    name = str(value or "info").strip().upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    raise ValueError(f"Unknown logging level {value!r}")


def _build_handler(output: str) -> logging.Handler:
    target = (output or "stderr").strip()
    if target.lower() == "stdout":
        return logging.StreamHandler(sys.stdout)
    if target.lower() == "stderr":
        return logging.StreamHandler(sys.stderr)
    path = Path(target).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, encoding="utf8")


def setup_logging(
    config: Optional[Mapping[str, Any]] = None,
    *,
    logger_name: str = "acc_director",
) -> logging.Logger:
    """Configure the package logger from the ``logging`` table of ``config``.

    Recognised keys are ``level`` (default ``info``), ``output`` (``stdout``,
    ``stderr`` or a file path, default ``stderr``) and ``format`` (``json``
    or ``text``, default ``json``).  Calling it again replaces the handler
    installed by a previous call.
    """

    logging_cfg_raw = (config or {}).get("logging", {})
    logging_cfg = dict(logging_cfg_raw) if isinstance(logging_cfg_raw, Mapping) else {}

    level = _resolve_level(logging_cfg.get("level", "info"))
    output = str(logging_cfg.get("output", "stderr"))
    fmt = str(logging_cfg.get("format", "json")).strip().lower()
    if fmt not in {"json", "text"}:
        raise ValueError(f"Unsupported logging format {fmt!r}")

    target = logging.getLogger(logger_name)
    for handler in list(target.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            target.removeHandler(handler)
            handler.close()

    handler = _build_handler(output)
    handler.setFormatter(JsonFormatter() if fmt == "json" else logging.Formatter(_TEXT_FORMAT))
    setattr(handler, _HANDLER_MARKER, True)
    target.addHandler(handler)
    target.setLevel(level)
    return target
