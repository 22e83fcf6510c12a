"""Command line application entry point for acc-director."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from ..logging.config import setup_logging
from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import build_parser


def _preliminary_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument("--config", dest="config_path", type=Path, default=None)
    parser.add_argument("--log-level", dest="log_level", default=None)
    parser.add_argument("--log-output", dest="log_output", default=None)
    parser.add_argument("--log-format", dest="log_format", choices=("json", "text"), default=None)
    return parser


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the acc-director command line interface and return its output."""

    preliminary, _ = _preliminary_parser().parse_known_args(args)

    config = load_cli_config(preliminary.config_path)
    logging_config = dict(config.get("logging", {}))
    for key in ("level", "output", "format"):
        override = getattr(preliminary, f"log_{key}")
        if override is not None:
            logging_config[key] = override
    logging_config.setdefault("level", "info")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "json")
    config["logging"] = logging_config
    setup_logging(config)

    parser = build_parser(config)
    namespace = parser.parse_args(args)
    namespace.config_path = namespace.config_path or config.get("_config_path")

    try:
        result = namespace.handler(namespace, config=config)
    except CliError as exc:
        if not exc.logged:
            log_cli_error(exc.payload, exc_info=exc)
            exc.logged = True
        sys.stdout.write(exc.payload.message)
        if not exc.payload.message.endswith("\n"):
            sys.stdout.write("\n")
        raise SystemExit(exc.status_code) from exc
    if result:
        sys.stdout.write(result)
        if not result.endswith("\n"):
            sys.stdout.write("\n")
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
