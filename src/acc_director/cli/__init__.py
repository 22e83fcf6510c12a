"""Command line utilities for acc-director."""

from acc_director.cli.app import main, run_cli

__all__ = ["main", "run_cli"]
