"""Logging utilities for acc_director."""

from acc_director.logging.config import JsonFormatter, setup_logging

__all__ = ["JsonFormatter", "setup_logging"]
