"""
Shared constants, logger and console accessors for datesort.
"""

import logging

from rich.console import Console

PROGRAM = "datesort"

# Sort option defaults
DEFAULT_DATE_FORMAT = "%Y"
DEFAULT_DATE_TYPE = "m"
FALLBACK_DATE_FORMAT = "%Y"

# Joins the formatted date and the original stem when names are preserved
PRESERVE_SEPARATOR = "-"

# Collision suffix, e.g. "2023-03 (1).txt"
COLLISION_TEMPLATE = "{stem} ({counter})"
MAX_COLLISION_PROBES = 10000

# strftime directives accepted in date formats
STRFTIME_DIRECTIVES = frozenset("aAbBcdfGHIjmMpSuUVwWxXyYzZ%")

_console = None


def get_logger() -> logging.Logger:
    """Return the package logger."""
    return logging.getLogger(PROGRAM)


def get_console() -> Console:
    """Return the shared rich console."""
    global _console
    if _console is None:
        _console = Console()
    return _console
