"""
Destination folder and file names derived from a file's date.
"""

import re
from datetime import datetime
from typing import Tuple

from .constants import FALLBACK_DATE_FORMAT, PRESERVE_SEPARATOR, STRFTIME_DIRECTIVES

_DIRECTIVE = re.compile(r"%(.?)", re.DOTALL)


def is_valid_pattern(pattern: str) -> bool:
    """Check that `pattern` is non-empty and every % starts a known directive."""
    if not pattern:
        return False
    # A dangling trailing % captures the empty string, which is never valid
    return all(d in STRFTIME_DIRECTIVES for d in _DIRECTIVE.findall(pattern))


def format_date(date: datetime, pattern: str) -> str:
    """Format `date`, falling back to the four-digit year for bad patterns."""
    if not is_valid_pattern(pattern):
        pattern = FALLBACK_DATE_FORMAT
    formatted = date.strftime(pattern)
    if not formatted.strip("/"):
        formatted = date.strftime(FALLBACK_DATE_FORMAT)
    return formatted


def _path_parts(formatted: str):
    """Split a formatted date on '/' into plain folder names.

    Empty, '.' and '..' parts are dropped so the result stays under the target.
    """
    return [part for part in formatted.split("/") if part not in ("", ".", "..")]


def format_destination(date: datetime, pattern: str, original_stem: str,
                       preserve_name: bool) -> Tuple[str, str]:
    """Return (folder_name, file_stem) for a file dated `date`.

    The folder name is the formatted date; a '/' in it yields nested folders.
    The file stem is the same date with '/' replaced by '-', followed by
    PRESERVE_SEPARATOR and the original stem when `preserve_name` is set.
    """
    parts = _path_parts(format_date(date, pattern))
    if not parts:
        parts = [date.strftime(FALLBACK_DATE_FORMAT)]
    folder_name = "/".join(parts)
    file_stem = "-".join(parts)
    if preserve_name and original_stem:
        file_stem = f"{file_stem}{PRESERVE_SEPARATOR}{original_stem}"
    return folder_name, file_stem


def destination_name(stem: str, extension: str) -> str:
    """Reattach an extension (unchanged) to a stem."""
    return f"{stem}.{extension}" if extension else stem
