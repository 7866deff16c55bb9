"""
Exceptions raised while sorting.

ConfigurationError aborts a run before any file is touched. Every FileError
subclass concerns a single file and is recorded in the SortReport instead of
stopping the run.
"""

from pathlib import Path
from typing import Optional


class SortError(Exception):
    """Base error for the project."""


class ConfigurationError(SortError):
    """Invalid settings, or a source/target that cannot be sorted."""


class FileError(SortError):
    """A failure tied to one file; the run continues with the next file."""

    def __init__(self, path: Path, message: str):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.message = message

    @property
    def kind(self) -> str:
        return type(self).__name__


class MetadataUnavailable(FileError):
    pass


class CollisionResolutionExhausted(FileError):
    pass


class MoveFailed(FileError):
    def __init__(self, path: Path, message: str, destination: Optional[Path] = None):
        super().__init__(path, message)
        self.destination = destination


class DirectoryCreationFailed(FileError):
    pass
