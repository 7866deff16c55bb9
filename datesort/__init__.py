"""
datesort - Sort files into folders named after their dates.

Moves the files of a source directory into date-named folders of a target
directory, optionally renaming them after the date, with extension filters,
collision-free naming and a dry-run mode.
"""

__version__ = "1.0.0"
__copyright__ = "MIT License"


# Public API
from .cli import main
from .config import Config, SortConfig, load_settings
from .core import Sorter
from .errors import (CollisionResolutionExhausted, ConfigurationError, DirectoryCreationFailed,
                     FileError, MetadataUnavailable, MoveFailed, SortError)
from .file_operations import FileOperations
from .paths import FileHandle
from .stats import FileFailure, PlannedMove, SortReport
from .timestamps import DateType

__all__ = [ "main", "Config", "SortConfig", "load_settings", "Sorter", "FileOperations",
            "FileHandle", "SortReport", "FileFailure", "PlannedMove", "DateType",
            "SortError", "ConfigurationError", "FileError", "MetadataUnavailable",
            "CollisionResolutionExhausted", "MoveFailed", "DirectoryCreationFailed" ]
