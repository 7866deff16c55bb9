"""
Core date sorting functionality.
"""

import logging
from typing import List, Optional

from .config import SortConfig
from .constants import FALLBACK_DATE_FORMAT, get_logger
from .errors import ConfigurationError, FileError
from .file_operations import FileOperations
from .filters import is_eligible
from .naming import destination_name, format_destination, is_valid_pattern
from .paths import FileHandle
from .progress import ProgressContext
from .stats import SortReport
from .timestamps import resolve_date


class Sorter:
    """Moves the files of a source directory into date-named folders of a
    target directory.

    Only the direct children of the source are sorted. Failures of single
    files are recorded in the returned SortReport and never stop the run; a
    ConfigurationError is raised before anything is touched.
    """

    def __init__(self, config: SortConfig, logger: Optional[logging.Logger] = None,
                 progress: Optional[ProgressContext] = None):
        self.config = config
        self.logger = logger or get_logger()
        self.progress = progress or ProgressContext()
        self.file_ops: Optional[FileOperations] = None

    @property
    def source(self) -> FileHandle:
        return self.config.source

    @property
    def target(self) -> FileHandle:
        return self.config.target

    def validate(self) -> None:
        """Raise ConfigurationError if the run cannot start."""
        if not self.source.exists():
            raise ConfigurationError(f"Source directory does not exist: {self.source}")
        if not self.source.is_dir():
            raise ConfigurationError(f"Source is not a directory: {self.source}")
        if self.target.exists() and not self.target.is_dir():
            raise ConfigurationError(f"Target is not a directory: {self.target}")

    def find_source_files(self) -> List[FileHandle]:
        """Enumerate the regular files directly inside the source directory."""
        try:
            return self.source.list_files()
        except OSError as e:
            raise ConfigurationError(f"Cannot list source directory {self.source}: {e}") from e

    def begin_run(self, dry_run: bool = False) -> SortReport:
        """Validate and prepare a run; returns the report that sort_file() fills."""
        self.validate()
        if not is_valid_pattern(self.config.date_format):
            self.logger.warning(f"Invalid date format {self.config.date_format!r}, "
                                f"using {FALLBACK_DATE_FORMAT!r}")
        self.file_ops = FileOperations(dry_run=dry_run, logger=self.logger)
        return SortReport(dry_run=dry_run)

    def sort(self, dry_run: bool = False) -> SortReport:
        """Sort every eligible file once and report the outcome.

        With `dry_run` the same decisions are made and reported, but nothing
        is created, moved or deleted.
        """
        report = self.begin_run(dry_run)
        files = self.find_source_files()

        mode = "DRY RUN" if dry_run else "MOVE"
        self.logger.info(f"Sorting {len(files)} files: {self.source} -> {self.target} ({mode})")
        self.progress.start(len(files))

        for file in files:
            self.sort_file(file, report)
            self.progress.advance()

        self.logger.info(f"Finished: {report.get_stats()}")
        return report

    def sort_file(self, file: FileHandle, report: SortReport) -> Optional[FileHandle]:
        """Sort one file into the run started by begin_run().

        Returns the destination (planned, in a dry run), or None when the file
        was skipped or failed.
        """
        if self.file_ops is None:
            raise RuntimeError("begin_run() must be called before sort_file()")

        config = self.config
        if not is_eligible(file.extension, config.only_type, config.exclude_type):
            self.logger.debug(f"Skipping {file.name}: type not selected")
            report.record_skipped()
            return None

        report.record_eligible()
        self.progress.update(f"Sorting {file.name}")

        try:
            dest = self._sort_single_file(file)
        except FileError as e:
            self.logger.error(f"Failed to sort {file}: {e.message}")
            report.record_failure(file.path, e.kind, e.message)
            return None

        report.record_move(file.path, dest.path)
        return dest

    def _sort_single_file(self, file: FileHandle) -> FileHandle:
        config = self.config
        date = resolve_date(file, config.date_type, self.logger)
        folder_name, file_stem = format_destination(
            date, config.date_format, file.stem, config.preserve_name
        )

        dest_dir = self.target / folder_name
        self.file_ops.ensure_directory(dest_dir)

        dest = self.file_ops.resolve_collision(dest_dir, destination_name(file_stem, file.extension))
        if self.file_ops.dry_run:
            self.logger.info(f"[dry run] {file} -> {dest}")
            return dest

        return self.file_ops.move_file_safely(file, dest)
