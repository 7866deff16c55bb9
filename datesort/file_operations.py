"""
Filesystem side effects of sorting: directory creation, collision-free
destination names and safe moves.
"""

import errno
import hashlib
import logging
from pathlib import Path
from typing import Optional, Set

from .constants import COLLISION_TEMPLATE, MAX_COLLISION_PROBES, get_logger
from .errors import CollisionResolutionExhausted, DirectoryCreationFailed, MoveFailed
from .naming import destination_name
from .paths import FileHandle


class FileOperations:
    """Directory creation, collision resolution and moves, with dry-run support."""

    def __init__(self, dry_run: bool = False, logger: Optional[logging.Logger] = None,
                 max_probes: int = MAX_COLLISION_PROBES):
        self.dry_run = dry_run
        self.logger = logger or get_logger()
        self.max_probes = max_probes
        # Destinations handed out during the current run
        self._claimed: Set[Path] = set()

    @staticmethod
    def same_size_same_hash(file1: Path, file2: Path) -> bool:
        """Compare sizes, then SHA-256 hashes, of two files."""
        try:
            if file1.stat().st_size != file2.stat().st_size:
                return False

            hash1 = hashlib.sha256()
            hash2 = hashlib.sha256()
            with open(file1, 'rb') as f1, open(file2, 'rb') as f2:
                while True:
                    chunk1 = f1.read(65536)
                    chunk2 = f2.read(65536)
                    if not chunk1 and not chunk2:
                        break
                    hash1.update(chunk1)
                    hash2.update(chunk2)

            return hash1.hexdigest() == hash2.hexdigest()
        except OSError:
            return False

    def ensure_directory(self, directory: FileHandle) -> None:
        """Create directory and parents if needed, with dry-run support.

        A dry run creates nothing but still fails where a real run would: when
        the nearest existing ancestor of `directory` is not a directory.
        """
        if directory.is_dir():
            return

        if self.dry_run:
            existing = directory
            while not existing.lexists() and existing.parent != existing:
                existing = existing.parent
            if not existing.is_dir():
                raise DirectoryCreationFailed(
                    directory.path, f"cannot create directory: {existing} is not a directory"
                )
            return

        try:
            directory.make_dirs()
        except OSError as e:
            raise DirectoryCreationFailed(directory.path, f"cannot create directory: {e}") from e
        self.logger.debug(f"Created directory {directory}")

    def _is_taken(self, candidate: FileHandle) -> bool:
        return candidate.path in self._claimed or candidate.lexists()

    def resolve_collision(self, target_dir: FileHandle, candidate_name: str) -> FileHandle:
        """Return a destination in `target_dir` that is neither on disk nor
        already claimed in this run.

        `name.ext` is tried first, then `name (1).ext`, `name (2).ext`, ...
        The chosen path is claimed so later files in the run skip it.
        """
        candidate = target_dir / candidate_name
        if not self._is_taken(candidate):
            self._claimed.add(candidate.path)
            return candidate

        stem = candidate.stem
        extension = candidate.extension
        for counter in range(1, self.max_probes + 1):
            name = destination_name(COLLISION_TEMPLATE.format(stem=stem, counter=counter), extension)
            candidate = target_dir / name
            if not self._is_taken(candidate):
                self.logger.debug(f"Name collision for {candidate_name}, using {name}")
                self._claimed.add(candidate.path)
                return candidate

        raise CollisionResolutionExhausted(
            (target_dir / candidate_name).path,
            f"no free name after {self.max_probes} attempts"
        )

    def move_file_safely(self, source: FileHandle, dest: FileHandle) -> FileHandle:
        """Move `source` to `dest`.

        Within one filesystem this is an atomic rename. Across filesystems the
        file is copied, the copy is verified against the source, and only then
        is the source deleted; a partial copy is removed on failure.
        """
        if self.dry_run:
            return dest

        try:
            source.rename_to(dest)
        except OSError as e:
            if e.errno != errno.EXDEV:
                raise MoveFailed(source.path, f"cannot move to {dest}: {e}", dest.path) from e
            self._copy_then_delete(source, dest)

        if not dest.exists():
            raise MoveFailed(source.path, f"file not found after move: {dest}", dest.path)

        self.logger.info(f"{source} -> {dest}")
        return dest

    def _copy_then_delete(self, source: FileHandle, dest: FileHandle) -> None:
        self.logger.debug(f"{source} and {dest} are on different filesystems, copying")
        try:
            source.copy_to(dest)
            if not self.same_size_same_hash(source.path, dest.path):
                raise OSError(f"copy of {source} does not match the original")
        except OSError as e:
            self._remove_partial(dest)
            raise MoveFailed(source.path, f"cannot copy to {dest}: {e}", dest.path) from e

        try:
            source.unlink()
        except OSError as e:
            # Source is untouched, so drop the copy rather than keep two
            self._remove_partial(dest)
            raise MoveFailed(source.path, f"cannot remove source after copy: {e}",
                             dest.path) from e

    def _remove_partial(self, dest: FileHandle) -> None:
        try:
            dest.unlink(missing_ok=True)
        except OSError as e:
            self.logger.warning(f"Could not remove partial copy {dest}: {e}")
