"""
Results of a sorting run.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List


@dataclass(frozen=True)
class PlannedMove:
    """A file's source path and its collision-free destination."""
    source: Path
    destination: Path


@dataclass(frozen=True)
class FileFailure:
    """A file that could not be sorted, and why."""
    path: Path
    kind: str
    message: str


@dataclass
class SortReport:
    """Counts and per-file outcomes of one Sorter.sort() call."""

    dry_run: bool = False
    eligible: int = 0
    skipped: int = 0
    moved: int = 0
    planned: int = 0
    failed: int = 0
    failures: List[FileFailure] = field(default_factory=list)
    moves: List[PlannedMove] = field(default_factory=list)

    def record_eligible(self) -> None:
        self.eligible += 1

    def record_skipped(self) -> None:
        """Count a file excluded by the type filter."""
        self.skipped += 1

    def record_move(self, source: Path, destination: Path) -> None:
        """Count a completed move, or a planned one during a dry run."""
        self.moves.append(PlannedMove(source, destination))
        if self.dry_run:
            self.planned += 1
        else:
            self.moved += 1

    def record_failure(self, path: Path, kind: str, message: str) -> None:
        self.failures.append(FileFailure(path, kind, message))
        self.failed += 1

    @property
    def succeeded(self) -> int:
        """Files moved, or planned during a dry run."""
        return self.planned if self.dry_run else self.moved

    @property
    def success(self) -> bool:
        """True when no file failed."""
        return self.failed == 0

    @property
    def partial(self) -> bool:
        """True when some files went through and others failed."""
        return self.failed > 0 and self.succeeded > 0

    def get_stats(self) -> Dict[str, int]:
        return {
            'eligible': self.eligible,
            'skipped': self.skipped,
            'moved': self.moved,
            'planned': self.planned,
            'failed': self.failed,
        }
