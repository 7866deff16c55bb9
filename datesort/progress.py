"""Progress tracking context for datesort runs."""

from typing import Optional
from rich.progress import Progress, TaskID


class ProgressContext:
    """Where the Sorter reports how far a run has got.

    Without a rich Progress and task id every call is a no-op, so library
    callers can leave it out.
    """

    def __init__(self, progress: Optional[Progress] = None, task: Optional[TaskID] = None):
        self.progress = progress
        self.task = task

    @property
    def is_active(self) -> bool:
        return self.progress is not None and self.task is not None

    def start(self, total: int) -> None:
        """Set the number of files the run will step through."""
        if self.is_active:
            self.progress.update(self.task, total=total, completed=0)

    def update(self, description: str) -> None:
        if self.is_active:
            self.progress.update(self.task, description=description)

    def advance(self, steps: int = 1) -> None:
        if self.is_active:
            self.progress.advance(self.task, steps)
