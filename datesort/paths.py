"""
Uniform handle for filesystem entries.

FileHandle wraps a pathlib.Path and can be built from a string, any
os.PathLike object or another FileHandle, so callers never care which one
they were given.
"""

import os
import shutil
from pathlib import Path
from typing import Iterator, List, Optional, Union

PathInput = Union[str, "os.PathLike[str]", "FileHandle"]


class FileHandle:
    """A file or directory, identified by its path."""

    __slots__ = ("path",)

    def __init__(self, path: PathInput):
        if isinstance(path, FileHandle):
            path = path.path
        self.path = Path(path)

    @classmethod
    def of(cls, path: PathInput) -> "FileHandle":
        """Return `path` unchanged if it is already a handle, else wrap it."""
        if isinstance(path, cls):
            return path
        return cls(path)

    def __fspath__(self) -> str:
        return os.fspath(self.path)

    def __str__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"FileHandle({str(self.path)!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, FileHandle):
            return self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)

    def __lt__(self, other: "FileHandle") -> bool:
        return self.path < other.path

    def __truediv__(self, other: Union[str, "os.PathLike[str]"]) -> "FileHandle":
        return FileHandle(self.path / other)

    # Queries

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        """File extension without the leading dot, original case ('' if none)."""
        return self.path.suffix[1:]

    @property
    def parent(self) -> "FileHandle":
        return FileHandle(self.path.parent)

    def exists(self) -> bool:
        return self.path.exists()

    def lexists(self) -> bool:
        """True for any entry at this path, including a dangling symlink."""
        return os.path.lexists(self.path)

    def is_dir(self) -> bool:
        return self.path.is_dir()

    def is_file(self) -> bool:
        return self.path.is_file()

    def size(self) -> int:
        return self.path.stat().st_size

    def modified_time(self) -> float:
        """Last modification time as seconds since the epoch."""
        return self.path.stat().st_mtime

    def created_time(self) -> Optional[float]:
        """Creation time as seconds since the epoch, or None if the platform
        does not record it."""
        st = self.path.stat()
        birthtime = getattr(st, "st_birthtime", None)
        if birthtime is not None:
            return birthtime
        if os.name == "nt":
            return st.st_ctime
        return None

    def iter_files(self) -> Iterator["FileHandle"]:
        """Yield the regular files directly inside this directory."""
        for child in self.path.iterdir():
            if child.is_file():
                yield FileHandle(child)

    def list_files(self) -> List["FileHandle"]:
        return sorted(self.iter_files())

    # Mutations

    def make_dirs(self) -> None:
        """Create this directory and any missing parents."""
        self.path.mkdir(parents=True, exist_ok=True)

    def rename_to(self, dest: "FileHandle") -> "FileHandle":
        """Atomically rename within one filesystem (OSError/EXDEV otherwise)."""
        os.rename(self.path, dest.path)
        return dest

    def copy_to(self, dest: "FileHandle") -> "FileHandle":
        """Copy contents and metadata to `dest`."""
        shutil.copy2(self.path, dest.path)
        return dest

    def unlink(self, missing_ok: bool = False) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            if not missing_ok:
                raise
