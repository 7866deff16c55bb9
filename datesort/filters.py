"""
Extension-based inclusion and exclusion of files.
"""

from typing import AbstractSet, FrozenSet, Iterable, Optional


def normalize_extension(extension: str) -> str:
    """Lowercase an extension and drop one leading dot ('.JPG' -> 'jpg')."""
    extension = extension.strip().lower()
    if extension.startswith("."):
        extension = extension[1:]
    return extension


def normalize_types(types: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Normalize a list of extensions into a lookup set."""
    if not types:
        return frozenset()
    if isinstance(types, str):
        types = [types]
    return frozenset(normalize_extension(t) for t in types)


def is_eligible(extension: str, only_type: AbstractSet[str],
                exclude_type: AbstractSet[str]) -> bool:
    """Decide whether a file with `extension` should be sorted.

    A non-empty `only_type` wins outright and `exclude_type` is then ignored.
    Extensionless files are matched as the empty string.
    """
    extension = normalize_extension(extension)
    if only_type:
        return extension in only_type
    if exclude_type:
        return extension not in exclude_type
    return True
