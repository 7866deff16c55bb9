"""Resolving the date a file is sorted by."""

import logging
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from .constants import get_logger
from .errors import ConfigurationError, MetadataUnavailable
from .paths import FileHandle


class DateType(Enum):
    """Which filesystem timestamp seeds the destination folder."""

    MODIFIED = "m"
    CREATED = "c"

    @classmethod
    def parse(cls, value: Union["DateType", str]) -> "DateType":
        """Accept a DateType or its one-letter code."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            codes = ", ".join(repr(d.value) for d in cls)
            raise ConfigurationError(f"Invalid date type {value!r} (expected one of {codes})")


def resolve_date(file: FileHandle, date_type: DateType,
                 logger: Optional[logging.Logger] = None) -> datetime:
    """Return the local date and time of `file` according to `date_type`.

    Creation time is not recorded on every platform; when it is missing the
    modification time is used instead and a warning is logged.
    """
    logger = logger or get_logger()

    if date_type is DateType.CREATED:
        try:
            created = file.created_time()
        except OSError as e:
            raise MetadataUnavailable(file.path, f"cannot read timestamps: {e}") from e
        if created is not None:
            return _local_datetime(file, created)
        logger.warning(f"Creation time unavailable for {file}, using modification time")

    try:
        modified = file.modified_time()
    except OSError as e:
        raise MetadataUnavailable(file.path, f"cannot read timestamps: {e}") from e
    return _local_datetime(file, modified)


def _local_datetime(file: FileHandle, timestamp: float) -> datetime:
    try:
        return datetime.fromtimestamp(timestamp)
    except (OverflowError, OSError, ValueError) as e:
        raise MetadataUnavailable(file.path, f"timestamp {timestamp} out of range: {e}") from e
