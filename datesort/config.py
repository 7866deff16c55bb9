"""
Configuration management for datesort.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

import yaml

from .constants import DEFAULT_DATE_FORMAT, DEFAULT_DATE_TYPE, PROGRAM
from .errors import ConfigurationError
from .filters import normalize_types
from .paths import FileHandle, PathInput
from .timestamps import DateType

SETTINGS_KEYS = ("source", "target", "date_format", "date_type",
                 "preserve_name", "exclude_type", "only_type")


@dataclass(frozen=True)
class SortConfig:
    """Immutable settings for one Sorter.

    Paths may be given as strings, Path objects or FileHandles; extension
    lists are lowercased and stripped of a leading dot; `date_type` may be a
    DateType or its code ("m" or "c").
    """

    source: FileHandle
    target: FileHandle
    date_format: str = DEFAULT_DATE_FORMAT
    date_type: DateType = DateType.MODIFIED
    preserve_name: bool = False
    exclude_type: FrozenSet[str] = field(default_factory=frozenset)
    only_type: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.preserve_name, bool):
            raise ConfigurationError(
                f"'preserve_name' must be true or false, not {self.preserve_name!r}"
            )
        object.__setattr__(self, "source", FileHandle.of(self.source))
        object.__setattr__(self, "target", FileHandle.of(self.target))
        object.__setattr__(self, "date_format", self.date_format or "")
        object.__setattr__(self, "date_type", DateType.parse(self.date_type))
        object.__setattr__(self, "exclude_type", normalize_types(self.exclude_type))
        object.__setattr__(self, "only_type", normalize_types(self.only_type))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], source: Optional[PathInput] = None,
                  target: Optional[PathInput] = None) -> "SortConfig":
        """Build a config from a settings mapping.

        `source` and `target` override the mapping's values, so a settings
        template without paths can be combined with paths chosen elsewhere.
        """
        unknown = set(data) - set(SETTINGS_KEYS)
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        source = source if source is not None else data.get("source")
        target = target if target is not None else data.get("target")
        if source is None or target is None:
            raise ConfigurationError("Source and target directories are required")

        for key in ("exclude_type", "only_type"):
            value = data.get(key)
            if value is not None and not isinstance(value, (list, tuple, set, frozenset, str)):
                raise ConfigurationError(f"'{key}' must be a list of extensions")
        if not isinstance(data.get("date_format", DEFAULT_DATE_FORMAT), str):
            raise ConfigurationError("'date_format' must be a string")

        return cls(
            source=source,
            target=target,
            date_format=data.get("date_format", DEFAULT_DATE_FORMAT),
            date_type=data.get("date_type", DEFAULT_DATE_TYPE),
            preserve_name=data.get("preserve_name", False),
            exclude_type=data.get("exclude_type") or (),
            only_type=data.get("only_type") or (),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.source),
            "target": str(self.target),
            "date_format": self.date_format,
            "date_type": self.date_type.value,
            "preserve_name": self.preserve_name,
            "exclude_type": sorted(self.exclude_type),
            "only_type": sorted(self.only_type),
        }


def load_settings(path: Path) -> Dict[str, Any]:
    """Load sort settings from a YAML or JSON file."""
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Could not read settings file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Could not parse settings file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    return data


class Config:
    """Manages configuration file for storing user preferences."""

    def __init__(self, config_path: Optional[Path] = None):
        # Default config location: ~/.<PROGRAM>/config.yml
        if config_path:
            self.config_path = Path(config_path)
        else:
            self.config_path = Path.home() / f".{PROGRAM}" / "config.yml"
        self.program_root = self.config_path.parent
        self.data = self._load_config()

    def _load_config(self) -> Dict:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            return {}

        try:
            with open(self.config_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(PROGRAM).warning(f"Could not load config: {e}")
            return {}

        if not isinstance(data, dict):
            logging.getLogger(PROGRAM).warning(f"Ignoring malformed config: {self.config_path}")
            return {}
        return data

    def save_config(self) -> None:
        """Save current configuration to file."""
        try:
            self.program_root.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, 'w') as f:
                yaml.safe_dump(self.data, f, default_flow_style=False)
        except OSError as e:
            logging.getLogger(PROGRAM).error(f"Could not save config: {e}")

    def get_last_source(self) -> Optional[str]:
        return self.data.get('last_source')

    def get_last_target(self) -> Optional[str]:
        return self.data.get('last_target')

    def get_date_format(self) -> Optional[str]:
        return self.data.get('date_format')

    def get_date_type(self) -> Optional[str]:
        return self.data.get('date_type')

    def get_preserve_name(self) -> Optional[bool]:
        return self.data.get('preserve_name')

    def get_exclude_type(self) -> List[str]:
        return list(self.data.get('exclude_type') or [])

    def get_only_type(self) -> List[str]:
        return list(self.data.get('only_type') or [])

    def get_defaults(self) -> Dict[str, Any]:
        """Saved sort options, without paths, as a settings mapping."""
        return {key: self.data[key] for key in SETTINGS_KEYS
                if key not in ("source", "target") and self.data.get(key) is not None}

    def update_paths(self, source: str, target: str) -> None:
        """Update and save the last used paths."""
        self.data['last_source'] = source
        self.data['last_target'] = target
        self.save_config()

    def update_defaults(self, date_format: Optional[str] = None, date_type: Optional[str] = None,
                        preserve_name: Optional[bool] = None,
                        exclude_type: Optional[Iterable[str]] = None,
                        only_type: Optional[Iterable[str]] = None) -> None:
        """Update and save the given sort options; None leaves a value as is."""
        updates = {
            'date_format': date_format,
            'date_type': date_type,
            'preserve_name': preserve_name,
            'exclude_type': sorted(normalize_types(exclude_type)) if exclude_type is not None else None,
            'only_type': sorted(normalize_types(only_type)) if only_type is not None else None,
        }
        changed = False
        for key, value in updates.items():
            if value is not None and self.data.get(key) != value:
                self.data[key] = value
                changed = True
        if changed:
            self.save_config()
