"""
Test sort settings, settings files and persisted preferences.
"""

import json

import pytest
import yaml

from datesort.config import Config, SortConfig, load_settings
from datesort.errors import ConfigurationError
from datesort.paths import FileHandle
from datesort.timestamps import DateType


class TestSortConfig:
    """Test normalization and construction of sort settings."""

    def test_defaults(self, tmp_path):
        config = SortConfig(source=tmp_path, target=tmp_path / "out")
        assert config.source == FileHandle(tmp_path)
        assert config.date_format == "%Y"
        assert config.date_type is DateType.MODIFIED
        assert config.preserve_name is False
        assert config.exclude_type == frozenset()
        assert config.only_type == frozenset()

    def test_normalization(self, tmp_path):
        config = SortConfig(source=str(tmp_path), target=tmp_path, date_type="c",
                            exclude_type=[".TXT", "Log"], only_type=("JPG",))
        assert isinstance(config.source, FileHandle)
        assert config.date_type is DateType.CREATED
        assert config.exclude_type == frozenset({"txt", "log"})
        assert config.only_type == frozenset({"jpg"})

    def test_preserve_name_must_be_bool(self, tmp_path):
        with pytest.raises(ConfigurationError, match="preserve_name"):
            SortConfig(source=tmp_path, target=tmp_path, preserve_name="false")

    def test_immutable(self, tmp_path):
        config = SortConfig(source=tmp_path, target=tmp_path)
        with pytest.raises(AttributeError):
            config.preserve_name = True

    def test_from_dict(self, tmp_path):
        data = {
            "date_format": "%Y-%m-%d %Hh%Mm%Ss",
            "date_type": "m",
            "preserve_name": False,
            "exclude_type": ["png"],
            "only_type": ["json", "py"],
        }
        config = SortConfig.from_dict(data, source=tmp_path, target=tmp_path / "out")
        assert config.date_format == "%Y-%m-%d %Hh%Mm%Ss"
        assert config.exclude_type == frozenset({"png"})
        assert config.only_type == frozenset({"json", "py"})
        assert config.target == FileHandle(tmp_path / "out")

    def test_from_dict_round_trip_through_to_dict(self, tmp_path):
        config = SortConfig(source=tmp_path, target=tmp_path / "out", date_type="c",
                            preserve_name=True, exclude_type=["txt"])
        assert SortConfig.from_dict(config.to_dict()) == config

    def test_from_dict_paths_from_mapping(self, tmp_path):
        config = SortConfig.from_dict({"source": str(tmp_path), "target": str(tmp_path / "t")})
        assert config.source == FileHandle(tmp_path)

    @pytest.mark.parametrize("data", [
        {"date_type": "x"},
        {"colour": "blue"},
        {"exclude_type": 5},
        {"date_type": ""},
        {"date_type": False},
        {"date_type": 0},
        {"date_type": None},
        {"preserve_name": "false"},
        {"preserve_name": 1},
        {"date_format": None},
    ])
    def test_from_dict_errors(self, tmp_path, data):
        with pytest.raises(ConfigurationError):
            SortConfig.from_dict(data, source=tmp_path, target=tmp_path)

    def test_from_dict_requires_paths(self):
        with pytest.raises(ConfigurationError, match="required"):
            SortConfig.from_dict({"date_format": "%Y"})


class TestLoadSettings:
    """Test YAML and JSON settings files."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "settings.yml"
        path.write_text("date_format: '%Y-%m'\npreserve_name: true\nexclude_type: [txt]\n")
        assert load_settings(path) == {"date_format": "%Y-%m", "preserve_name": True,
                                       "exclude_type": ["txt"]}

    def test_json(self, tmp_path):
        path = tmp_path / "template.json"
        path.write_text(json.dumps({"date_format": "%Y", "date_type": "c",
                                    "exclude_type": [], "only_type": ["md"],
                                    "preserve_name": True}))
        settings = load_settings(path)
        assert settings["date_type"] == "c"
        assert settings["only_type"] == ["md"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_settings(path) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_settings(path)

    def test_malformed(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("date_format: [unclosed\n")
        with pytest.raises(ConfigurationError, match="parse"):
            load_settings(path)

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigurationError, match="read"):
            load_settings(tmp_path / "missing.yml")


class TestConfig:
    """Test persisted user preferences."""

    def test_missing_file_is_empty(self, test_config_path):
        config = Config(config_path=test_config_path)
        assert config.data == {}
        assert config.get_last_source() is None
        assert config.get_defaults() == {}

    def test_paths_persist(self, test_config_path):
        Config(config_path=test_config_path).update_paths("/src", "/dst")

        reloaded = Config(config_path=test_config_path)
        assert reloaded.get_last_source() == "/src"
        assert reloaded.get_last_target() == "/dst"
        assert yaml.safe_load(test_config_path.read_text())["last_target"] == "/dst"

    def test_defaults_persist(self, test_config_path):
        config = Config(config_path=test_config_path)
        config.update_defaults(date_format="%Y-%m", exclude_type=[".TXT"])

        reloaded = Config(config_path=test_config_path)
        assert reloaded.get_date_format() == "%Y-%m"
        assert reloaded.get_exclude_type() == ["txt"]
        assert reloaded.get_defaults() == {"date_format": "%Y-%m", "exclude_type": ["txt"]}

    def test_none_leaves_values(self, test_config_path):
        config = Config(config_path=test_config_path)
        config.update_defaults(date_type="c")
        config.update_defaults(date_type=None, preserve_name=True)
        assert config.get_date_type() == "c"
        assert config.get_preserve_name() is True

    def test_corrupt_file_is_ignored(self, test_config_path):
        test_config_path.parent.mkdir(parents=True)
        test_config_path.write_text("{not: [valid")
        assert Config(config_path=test_config_path).data == {}
