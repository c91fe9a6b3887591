"""Unit tests for TOML configuration loader."""

import tomllib
from pathlib import Path

import pytest

from navgraph.config.loader import (
    deep_merge,
    get_config_dir,
    get_environment,
    load_config,
    load_toml,
)


class TestDeepMerge:
    """Tests for deep_merge function."""

    def test_merge_nested_dicts(self) -> None:
        base = {"a": {"x": 1, "y": 2}, "b": 3}
        override = {"a": {"y": 20, "z": 30}}
        assert deep_merge(base, override) == {"a": {"x": 1, "y": 20, "z": 30}, "b": 3}

    def test_override_replaces_non_dict(self) -> None:
        assert deep_merge({"a": {"x": 1}}, {"a": "replaced"}) == {"a": "replaced"}

    def test_base_unmodified(self) -> None:
        base = {"a": 1}
        deep_merge(base, {"b": 2})
        assert base == {"a": 1}


class TestLoadToml:
    def test_load_valid_toml(self, tmp_path: Path) -> None:
        toml_file = tmp_path / "test.toml"
        toml_file.write_text('[section]\nkey = "value"\nnumber = 42')
        assert load_toml(toml_file) == {"section": {"key": "value", "number": 42}}

    def test_load_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_toml(tmp_path / "nonexistent.toml")

    def test_load_invalid_toml_raises(self, tmp_path: Path) -> None:
        invalid_file = tmp_path / "invalid.toml"
        invalid_file.write_text("[unclosed")
        with pytest.raises(tomllib.TOMLDecodeError):
            load_toml(invalid_file)


class TestEnvironment:
    def test_default_environment(self, env_override) -> None:
        with env_override({"NAVGRAPH_ENV": "development"}):
            assert get_environment() == "development"

    def test_config_dir_override(self, test_config_dir: Path, env_override) -> None:
        with env_override({"NAVGRAPH_CONFIG_DIR": str(test_config_dir)}):
            assert get_config_dir() == test_config_dir

    def test_missing_config_dir_override(self, tmp_path: Path, env_override) -> None:
        with env_override({"NAVGRAPH_CONFIG_DIR": str(tmp_path / "missing")}):
            with pytest.raises(FileNotFoundError):
                get_config_dir()


class TestLoadConfig:
    """Tests for load_config with environment overlays."""

    def test_merges_environment_file(
        self, test_config_dir: Path, mock_toml_files, env_override
    ) -> None:
        mock_toml_files({
            "default.toml": "[engine]\nmax_composite_depth = 8\nwarn_on_unreachable = true",
            "staging.toml": "[engine]\nmax_composite_depth = 4",
        })
        with env_override({
            "NAVGRAPH_CONFIG_DIR": str(test_config_dir),
            "NAVGRAPH_ENV": "staging",
        }):
            config = load_config()

        assert config["engine"] == {"max_composite_depth": 4, "warn_on_unreachable": True}

    def test_missing_environment_file_is_fine(
        self, test_config_dir: Path, mock_toml_files, env_override
    ) -> None:
        mock_toml_files({"default.toml": "debug = false"})
        with env_override({
            "NAVGRAPH_CONFIG_DIR": str(test_config_dir),
            "NAVGRAPH_ENV": "production",
        }):
            assert load_config() == {"debug": False}

    def test_missing_default_raises(self, test_config_dir: Path, env_override) -> None:
        with env_override({"NAVGRAPH_CONFIG_DIR": str(test_config_dir)}):
            with pytest.raises(FileNotFoundError, match="default.toml"):
                load_config()
