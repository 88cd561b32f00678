"""Tests for configuration loading and saving."""

import json
from pathlib import Path

import pytest

from mapfs import config as config_module
from mapfs.config import (
    MapFSConfig,
    ShellConfig,
    StorageConfig,
    ensure_config_exists,
    get_history_path,
    load_config,
    save_config,
    update_config,
)


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    path = tmp_path / "mapfs" / "config.json"
    monkeypatch.setattr(config_module, "get_config_path", lambda: path)
    return path


class TestConfigPath:
    """Test locating the configuration file."""

    def test_xdg_directory(self, tmp_path, monkeypatch):
        (tmp_path / ".config").mkdir()
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert config_module.get_config_path() == tmp_path / ".config" / "mapfs" / "config.json"

    def test_fallback_directory(self, tmp_path, monkeypatch):
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert config_module.get_config_path() == tmp_path / ".mapfs" / "config.json"


class TestLoadAndSave:
    """Test reading and writing the configuration file."""

    def test_defaults_when_missing(self, config_path):
        config = load_config()

        assert config.shell == ShellConfig()
        assert config.storage == StorageConfig()

    def test_save_and_load(self, config_path):
        config = MapFSConfig()
        config.shell.prompt = "data"
        config.storage.default_format = "json"

        assert save_config(config) == config_path
        assert load_config() == config

    def test_invalid_json_falls_back_to_defaults(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text("{not json")

        assert load_config() == MapFSConfig()

    def test_unknown_keys_fall_back_to_defaults(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"shell": {"colour": True}}))

        assert load_config() == MapFSConfig()

    def test_partial_file_keeps_other_defaults(self, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_text(json.dumps({"storage": {"json_indent": 4}}))

        config = load_config()

        assert config.storage.json_indent == 4
        assert config.storage.default_format == "edn"
        assert config.shell.prompt == "mapfs"

    def test_ensure_config_exists(self, config_path):
        assert ensure_config_exists() == config_path
        assert json.loads(config_path.read_text()) == MapFSConfig().to_dict()

    def test_update_only_given_values(self, config_path):
        update_config(shell_prompt="data")
        config = update_config(storage_json_indent=8)

        assert config.shell.prompt == "data"
        assert config.storage.json_indent == 8
        assert load_config() == config


class TestHistoryPath:
    """Test the shell history location."""

    def test_default_next_to_config(self, config_path):
        assert get_history_path(MapFSConfig()) == config_path.parent / "history"

    def test_configured_path_is_expanded(self, config_path, tmp_path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        config = MapFSConfig()
        config.shell.history_file = "~/mapfs_history"

        assert get_history_path(config) == tmp_path / "mapfs_history"
