"""
Tests for the mapfs command line interface.

Tests cover:
- ls, cat, tree, query on filesystem files
- convert between formats
- config viewing and editing
- Error exits for missing and malformed files
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from mapfs.cli import app
from mapfs.config import load_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep configuration reads and writes inside the test directory."""
    config_path = tmp_path / "config" / "config.json"
    monkeypatch.setattr("mapfs.config.get_config_path", lambda: config_path)
    return config_path


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "data.edn"
    path.write_text('{:config {:port 8080 :hosts ["a" "b"]} :notes "hi"}')
    return path


class TestReadCommands:
    """Test ls, cat, tree and query."""

    def test_ls_root(self, data_file):
        result = runner.invoke(app, ["ls", str(data_file)])

        assert result.exit_code == 0
        assert "D config" in result.stdout
        assert "- notes" in result.stdout

    def test_ls_path(self, data_file):
        result = runner.invoke(app, ["ls", str(data_file), "config"])

        assert result.exit_code == 0
        assert "- port" in result.stdout

    def test_ls_long(self, data_file):
        result = runner.invoke(app, ["ls", str(data_file), "--long"])

        assert result.exit_code == 0
        assert "config" in result.stdout
        assert "2 entries" in result.stdout

    def test_ls_not_a_directory(self, data_file):
        result = runner.invoke(app, ["ls", str(data_file), "notes"])

        assert result.exit_code == 1

    def test_ls_missing_file(self, tmp_path):
        result = runner.invoke(app, ["ls", str(tmp_path / "missing.edn")])

        assert result.exit_code == 1
        assert "File not found" in result.stdout

    def test_ls_malformed_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("[1, 2]")

        result = runner.invoke(app, ["ls", str(path)])

        assert result.exit_code == 1
        assert "Invalid filesystem file" in result.stdout

    def test_cat(self, data_file):
        result = runner.invoke(app, ["cat", str(data_file), "config/port"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "8080"

    def test_cat_string(self, data_file):
        result = runner.invoke(app, ["cat", str(data_file), "/notes"])

        assert result.stdout.strip() == "hi"

    def test_cat_missing_key(self, data_file):
        result = runner.invoke(app, ["cat", str(data_file), "config/nope"])

        assert result.exit_code == 1

    def test_tree(self, data_file):
        result = runner.invoke(app, ["tree", str(data_file)])

        assert result.exit_code == 0
        assert "config/" in result.stdout
        assert "port" in result.stdout

    def test_tree_depth(self, data_file):
        result = runner.invoke(app, ["tree", str(data_file), "--depth", "1"])

        assert result.exit_code == 0
        assert "config/" in result.stdout
        assert "port" not in result.stdout

    def test_query(self, data_file):
        result = runner.invoke(app, ["query", str(data_file), "config.hosts[0]"])

        assert result.exit_code == 0
        assert result.stdout.strip() == '"a"'

    def test_query_with_path(self, data_file):
        result = runner.invoke(app, ["query", str(data_file), "port", "--path", "config"])

        assert result.stdout.strip() == "8080"

    def test_query_invalid_expression(self, data_file):
        result = runner.invoke(app, ["query", str(data_file), "config["])

        assert result.exit_code == 1


class TestConvert:
    """Test re-encoding filesystem files."""

    def test_edn_to_json(self, data_file, tmp_path):
        dest = tmp_path / "data.json"

        result = runner.invoke(app, ["convert", str(data_file), str(dest)])

        assert result.exit_code == 0
        assert "Wrote filesystem to" in result.stdout
        assert json.loads(dest.read_text()) == {
            "config": {"port": 8080, "hosts": ["a", "b"]},
            "notes": "hi",
        }

    def test_tagged_leaf_edn_to_json(self, tmp_path):
        source = tmp_path / "pics.edn"
        source.write_text("{:pic {:tag :img :src \"a.png\"}}")
        dest = tmp_path / "pics.json"

        result = runner.invoke(app, ["convert", str(source), str(dest)])

        assert result.exit_code == 0
        assert json.loads(dest.read_text()) == {"pic": {"tag": "img", "src": "a.png"}}

    def test_json_to_yaml_to_edn(self, tmp_path):
        source = tmp_path / "data.json"
        source.write_text('{"a": {"b": [1, 2]}}')
        middle = tmp_path / "data.yaml"
        dest = tmp_path / "data.edn"

        runner.invoke(app, ["convert", str(source), str(middle)])
        runner.invoke(app, ["convert", str(middle), str(dest)])
        result = runner.invoke(app, ["cat", str(dest), "a/b"])

        assert result.stdout.strip() == "[1 2]"


class TestShellCommand:
    """Test launching the interactive shell."""

    def test_shell_loads_file(self, data_file):
        with patch("mapfs.repl.MapShell.run") as run:
            result = runner.invoke(app, ["shell", str(data_file)])

        assert result.exit_code == 0
        run.assert_called_once()

    def test_shell_missing_file(self, tmp_path):
        with patch("mapfs.repl.MapShell.run") as run:
            result = runner.invoke(app, ["shell", str(tmp_path / "missing.edn")])

        assert result.exit_code == 1
        run.assert_not_called()


class TestConfigCommand:
    """Test viewing and editing configuration."""

    def test_show_defaults(self):
        result = runner.invoke(app, ["config", "--show"])

        assert result.exit_code == 0
        assert "Default Format: edn" in result.stdout

    def test_init(self, isolated_config):
        result = runner.invoke(app, ["config", "--init"])

        assert result.exit_code == 0
        assert isolated_config.exists()

    def test_set_values(self):
        result = runner.invoke(app, ["config", "--default-format", "YAML", "--json-indent", "4"])

        assert result.exit_code == 0
        config = load_config()
        assert config.storage.default_format == "yaml"
        assert config.storage.json_indent == 4

    def test_unknown_format(self):
        result = runner.invoke(app, ["config", "--default-format", "toml"])

        assert result.exit_code == 1

    def test_default_format_applies_to_unknown_suffix(self, tmp_path):
        runner.invoke(app, ["config", "--default-format", "json"])
        source = tmp_path / "data.edn"
        source.write_text("{:a 1}")
        dest = tmp_path / "data.out"

        runner.invoke(app, ["convert", str(source), str(dest)])

        assert json.loads(dest.read_text()) == {"a": 1}


def test_about():
    result = runner.invoke(app, ["about"])

    assert result.exit_code == 0
    assert "mapfs" in result.stdout
