#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for configuration discovery and loading."""

import argparse
import json
from pathlib import Path

import pytest

from tidymd.config import env_overrides, find_config_in_parents, load_config_file, load_options, parse_bool
from tidymd.exceptions import ValidationError
from tidymd.options import TidyOptions


@pytest.mark.unit
class TestLoadConfigFile:
    """Test reading configuration files of each format."""

    def test_toml(self, tmp_path: Path):
        """TOML files are read as a table."""
        path = tmp_path / ".tidymd.toml"
        path.write_text("align-headers = false\n", encoding="utf-8")
        assert load_config_file(path) == {"align-headers": False}

    def test_yaml(self, tmp_path: Path):
        """YAML files are read as a mapping."""
        path = tmp_path / ".tidymd.yaml"
        path.write_text("ensure_first_header_is_h1: false\n", encoding="utf-8")
        assert load_config_file(path) == {"ensure_first_header_is_h1": False}

    def test_empty_yaml(self, tmp_path: Path):
        """An empty YAML file is an empty configuration."""
        path = tmp_path / ".tidymd.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == {}

    def test_json(self, tmp_path: Path):
        """JSON files are read as an object."""
        path = tmp_path / ".tidymd.json"
        path.write_text(json.dumps({"align_headers": False}), encoding="utf-8")
        assert load_config_file(path) == {"align_headers": False}

    def test_pyproject(self, tmp_path: Path):
        """Only the tool section of pyproject.toml is used."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[project]\nname = "x"\n\n[tool.tidymd]\nalign-headers = false\n', encoding="utf-8")
        assert load_config_file(path) == {"align-headers": False}

    def test_missing_file(self, tmp_path: Path):
        """Missing files are reported."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_invalid_content(self, tmp_path: Path):
        """Malformed files are reported."""
        path = tmp_path / ".tidymd.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid configuration"):
            load_config_file(path)

    def test_not_a_mapping(self, tmp_path: Path):
        """The root of a configuration must be a mapping."""
        path = tmp_path / ".tidymd.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="mapping"):
            load_config_file(path)

    def test_unsupported_extension(self, tmp_path: Path):
        """Unknown formats are rejected."""
        path = tmp_path / "config.ini"
        path.write_text("[x]", encoding="utf-8")
        with pytest.raises(argparse.ArgumentTypeError, match="Unsupported"):
            load_config_file(path)


@pytest.mark.unit
class TestDiscovery:
    """Test searching parent directories for configuration."""

    def test_found_in_parent(self, tmp_path: Path):
        """Configuration in a parent directory is found."""
        config = tmp_path / ".tidymd.toml"
        config.write_text("", encoding="utf-8")
        child = tmp_path / "a" / "b"
        child.mkdir(parents=True)
        assert find_config_in_parents(child) == config.resolve()

    def test_dedicated_file_preferred(self, tmp_path: Path):
        """Dedicated config files win over pyproject.toml in the same directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.tidymd]\nalign-headers = false\n", encoding="utf-8")
        (tmp_path / ".tidymd.json").write_text("{}", encoding="utf-8")
        assert find_config_in_parents(tmp_path).name == ".tidymd.json"

    def test_pyproject_without_section_skipped(self, tmp_path: Path):
        """A pyproject.toml without a tidymd table is not a config file."""
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "pyproject.toml").write_text("[tool.tidymd]\nalign-headers = false\n", encoding="utf-8")
        assert find_config_in_parents(tmp_path / "sub") == (tmp_path / "sub" / "pyproject.toml").resolve()


@pytest.mark.unit
class TestLoadOptions:
    """Test merging configuration sources."""

    def test_file_values(self, tmp_path: Path):
        """File values override the defaults."""
        path = tmp_path / ".tidymd.toml"
        path.write_text("align-headers = false\n", encoding="utf-8")
        assert load_options(path, environ={}) == TidyOptions(align_headers=False)

    def test_environment_overrides_file(self, tmp_path: Path):
        """Environment variables override file values."""
        path = tmp_path / ".tidymd.toml"
        path.write_text("align-headers = false\n", encoding="utf-8")
        options = load_options(path, environ={"TIDYMD_ALIGN_HEADERS": "true"})
        assert options.align_headers is True

    def test_cli_overrides_environment(self, tmp_path: Path):
        """Command-line values have the final word."""
        options = load_options(
            None,
            cli_overrides={"ensure_first_header_is_h1": False},
            environ={"TIDYMD_ENSURE_FIRST_HEADER_IS_H1": "1"},
            start_dir=tmp_path,
        )
        assert options.ensure_first_header_is_h1 is False

    def test_unknown_key(self, tmp_path: Path):
        """Unknown configuration keys are rejected."""
        path = tmp_path / ".tidymd.toml"
        path.write_text("colour = 'red'\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_options(path, environ={})

    def test_env_overrides(self):
        """Only known option variables are read."""
        environ = {"TIDYMD_ALIGN_HEADERS": "off", "TIDYMD_OTHER": "1", "ALIGN_HEADERS": "1"}
        assert env_overrides(environ) == {"align_headers": False}

    def test_parse_bool(self):
        """Common spellings of booleans are accepted."""
        assert parse_bool("Yes", "X") is True
        assert parse_bool(" 0 ", "X") is False
        with pytest.raises(argparse.ArgumentTypeError, match="Invalid boolean"):
            parse_bool("maybe", "X")
