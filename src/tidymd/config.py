#  Copyright (c) 2025 Tom Villani, Ph.D.

"""Configuration file discovery and loading for the tidymd CLI.

Options are read, lowest priority first, from:

1. A configuration file: ``.tidymd.toml``, ``.tidymd.yaml``, ``.tidymd.yml``,
   ``.tidymd.json``, or the ``[tool.tidymd]`` table of a ``pyproject.toml``,
   found by walking up from the working directory (or given explicitly)
2. ``TIDYMD_<OPTION>`` environment variables
3. Command-line flags
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from dataclasses import fields
from typing import Any, Dict, Mapping, Optional

import yaml

from tidymd.constants import CONFIG_FILENAMES, ENV_VAR_PREFIX, PYPROJECT_TOOL_SECTION
from tidymd.options import TidyOptions

logger = logging.getLogger(__name__)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.tidymd]`` table from a pyproject.toml file.

    Returns an empty dict when the table is absent.

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be parsed or the section is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading pyproject.toml {pyproject_path}: {e}") from e

    config = data.get("tool", {}).get(PYPROJECT_TOOL_SECTION, {})
    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"[tool.{PYPROJECT_TOOL_SECTION}] section in {pyproject_path} must be a table, "
            f"got {type(config).__name__}"
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Each directory is checked for the dedicated config files in priority
    order, then for a pyproject.toml with a ``[tool.tidymd]`` section.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if config_path.is_file():
                return config_path

        pyproject_path = current / "pyproject.toml"
        if pyproject_path.is_file():
            try:
                if _load_pyproject_section(pyproject_path):
                    return pyproject_path
            except argparse.ArgumentTypeError as e:
                # a broken pyproject.toml does not stop the search
                logger.debug("Skipping %s: %s", pyproject_path, e)

        parent = current.parent
        if parent == current:
            return None
        current = parent


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    argparse.ArgumentTypeError
        If the file cannot be read, parsed, or has invalid format

    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise argparse.ArgumentTypeError(f"Configuration file does not exist: {config_path}")
    if not config_path.is_file():
        raise argparse.ArgumentTypeError(f"Configuration path is not a file: {config_path}")

    if config_path.name.lower() == "pyproject.toml":
        return _load_pyproject_section(config_path)

    ext = config_path.suffix.lower()
    try:
        if ext == ".toml":
            with open(config_path, "rb") as f:
                config = tomllib.load(f)
        elif ext in (".yaml", ".yml"):
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
            if config is None:
                config = {}
        elif ext == ".json":
            with open(config_path, "r", encoding="utf-8") as f:
                config = json.load(f)
        else:
            raise argparse.ArgumentTypeError(f"Unsupported config file format: {ext}. Use .json, .toml, or .yaml")
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise argparse.ArgumentTypeError(f"Invalid configuration in {config_path}: {e}") from e
    except OSError as e:
        raise argparse.ArgumentTypeError(f"Error reading config file {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise argparse.ArgumentTypeError(
            f"Config file {config_path} must contain a mapping at root level, got {type(config).__name__}"
        )
    return config


def parse_bool(value: str, name: str) -> bool:
    """Parse a boolean from an environment variable value.

    Raises
    ------
    argparse.ArgumentTypeError
        If the value is not a recognized boolean
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean for {name}: {value!r}")


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, bool]:
    """Collect option values from ``TIDYMD_<OPTION>`` environment variables."""
    environ = os.environ if environ is None else environ
    overrides = {}
    for f in fields(TidyOptions):
        name = f"{ENV_VAR_PREFIX}{f.name.upper()}"
        if name in environ:
            overrides[f.name] = parse_bool(environ[name], name)
    return overrides


def load_options(
    config_path: Optional[Path | str] = None,
    cli_overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    start_dir: Optional[Path] = None,
) -> TidyOptions:
    """Merge file, environment and command-line settings into options.

    Parameters
    ----------
    config_path : Path or str, optional
        Explicit configuration file; discovered from ``start_dir`` when omitted
    cli_overrides : Mapping, optional
        Values given on the command line, highest priority
    environ : Mapping, optional
        Environment to read, defaults to ``os.environ``
    start_dir : Path, optional
        Where configuration discovery starts

    Returns
    -------
    TidyOptions
        The merged options

    """
    if config_path is None:
        config_path = find_config_in_parents(start_dir)

    merged: Dict[str, Any] = {}
    if config_path is not None:
        logger.debug("Loading configuration from %s", config_path)
        merged.update({key.replace("-", "_"): value for key, value in load_config_file(config_path).items()})
    merged.update(env_overrides(environ))
    merged.update(cli_overrides or {})

    return TidyOptions.from_mapping(merged)
