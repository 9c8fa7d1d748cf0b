"""Locate and parse release_tasks configuration files.

YAML and TOML are both accepted; the parser is picked from the file suffix.
A project without any configuration file runs with the defaults, still
subject to RELEASE_TASKS_ environment overrides.
"""

import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from release_tasks.config.models import ProjectSettings
from release_tasks.exceptions import ConfigurationError

SEARCH_PATHS = [
    "config/release_tasks.yml",
    "config/release_tasks.yaml",
    "release_tasks.yml",
    "release_tasks.yaml",
    "config/release_tasks.toml",
    "release_tasks.toml",
]

INIT_HINT = "Run 'release-tasks init-config' to generate a configuration file"


def _missing(path: Path) -> ConfigurationError:
    return ConfigurationError(f"Configuration file not found: {path}", fix_hint=INIT_HINT)


def load_yaml(path: Path) -> dict[str, Any]:
    """Parse a YAML configuration file into a mapping.

    An empty file yields an empty mapping.

    Raises:
        ConfigurationError: If the file is missing, malformed, or not a mapping
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise _missing(path) from None

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path}",
            details=str(e),
            fix_hint="Fix the YAML syntax near the reported line",
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in {path}",
            details="Top level must be a mapping",
        )
    return data


def load_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML configuration file into a mapping.

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        raise _missing(path) from None

    try:
        return tomllib.loads(raw.decode("utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}",
            details=str(e),
            fix_hint="Fix the TOML syntax near the reported line",
        ) from e


PARSERS: dict[str, Callable[[Path], dict[str, Any]]] = {
    ".yml": load_yaml,
    ".yaml": load_yaml,
    ".toml": load_toml,
}


def find_config(project_root: Path) -> Path | None:
    """Return the first configuration file found in the search paths."""
    for relative in SEARCH_PATHS:
        candidate = project_root / relative
        if candidate.is_file():
            return candidate
    return None


def load_config(
    path: Path | None = None,
    project_root: Path | None = None,
) -> ProjectSettings:
    """Load project settings.

    Args:
        path: Explicit configuration file, relative to project_root unless
            absolute. It must exist.
        project_root: Directory searched with SEARCH_PATHS (defaults to cwd)

    Returns:
        Validated ProjectSettings, defaults when no file is found

    Raises:
        ConfigurationError: If an explicit file is missing or a file is invalid
    """
    root = project_root if project_root is not None else Path.cwd()

    if path is None:
        source = find_config(root)
    else:
        source = path if path.is_absolute() else root / path

    data: dict[str, Any] = {}
    if source is not None:
        parser = PARSERS.get(source.suffix)
        if parser is None:
            raise ConfigurationError(
                f"Unsupported config format: {source.suffix}",
                fix_hint="Name the file with a .yml, .yaml or .toml suffix",
            )
        data = parser(source)

    try:
        return ProjectSettings(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {source or 'environment'}",
            details=str(e),
            fix_hint="Compare the values with the output of 'release-tasks init-config'",
        ) from e
