"""Configuration loading.

Options are merged from several layers, later layers winning:

1. Built-in defaults (ReleaseOptions field defaults)
2. ``[tool.conventional-version]`` in ./pyproject.toml
3. The nearest ``.versionrc``, ``.versionrc.json`` or ``.versionrc.toml``
   found walking up from the working directory
4. The ``"conventional-version"`` key of ./package.json
5. Command-line flags

Keys may be camelCase (``tagPrefix``), snake_case or kebab-case; they are
normalised to the ReleaseOptions field names before merging.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import tomlkit
from pydantic import ValidationError
from pydantic.alias_generators import to_snake
from tomlkit.exceptions import ParseError

from .errors import ConfigurationError
from .models import ReleaseOptions

CONFIG_FILES: tuple[str, ...] = (".versionrc", ".versionrc.json", ".versionrc.toml")
CONFIG_KEY = "conventional-version"


def find_up(names: Iterable[str], cwd: Path | None = None) -> Path | None:
    """Find the first of ``names`` in ``cwd`` or any of its parents.

    Returns:
        Path of the nearest match, or None if none exists up to the root.
    """
    names = list(names)
    start = (cwd or Path.cwd()).resolve()
    for directory in [start, *start.parents]:
        for name in names:
            candidate = directory / name
            if candidate.is_file():
                return candidate
    return None


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return type(value).__name__


def read_config_file(path: Path) -> dict[str, Any]:
    """Parse a configuration file (JSON, or TOML for ``.toml``).

    Raises:
        ConfigurationError: If the file cannot be parsed or does not hold an
            object at top level.
    """
    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix == ".toml":
            data: Any = tomlkit.parse(text).unwrap()
        else:
            data = json.loads(text)
    except (ValueError, ParseError) as exc:
        raise ConfigurationError(f"Unable to parse {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in {path} provided. "
            f"Expected an object but found {_type_name(data)}."
        )
    return data


def read_pyproject_config(cwd: Path) -> dict[str, Any]:
    pyproject = cwd / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    try:
        doc = tomlkit.parse(pyproject.read_text(encoding="utf-8")).unwrap()
    except ParseError as exc:
        raise ConfigurationError(f"Unable to parse {pyproject}: {exc}") from exc
    section = doc.get("tool", {}).get(CONFIG_KEY, {})
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Invalid configuration in {pyproject} provided. "
            f"Expected an object but found {_type_name(section)}."
        )
    return section


def read_package_json_config(cwd: Path) -> dict[str, Any]:
    package_json = cwd / "package.json"
    if not package_json.is_file():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except ValueError:
        # A broken package.json is reported by the bump stage
        return {}
    section = data.get(CONFIG_KEY, {}) if isinstance(data, dict) else {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Invalid configuration in {package_json} provided. "
            f"Expected an object but found {_type_name(section)}."
        )
    return section


def normalize_keys(config: dict[str, Any]) -> dict[str, Any]:
    """Map top-level keys to ReleaseOptions field names."""
    return {to_snake(key.replace("-", "_")): value for key, value in config.items()}


def load_options(
    cli_overrides: dict[str, Any] | None = None, cwd: Path | None = None
) -> ReleaseOptions:
    """Build ReleaseOptions from every configuration layer.

    Args:
        cli_overrides: Options given explicitly on the command line.
        cwd: Directory to search from (default: the working directory).

    Raises:
        ConfigurationError: If a configuration file is invalid or the merged
            options fail validation.
    """
    cwd = cwd or Path.cwd()
    merged: dict[str, Any] = {}
    merged.update(normalize_keys(read_pyproject_config(cwd)))

    rc_file = find_up(CONFIG_FILES, cwd)
    if rc_file is not None:
        merged.update(normalize_keys(read_config_file(rc_file)))

    merged.update(normalize_keys(read_package_json_config(cwd)))
    merged.update(normalize_keys(cli_overrides or {}))

    try:
        return ReleaseOptions.model_validate(merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc
