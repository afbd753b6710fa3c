"""Updater for pyproject.toml.

Uses tomlkit to preserve formatting and comments when rewriting the
version, so the only line that changes in the diff is the version itself.
The version is read from [project].version, falling back to
[tool.poetry].version.
"""

from __future__ import annotations

from typing import Any

import tomlkit
from packaging.version import InvalidVersion, Version

from ..errors import UpdaterError

PRIVATE_CLASSIFIER = "Private :: Do Not Upload"


def _version_table(doc: tomlkit.TOMLDocument) -> Any:
    """Return the table holding the static version, or None."""
    project = doc.get("project", {})
    if "version" in project:
        return project
    poetry = doc.get("tool", {}).get("poetry", {})
    if "version" in poetry:
        return poetry
    return None


def read_version(contents: str) -> str | None:
    table = _version_table(tomlkit.parse(contents))
    return None if table is None else str(table["version"])


def write_version(contents: str, version: str) -> str:
    """Rewrite the version in place.

    Raises:
        UpdaterError: If the file has no static version, or ``version`` is
            not a valid PEP 440 version (e.g. "2.0.0-amazing"), which would
            leave the project uninstallable.
    """
    try:
        Version(version)
    except InvalidVersion as exc:
        raise UpdaterError(
            f"{version} is not a valid PEP 440 version for pyproject.toml"
        ) from exc

    doc = tomlkit.parse(contents)
    table = _version_table(doc)
    if table is None:
        raise UpdaterError("pyproject.toml has no static version to bump")
    table["version"] = version
    return tomlkit.dumps(doc)


def is_private(contents: str) -> bool:
    """A project is private when it carries the "Do Not Upload" classifier."""
    doc = tomlkit.parse(contents)
    classifiers = doc.get("project", {}).get("classifiers", [])
    return PRIVATE_CLASSIFIER in [str(c) for c in classifiers]
