"""Version updater registry.

An updater knows how to read and rewrite the version inside one kind of
file. Built-in updaters are modules exposing ``read_version`` and
``write_version`` (and optionally ``is_private``); custom updaters are any
object with the same shape, given inline or as a path to a Python file /
an importable module name.

A version-bearing file is described by:
- a bare filename: the updater is inferred from the basename,
- a mapping ``{"filename": ..., "type": ...}`` with an explicit type
  ("json", "plain-text", "toml"),
- a mapping ``{"filename": ..., "updater": ...}`` with a custom updater,
- an updater object itself (it should carry a ``filename`` attribute).
"""

from __future__ import annotations

import importlib
import importlib.util
import json as _json
import os
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType
from typing import Any, Protocol, runtime_checkable

from ..errors import UpdaterError
from ..models import ReleaseOptions, ResolvedUpdater
from ..shell import print_error
from . import json, plain_text, toml


@runtime_checkable
class Updater(Protocol):
    """Read and rewrite the version stored in a file's contents."""

    def read_version(self, contents: str) -> str | None: ...

    def write_version(self, contents: str, version: str) -> str: ...


JSON_BUMP_FILES: list[str] = [
    "package.json",
    "bower.json",
    "manifest.json",
    "package-lock.json",
    "npm-shrinkwrap.json",
]
PLAIN_TEXT_BUMP_FILES: list[str] = ["VERSION.txt", "version.txt"]
TOML_BUMP_FILES: list[str] = ["pyproject.toml"]

UPDATERS_BY_TYPE: dict[str, Any] = {
    "json": json,
    "plain-text": plain_text,
    "toml": toml,
}


def is_updater(obj: Any) -> bool:
    """True if ``obj`` has callable read_version and write_version."""
    return callable(getattr(obj, "read_version", None)) and callable(
        getattr(obj, "write_version", None)
    )


def get_updater_by_type(updater_type: str) -> Any:
    updater = UPDATERS_BY_TYPE.get(updater_type)
    if updater is None:
        raise UpdaterError(
            f"Unable to locate updater for provided type ({updater_type})."
        )
    return updater


def get_updater_by_filename(filename: str) -> tuple[str, Any]:
    """Infer the updater type from a file's basename.

    Returns:
        Tuple of (type, updater).

    Raises:
        UpdaterError: If the basename is not a known version-bearing file.
    """
    basename = os.path.basename(filename)
    if basename in JSON_BUMP_FILES:
        return "json", json
    if basename in PLAIN_TEXT_BUMP_FILES:
        return "plain-text", plain_text
    if basename in TOML_BUMP_FILES:
        return "toml", toml
    raise UpdaterError(
        f"Unsupported file ({filename}) provided for bumping.\n"
        " Please specify the updater `type` or use a custom `updater`."
    )


def load_custom_updater(updater: Any) -> Any:
    """Load a custom updater from a file path or dotted module name.

    The module itself is the updater when it defines read_version and
    write_version at top level; otherwise its ``updater`` attribute is used.

    Raises:
        FileNotFoundError: If a path was given and the file does not exist.
        UpdaterError: If the loaded object is not an updater.
    """
    if not isinstance(updater, str):
        if is_updater(updater):
            return updater
        raise UpdaterError(
            "Updater must be a string path or an object with "
            "read_version and write_version methods"
        )

    if updater.endswith(".py") or os.sep in updater or "/" in updater:
        module = _load_module_from_path(Path.cwd() / updater)
    else:
        module = importlib.import_module(updater)

    candidate = module if is_updater(module) else getattr(module, "updater", None)
    if not is_updater(candidate):
        raise UpdaterError(f"{updater} does not provide read_version/write_version")
    return candidate


def _load_module_from_path(path: Path) -> ModuleType:
    if not path.is_file():
        raise FileNotFoundError(f"No such file: {path}")
    spec = importlib.util.spec_from_file_location(f"_updater_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise UpdaterError(f"Cannot load updater from {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def resolve_updater(
    descriptor: Any, options: ReleaseOptions | None = None
) -> ResolvedUpdater | None:
    """Resolve a file descriptor to its updater.

    Resolution order: explicit ``updater`` > explicit ``type`` > basename.
    The descriptor is never modified, so the same object can be listed in
    both package_files and bump_files.

    Returns:
        The ResolvedUpdater, or None when no updater could be obtained. A
        warning is printed unless the cause is a missing file.
    """
    if isinstance(descriptor, ResolvedUpdater):
        return descriptor
    if is_updater(descriptor):
        return ResolvedUpdater(
            filename=str(getattr(descriptor, "filename", "")),
            type="custom",
            updater=descriptor,
        )

    spec: Mapping[str, Any]
    if isinstance(descriptor, str):
        spec = {"filename": descriptor}
    elif isinstance(descriptor, Mapping):
        spec = descriptor
    else:
        _warn(options, descriptor, "descriptor must be a filename or a mapping")
        return None

    try:
        filename = str(spec["filename"])
        if spec.get("updater") is not None:
            updater_type = "custom"
            updater = load_custom_updater(spec["updater"])
        elif spec.get("type"):
            updater_type = str(spec["type"])
            updater = get_updater_by_type(updater_type)
        else:
            updater_type, updater = get_updater_by_filename(filename)
    except FileNotFoundError:
        return None
    except (UpdaterError, ImportError, KeyError, SyntaxError) as exc:
        _warn(options, descriptor, str(exc))
        return None

    return ResolvedUpdater(filename=filename, type=updater_type, updater=updater)


def _warn(options: ReleaseOptions | None, descriptor: Any, reason: str) -> None:
    try:
        shown = _json.dumps(descriptor)
    except TypeError:
        shown = repr(descriptor)
    print_error(
        options or ReleaseOptions(),
        f"Unable to obtain updater for: {shown}\n - Error: {reason}\n - Skipping...",
        level="warn",
        color="yellow",
    )
