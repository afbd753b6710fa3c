"""Minimal .gitignore matching.

Files listed in the nearest .gitignore (searching upward from the working
directory) are never bumped, so build artefacts such as a generated
package-lock.json are left alone. Supports the common subset of the
gitignore syntax: globs, ``!`` negation, leading ``/`` anchors and trailing
``/`` directory patterns. The last matching pattern wins.
"""

from __future__ import annotations

import fnmatch
from pathlib import Path, PurePosixPath

from .config import find_up


def load_patterns(gitignore: Path | None) -> list[str]:
    if gitignore is None:
        return []
    patterns = []
    for line in gitignore.read_text(encoding="utf-8").splitlines():
        line = line.rstrip()
        if not line or line.startswith("#"):
            continue
        patterns.append(line)
    return patterns


def _matches(pattern: str, path: PurePosixPath) -> bool:
    dir_only = pattern.endswith("/")
    pattern = pattern.rstrip("/")
    anchored = pattern.startswith("/") or "/" in pattern
    pattern = pattern.lstrip("/")

    parts = path.parts
    # Directory patterns match any parent of the path
    candidates = [PurePosixPath(*parts[: i + 1]) for i in range(len(parts))]
    if dir_only:
        candidates = candidates[:-1]

    for candidate in candidates:
        if anchored:
            if fnmatch.fnmatchcase(candidate.as_posix(), pattern):
                return True
        elif fnmatch.fnmatchcase(candidate.name, pattern):
            return True
    return False


def is_ignored(filename: str, patterns: list[str]) -> bool:
    """True if ``filename`` (relative to the .gitignore's directory) is ignored."""
    path = PurePosixPath(Path(filename).as_posix())
    ignored = False
    for pattern in patterns:
        negated = pattern.startswith("!")
        if negated:
            pattern = pattern[1:]
        if _matches(pattern, path):
            ignored = not negated
    return ignored


class GitIgnore:
    """Patterns of the .gitignore governing a working directory."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = (cwd or Path.cwd()).resolve()
        self.path = find_up([".gitignore"], self.cwd)
        self.patterns = load_patterns(self.path)

    def ignored(self, filename: str) -> bool:
        if not self.patterns or self.path is None:
            return False
        target = (self.cwd / filename).resolve()
        try:
            relative = target.relative_to(self.path.parent)
        except ValueError:
            return False
        return is_ignored(relative.as_posix(), self.patterns)
