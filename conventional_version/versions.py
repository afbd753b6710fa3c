"""Version parsing, incrementing and release-type resolution.

Increments follow npm's semver rules rather than python-semver's, because
the prerelease conventions the tool continues (``1.0.1-dev.0`` →
``1.0.1-dev.1``, ``1.1.0-0``) come from that ecosystem:

- ``major``/``minor``/``patch`` on a prerelease of that release promote it
  (``1.1.0-dev.3`` + minor → ``1.1.0``).
- ``premajor``/``preminor``/``prepatch`` bump and start ``<id>.0``.
- ``prerelease`` bumps the trailing number, or restarts at ``<id>.0`` when
  the identifier changes.
"""

from __future__ import annotations

import re

import semver

from .shell import git

# Ordered by priority: index is the priority (major 2, minor 1, patch 0)
TYPE_LIST: list[str] = ["patch", "minor", "major"]

_PARTIAL_VERSION = re.compile(r"^\d+(\.\d+)?$")


def clean_version(version: str) -> str | None:
    """Return the canonical form of a semantic version, or None if invalid.

    Surrounding whitespace and leading "=" or "v" characters are accepted:
    - "v100.0.0" → "100.0.0"
    - "=2.0.0" → "2.0.0"
    - " 1.2.3-rc.1 " → "1.2.3-rc.1"
    - "1.2" → None
    """
    candidate = version.strip().lstrip("=v")
    return candidate if semver.Version.is_valid(candidate) else None


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Handles incomplete versions by padding with zeros:
    - "1" → "1.0.0"
    - "1.2" → "1.2.0"
    - "v1.2.3-dev.0" → "1.2.3-dev.0"

    Raises:
        ValueError: If the string is not a semantic version.
    """
    candidate = version_str.strip().lstrip("v")
    if _PARTIAL_VERSION.match(candidate):
        parts = candidate.split(".")
        while len(parts) < 3:
            parts.append("0")
        candidate = ".".join(parts)
    return semver.Version.parse(candidate)


def is_prerelease(version: str) -> bool:
    return parse_version(version).prerelease is not None


def _split_prerelease(prerelease: str | None) -> list[int | str]:
    if not prerelease:
        return []
    return [int(part) if part.isdigit() else part for part in prerelease.split(".")]


def _bump_prerelease(pre: list[int | str], identifier: str | None) -> list[int | str]:
    """Advance prerelease identifiers, mirroring npm semver's "pre" step."""
    if not pre:
        pre = [0]
    else:
        pre = list(pre)
        for i in range(len(pre) - 1, -1, -1):
            if isinstance(pre[i], int):
                pre[i] += 1
                break
        else:
            pre.append(0)

    if identifier:
        same_id = str(pre[0]) == identifier
        if not same_id or len(pre) < 2 or not isinstance(pre[1], int):
            pre = [identifier, 0]
    return pre


def increment(version: str, release_type: str, identifier: str | None = None) -> str:
    """Increment a version by release type.

    Args:
        version: Current version.
        release_type: One of major, minor, patch, premajor, preminor,
                      prepatch, prerelease.
        identifier: Prerelease identifier (e.g. "dev"). None or "" produces
                    bare numeric prereleases ("1.1.0-0").

    Returns:
        The incremented version string (build metadata is dropped).

    Examples:
        increment("1.0.0", "patch") → "1.0.1"
        increment("1.0.0", "preminor", "dev") → "1.1.0-dev.0"
        increment("1.0.1-dev.0", "prerelease", "dev") → "1.0.1-dev.1"
    """
    v = parse_version(version)
    major, minor, patch = v.major, v.minor, v.patch
    pre = _split_prerelease(v.prerelease)

    if release_type == "premajor":
        major, minor, patch = major + 1, 0, 0
        pre = _bump_prerelease([], identifier)
    elif release_type == "preminor":
        minor, patch = minor + 1, 0
        pre = _bump_prerelease([], identifier)
    elif release_type == "prepatch":
        patch += 1
        pre = _bump_prerelease([], identifier)
    elif release_type == "prerelease":
        if not pre:
            patch += 1
        pre = _bump_prerelease(pre, identifier)
    elif release_type == "major":
        # 1.0.0-5 becomes 1.0.0, anything else moves to the next major
        if minor != 0 or patch != 0 or not pre:
            major += 1
        minor, patch, pre = 0, 0, []
    elif release_type == "minor":
        if patch != 0 or not pre:
            minor += 1
        patch, pre = 0, []
    elif release_type == "patch":
        if not pre:
            patch += 1
        pre = []
    else:
        raise ValueError(f"invalid increment argument: {release_type}")

    result = f"{major}.{minor}.{patch}"
    if pre:
        result += "-" + ".".join(str(part) for part in pre)
    return result


def get_current_active_type(version: str) -> str | None:
    """Return the lowest non-zero component name of a version.

    For a prerelease this is the kind of release it leads up to:
    "1.1.0-dev.0" is a minor prerelease, "2.0.0-rc.1" a major one.
    """
    v = parse_version(version)
    for release_type in TYPE_LIST:
        if getattr(v, release_type):
            return release_type
    return None


def get_type_priority(release_type: str | None) -> int:
    """Priority of a release type: major 2, minor 1, patch 0, unknown -1."""
    return TYPE_LIST.index(release_type) if release_type in TYPE_LIST else -1


def resolve_release_type(
    prerelease: str | None, expected_type: str, current_version: str
) -> str:
    """Choose the increment to apply, accounting for prerelease state.

    Without a prerelease identifier the expected type is used as is. With
    one, an ongoing prerelease is continued when it already targets the
    expected type or a higher-priority one; otherwise a fresh
    ``pre<type>`` is started.
    """
    if prerelease is None:
        return expected_type

    if is_prerelease(current_version):
        active = get_current_active_type(current_version)
        if active == expected_type or get_type_priority(active) > get_type_priority(
            expected_type
        ):
            return "prerelease"

    return "pre" + expected_type


def next_version(
    current_version: str,
    release_type: str,
    prerelease: str | None = None,
) -> str:
    """Compute the version to release.

    Args:
        current_version: Version read from the package files or tags.
        release_type: An explicit version ("100.0.0", "v2.0.0-rc.1") or a
                      type (major, minor, patch), from --release-as or the
                      recommendation.
        prerelease: Prerelease identifier; "" for an untagged prerelease,
                    None for a regular release.

    Returns:
        The next version. An explicit version is returned verbatim.
    """
    exact = clean_version(release_type)
    if exact is not None:
        return exact

    increment_type = resolve_release_type(prerelease, release_type, current_version)
    return increment(current_version, increment_type, prerelease)


def is_pre_major(version: str) -> bool:
    """True for versions below 1.0.0, where breaking changes bump the minor."""
    return parse_version(version).compare("1.0.0") < 0


def semver_tags(tag_prefix: str) -> list[str]:
    """List reachable tags whose suffix after ``tag_prefix`` is a semver.

    Only tags merged into HEAD count, so tags made on other branches are
    never taken for the previous release.

    Returns:
        Tag names sorted by version, greatest first. Empty when there are no
        matching tags or the working directory is not a git repository.
    """
    tags = git("tag", "--merged", "HEAD", check=False)
    found: list[tuple[semver.Version, str]] = []
    for tag in tags.splitlines():
        tag = tag.strip()
        if not tag.startswith(tag_prefix):
            continue
        version = clean_version(tag[len(tag_prefix) :])
        if version is not None:
            found.append((semver.Version.parse(version), tag))
    found.sort(key=lambda item: item[0], reverse=True)
    return [tag for _, tag in found]


def latest_semver_tag(tag_prefix: str) -> str:
    """Greatest version among the existing tags, defaulting to "1.0.0"."""
    tags = semver_tags(tag_prefix)
    if not tags:
        return "1.0.0"
    return clean_version(tags[0][len(tag_prefix) :]) or "1.0.0"
