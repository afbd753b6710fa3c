"""Release pipeline: bump → changelog → commit → tag.

This module orchestrates a release:
1. Normalise deprecated options and validate the changelog header
2. Read the current version from the first usable package file, falling
   back to the greatest semver git tag
3. Bump the version in every bump file (bump.py)
4. Prepend the release notes to the changelog (changelog.py)
5. Commit the changelog and bumped files (commit.py)
6. Tag the release commit (tag.py)

Each stage can be skipped and each runs its own lifecycle scripts. The
stages run strictly in order and a failure in one stops the run; nothing
already written is rolled back.
"""

from __future__ import annotations

from pathlib import Path

from .bump import bump
from .changelog import START_OF_LAST_RELEASE_PATTERN, changelog
from .commit import commit
from .errors import ConfigurationError, MissingPackageFileError, UpdaterError
from .models import DEFAULT_BUMP_FILES, BumpResult, PackageSnapshot, ReleaseOptions
from .shell import print_error
from .tag import tag
from .updaters import resolve_updater
from .versions import latest_semver_tag


def apply_deprecations(options: ReleaseOptions) -> ReleaseOptions:
    """Map deprecated options onto their replacements, warning about each.

    - ``message`` (``%s`` placeholder) → ``release_commit_message_format``
    - ``changelog_header`` → ``header``
    - explicit ``package_files`` are also bumped, on top of the default
      bump files, unless ``bump_files`` is given explicitly too
    """
    update: dict[str, object] = {}

    if options.changelog_header:
        update["header"] = options.changelog_header
        print_error(
            options,
            "[conventional-version]: --changelogHeader will be removed in the "
            "next major release. Use --header.",
            level="warn",
            color="yellow",
        )

    if options.message:
        update["release_commit_message_format"] = options.message.replace(
            "%s", "{{currentTag}}"
        )
        print_error(
            options,
            "[conventional-version]: --message (-m) will be removed in the "
            "next major release. Use --releaseCommitMessageFormat.",
            level="warn",
            color="yellow",
        )

    fields_set = options.model_fields_set
    if "package_files" in fields_set and "bump_files" not in fields_set:
        update["bump_files"] = list(DEFAULT_BUMP_FILES) + list(options.package_files)

    return options.model_copy(update=update) if update else options


def validate_header(options: ReleaseOptions) -> None:
    """Reject a header that would be mistaken for a release block.

    Raises:
        ConfigurationError: If the header matches the release marker.
    """
    if options.header and START_OF_LAST_RELEASE_PATTERN.search(options.header):
        raise ConfigurationError(
            "custom changelog header must not match "
            f"{START_OF_LAST_RELEASE_PATTERN.pattern}"
        )


def read_package_snapshot(options: ReleaseOptions) -> PackageSnapshot | None:
    """Version and privacy of the first package file that can be read.

    Package files that do not resolve to an updater, do not exist or fail
    to parse are skipped. Later files are never consulted once one is read,
    even if it carries no version.
    """
    for descriptor in options.package_files:
        resolved = resolve_updater(descriptor, options)
        if resolved is None:
            continue
        try:
            contents = (Path.cwd() / resolved.filename).read_text(encoding="utf-8")
            version = resolved.updater.read_version(contents)
            is_private = getattr(resolved.updater, "is_private", None)
            private = bool(is_private(contents)) if callable(is_private) else False
        except (OSError, ValueError, UpdaterError):
            continue
        return PackageSnapshot(version=version, private=private)
    return None


def conventional_version(options: ReleaseOptions) -> BumpResult:
    """Run a full release.

    Args:
        options: Merged release options (see config.load_options).

    Returns:
        The released version and the files the bump stage rewrote.

    Raises:
        ReleaseError: Or whatever a stage raised, after the message has
            been printed.
    """
    try:
        options = apply_deprecations(options)
        validate_header(options)
        snapshot = read_package_snapshot(options)

        if snapshot is not None and snapshot.version:
            version = snapshot.version
        elif options.git_tag_fallback:
            version = latest_semver_tag(options.tag_prefix)
        else:
            raise MissingPackageFileError()

        result = bump(options, version)
        changelog(options, result.version)
        options = commit(options, result.version, result.updated_files)
        tag(
            result.version,
            snapshot.private if snapshot is not None else False,
            options,
            result.updated_files,
        )
    except Exception as exc:
        print_error(options, str(exc))
        raise

    return result
