"""Bump stage: decide the next version and write it to the bump files."""

from __future__ import annotations

import os
from pathlib import Path

import click

from .commits import recommend_bump
from .errors import ConfigurationError, UpdaterError
from .hooks import run_lifecycle_script
from .ignore import GitIgnore
from .models import BumpResult, Recommendation, ReleaseOptions
from .presets import load_preset
from .shell import CROSS, checkpoint, print_error, write_file
from .updaters import resolve_updater
from .versions import TYPE_LIST, clean_version, is_pre_major, next_version


def bump(options: ReleaseOptions, current_version: str) -> BumpResult:
    """Run the bump stage.

    Args:
        options: Release options.
        current_version: Version read from the package files or git tags.

    Returns:
        The version to release and the files that were rewritten. When the
        stage is skipped, or on a first release, the version is unchanged.

    Raises:
        CommandError: If a lifecycle script fails.
        ConfigurationError: If the release type or version is not usable.
    """
    if options.skip.bump:
        return BumpResult(version=current_version)

    run_lifecycle_script(options, "prerelease")
    prebump = run_lifecycle_script(options, "prebump")
    if prebump.override:
        options = options.model_copy(update={"release_as": prebump.override})

    recommendation = recommend_release(options, current_version)

    result = BumpResult(version=current_version)
    if not options.first_release:
        new_version = next_version(
            current_version, recommendation.release_type, options.prerelease
        )
        result = BumpResult(
            version=new_version,
            updated_files=update_configs(options, new_version),
        )
    else:
        checkpoint(
            options,
            "skip version bump on first release",
            [],
            click.style(CROSS, fg="red"),
        )

    run_lifecycle_script(options, "postbump")
    return result


def recommend_release(options: ReleaseOptions, current_version: str) -> Recommendation:
    """Release type requested by --release-as, or recommended from history.

    Below 1.0.0 the recommendation runs in pre-major mode, so breaking
    changes bump the minor version.
    """
    if options.release_as:
        release_as = options.release_as.strip()
        if release_as not in TYPE_LIST and clean_version(release_as) is None:
            raise ConfigurationError(
                f"Invalid release type or version: {options.release_as}"
            )
        return Recommendation(release_type=release_as)

    preset = load_preset(options)
    if is_pre_major(current_version):
        preset = preset.model_copy(update={"pre_major": True})
    recommendation = recommend_bump(
        preset,
        path=options.path,
        tag_prefix=options.tag_prefix,
        lerna_package=options.lerna_package,
    )
    if options.verbose:
        print_error(options, recommendation.reason, level="info", color="cyan")
    return recommendation


def update_configs(options: ReleaseOptions, new_version: str) -> list[str]:
    """Write ``new_version`` into every bump file that can be updated.

    Files that do not resolve to an updater, are ignored by git, or do not
    exist are skipped. A file that fails to read or parse is reported and
    skipped; the other files are still updated.

    Returns:
        Paths (relative to the working directory) of the rewritten files.
    """
    gitignore = GitIgnore()
    cwd = Path.cwd()
    updated: list[str] = []

    for descriptor in options.bump_files:
        resolved = resolve_updater(descriptor, options)
        if resolved is None:
            continue
        config_path = cwd / resolved.filename
        try:
            if gitignore.ignored(resolved.filename):
                continue
            if not config_path.is_file():
                continue
            with open(config_path, encoding="utf-8", newline="") as fh:
                contents = fh.read()
            old_version = resolved.updater.read_version(contents)
            checkpoint(
                options,
                f"bumping version in {resolved.filename} from %s to %s",
                [old_version, new_version],
            )
            write_file(
                options,
                config_path,
                resolved.updater.write_version(contents, new_version),
            )
        except FileNotFoundError:
            continue
        except (OSError, ValueError, UpdaterError) as exc:
            print_error(options, str(exc), level="warn", color="yellow")
            continue

        relative = Path(os.path.relpath(config_path, cwd)).as_posix()
        if relative not in updated:
            updated.append(relative)
    return updated
