"""Tag stage: create the release tag and suggest how to publish it."""

from __future__ import annotations

import click

from .hooks import run_lifecycle_script
from .models import ReleaseOptions
from .presets import format_commit_message
from .shell import INFO, checkpoint, run_exec_file


def tag(
    new_version: str,
    is_private: bool,
    options: ReleaseOptions,
    updated_files: list[str],
) -> None:
    """Run the tag stage.

    Args:
        new_version: Version being released.
        is_private: Whether the package is marked private (never published).
        options: Release options.
        updated_files: Files rewritten by the bump stage.

    Raises:
        CommandError: If git or a lifecycle script fails.
    """
    if options.skip.tag:
        return

    run_lifecycle_script(options, "pretag")
    exec_tag(new_version, is_private, options, updated_files)
    run_lifecycle_script(options, "posttag")


def exec_tag(
    new_version: str,
    is_private: bool,
    options: ReleaseOptions,
    updated_files: list[str],
) -> None:
    tag_option = "-s" if options.sign else "-a"
    checkpoint(options, "tagging release %s%s", [options.tag_prefix, new_version])
    run_exec_file(
        options,
        "git",
        [
            "tag",
            tag_option,
            options.tag_prefix + new_version,
            "-m",
            format_commit_message(options.release_commit_message_format, new_version),
        ],
    )

    # Read-only, so it runs under dry-run too
    branch = run_exec_file(
        options, "git", ["rev-parse", "--abbrev-ref", "HEAD"], honor_dry_run=False
    )
    checkpoint(
        options,
        "Run `%s` to publish",
        [publish_command(branch or "", is_private, options, updated_files)],
        click.style(INFO, fg="blue"),
    )


def publish_command(
    branch: str,
    is_private: bool,
    options: ReleaseOptions,
    updated_files: list[str],
) -> str:
    """Command line suggested to push the release (and publish to npm).

    ``npm publish`` is only suggested for a public package whose
    package.json was bumped; prereleases are published under a dist-tag.
    """
    message = f"git push --follow-tags origin {branch.strip()}"
    if not is_private and "package.json" in updated_files:
        message += " && npm publish"
        if options.prerelease is not None:
            message += f" --tag {options.prerelease or 'prerelease'}"
    return message
