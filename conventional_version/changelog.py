"""Changelog stage: prepend the new release block to the changelog file."""

from __future__ import annotations

import re
from pathlib import Path

import click

from .generator import generate_changelog
from .hooks import run_lifecycle_script
from .models import ReleaseOptions
from .presets import load_preset
from .shell import checkpoint, write_file

# Start of the most recent release block in an existing changelog
START_OF_LAST_RELEASE_PATTERN = re.compile(
    r"(^#+ \[?[0-9]+\.[0-9]+\.[0-9]+|<a name=)", re.MULTILINE
)


def changelog(options: ReleaseOptions, new_version: str) -> None:
    """Run the changelog stage.

    Raises:
        CommandError: If a lifecycle script fails.
    """
    if options.skip.changelog:
        return

    run_lifecycle_script(options, "prechangelog")
    output_changelog(options, new_version)
    run_lifecycle_script(options, "postchangelog")


def create_if_missing(options: ReleaseOptions) -> bool:
    """Create an empty infile if there is none.

    Returns:
        True if the file was missing, in which case commits not yet covered
        by a release tag are included in the generated block.
    """
    if Path(options.infile).exists():
        return False
    checkpoint(options, "created %s", [options.infile])
    write_file(options, options.infile, "\n")
    return True


def output_changelog(options: ReleaseOptions, new_version: str) -> None:
    """Generate the release block and write it below the header.

    Everything above the previous release block (the old header) is
    replaced by ``options.header``. Nothing is written when generation
    fails.
    """
    output_unreleased = create_if_missing(options)

    old_content = ""
    if not options.dry_run:
        with open(options.infile, encoding="utf-8", newline="") as fh:
            old_content = fh.read()
    match = START_OF_LAST_RELEASE_PATTERN.search(old_content)
    if match:
        old_content = old_content[match.start() :]

    debug = _echo_debug if options.verbose and not options.silent else None

    content = "".join(
        generate_changelog(
            load_preset(options),
            new_version,
            tag_prefix=options.tag_prefix,
            path=options.path,
            output_unreleased=output_unreleased,
            lerna_package=options.lerna_package,
            debug=debug,
        )
    )

    checkpoint(options, "outputting changes to %s", [options.infile])
    if options.dry_run:
        if not options.silent:
            click.echo(f"\n---\n{click.style(content.strip(), dim=True)}\n---\n")
        return

    body = re.sub(r"\n+\Z", "\n", content + old_content)
    write_file(options, options.infile, options.header + "\n" + body)


def _echo_debug(message: str) -> None:
    click.echo(f"conventional-changelog {message}")
