"""CLI entry point for conventional-version."""

from __future__ import annotations

from typing import Any

import click
from click.core import ParameterSource

from conventional_version.config import load_options
from conventional_version.errors import ConfigurationError, ReleaseError
from conventional_version.pipeline import conventional_version

STAGES = ("bump", "changelog", "commit", "tag")


def collect_overrides(ctx: click.Context, params: dict[str, Any]) -> dict[str, Any]:
    """Keep only the options given on the command line.

    Options left at their default must not shadow values from
    configuration files.
    """
    overrides: dict[str, Any] = {}
    for name, value in params.items():
        source = ctx.get_parameter_source(name)
        if source in (None, ParameterSource.DEFAULT, ParameterSource.DEFAULT_MAP):
            continue
        overrides[name] = list(value) if isinstance(value, tuple) else value

    if "skip" in overrides:
        overrides["skip"] = {stage: True for stage in overrides["skip"]}
    return overrides


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--packageFiles",
    "--package-files",
    "package_files",
    multiple=True,
    help="Files to read the current version from (repeatable).",
)
@click.option(
    "--bumpFiles",
    "--bump-files",
    "bump_files",
    multiple=True,
    help="Files whose version is bumped (repeatable).",
)
@click.option(
    "-r",
    "--release-as",
    "--releaseAs",
    "release_as",
    help="Release type (major, minor, patch) or an exact version.",
)
@click.option(
    "-p",
    "--prerelease",
    is_flag=False,
    flag_value="",
    default=None,
    help="Make a prerelease, optionally with an identifier (e.g. alpha).",
)
@click.option(
    "-i",
    "--infile",
    help="Changelog file to read from and write to.  [default: CHANGELOG.md]",
)
@click.option(
    "-m",
    "--message",
    help="[DEPRECATED] Commit message, %s is replaced by the new version. "
    "Use --releaseCommitMessageFormat.",
)
@click.option(
    "-f",
    "--first-release",
    "--firstRelease",
    "first_release",
    is_flag=True,
    help="This is the first release: the version is not bumped.",
)
@click.option("-s", "--sign", is_flag=True, help="GPG-sign the commit and tag.")
@click.option(
    "-n",
    "--no-verify",
    "--noVerify",
    "no_verify",
    is_flag=True,
    help="Bypass git hooks when committing.",
)
@click.option(
    "-a",
    "--commit-all",
    "--commitAll",
    "commit_all",
    is_flag=True,
    help="Commit all staged changes, not just the release files.",
)
@click.option("--silent", is_flag=True, help="Don't print progress messages.")
@click.option(
    "-t",
    "--tag-prefix",
    "--tagPrefix",
    "tag_prefix",
    help="Prefix of release tags.  [default: v]",
)
@click.option(
    "--skip",
    multiple=True,
    type=click.Choice(STAGES),
    help="Skip a stage (repeatable).",
)
@click.option(
    "--dry-run",
    "--dryRun",
    "dry_run",
    is_flag=True,
    help="Show what would be done without changing anything.",
)
@click.option(
    "--git-tag-fallback/--no-git-tag-fallback",
    default=True,
    help="Use the latest git tag when no package file has a version.",
)
@click.option("--path", help="Only consider commits touching this path.")
@click.option(
    "--changelogHeader",
    "changelog_header",
    help="[DEPRECATED] Changelog header. Use --header.",
)
@click.option("--header", help="Changelog header.")
@click.option(
    "--preset",
    help="Commit convention preset (conventionalcommits, angular).",
)
@click.option(
    "--lerna-package",
    "--lernaPackage",
    "lerna_package",
    help="Look for <package>@<version> tags of this lerna package.",
)
@click.option(
    "--releaseCommitMessageFormat",
    "--release-commit-message-format",
    "release_commit_message_format",
    help="Commit message format, {{currentTag}} is replaced by the version.",
)
@click.option(
    "--issuePrefixes",
    "--issue-prefixes",
    "issue_prefixes",
    multiple=True,
    help="Prefixes of issue references (repeatable).",
)
@click.option("--issueUrlFormat", "--issue-url-format", "issue_url_format")
@click.option("--commitUrlFormat", "--commit-url-format", "commit_url_format")
@click.option("--compareUrlFormat", "--compare-url-format", "compare_url_format")
@click.option("--userUrlFormat", "--user-url-format", "user_url_format")
@click.option("--verbose", is_flag=True, help="Print the commits being parsed.")
@click.version_option(package_name="conventional-version")
@click.pass_context
def cli(ctx: click.Context, **params: Any) -> None:
    """Bump the version, write the changelog, commit and tag a release
    from Conventional Commits history."""
    try:
        options = load_options(collect_overrides(ctx, params))
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        conventional_version(options)
    except ReleaseError:
        # Already reported by the pipeline
        ctx.exit(1)
