"""Data models for conventional-version.

These Pydantic models represent the core data structures used throughout
the release pipeline. ReleaseOptions is built once per run and is frozen;
stages that need a per-run override (a hook supplying the version or the
commit message) work on a copy made with ``model_copy``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ReleaseType = Literal["major", "minor", "patch"]

DEFAULT_PACKAGE_FILES: list[str] = [
    "package.json",
    "bower.json",
    "manifest.json",
    "pyproject.toml",
]

DEFAULT_BUMP_FILES: list[str] = DEFAULT_PACKAGE_FILES + [
    "package-lock.json",
    "npm-shrinkwrap.json",
]

DEFAULT_HEADER = (
    "# Changelog\n\n"
    "All notable changes to this project will be documented in this file. "
    "See [Conventional Commits](https://conventionalcommits.org) "
    "for commit guidelines.\n"
)


class CommitType(BaseModel):
    """One entry of the preset ``types`` table.

    Attributes:
        type: Commit type as written in the message header (e.g. "feat").
        section: Changelog heading for this type.
        hidden: If True, commits of this type are left out of the changelog
                (breaking changes are always shown).
    """

    type: str
    section: str | None = None
    hidden: bool = False


DEFAULT_TYPES: list[CommitType] = [
    CommitType(type="feat", section="Features"),
    CommitType(type="fix", section="Bug Fixes"),
    CommitType(type="chore", hidden=True),
    CommitType(type="docs", hidden=True),
    CommitType(type="style", hidden=True),
    CommitType(type="refactor", hidden=True),
    CommitType(type="perf", hidden=True),
    CommitType(type="test", hidden=True),
]


class SkipOptions(BaseModel):
    """Which of the four pipeline stages to bypass entirely."""

    model_config = ConfigDict(frozen=True)

    bump: bool = False
    changelog: bool = False
    commit: bool = False
    tag: bool = False


class ReleaseOptions(BaseModel):
    """Options for one release run.

    Field names are snake_case; the camelCase spelling used by ``.versionrc``
    files and ``package.json`` (``releaseAs``, ``tagPrefix``...) is accepted
    as an alias.

    ``package_files`` and ``bump_files`` hold version-bearing file
    descriptors: a filename, a mapping ``{filename, type?, updater?}`` or an
    object implementing the updater protocol.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
        arbitrary_types_allowed=True,
    )

    package_files: list[Any] = Field(
        default_factory=lambda: list(DEFAULT_PACKAGE_FILES)
    )
    bump_files: list[Any] = Field(default_factory=lambda: list(DEFAULT_BUMP_FILES))
    release_as: str | None = None
    prerelease: str | None = None
    infile: str = "CHANGELOG.md"
    message: str | None = None
    first_release: bool = False
    sign: bool = False
    no_verify: bool = False
    commit_all: bool = False
    silent: bool = False
    tag_prefix: str = "v"
    scripts: dict[str, str] = Field(default_factory=dict)
    skip: SkipOptions = Field(default_factory=SkipOptions)
    dry_run: bool = False
    git_tag_fallback: bool = True
    path: str | None = None
    changelog_header: str | None = None
    preset: str = "conventionalcommits"
    lerna_package: str | None = None
    verbose: bool = False

    # Preset configuration (conventional-changelog config keys)
    header: str = DEFAULT_HEADER
    types: list[CommitType] = Field(default_factory=lambda: list(DEFAULT_TYPES))
    pre_major: bool = False
    commit_url_format: str = "{{host}}/{{owner}}/{{repository}}/commit/{{hash}}"
    compare_url_format: str = (
        "{{host}}/{{owner}}/{{repository}}/compare/{{previousTag}}...{{currentTag}}"
    )
    issue_url_format: str = "{{host}}/{{owner}}/{{repository}}/issues/{{id}}"
    user_url_format: str = "{{host}}/{{user}}"
    release_commit_message_format: str = "chore(release): {{currentTag}}"
    issue_prefixes: list[str] = Field(default_factory=lambda: ["#"])


class ResolvedUpdater(BaseModel):
    """A version-bearing file paired with the strategy that edits it.

    Attributes:
        filename: Path of the file, as configured (relative to the cwd).
        type: Which updater variant was selected.
        updater: Object implementing read_version/write_version.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    filename: str
    type: Literal["json", "plain-text", "toml", "custom"]
    updater: Any


class PackageSnapshot(BaseModel):
    """Version and privacy flag read from the first usable package file."""

    version: str | None = None
    private: bool = False


class BumpResult(BaseModel):
    """Outcome of the bump stage.

    Attributes:
        version: The version the release is cut at.
        updated_files: Files whose version was rewritten, in bump order.
                       Commit stages them and tag inspects them.
    """

    version: str
    updated_files: list[str] = Field(default_factory=list)


class HookResult(BaseModel):
    """Outcome of running one lifecycle script.

    Attributes:
        hook: Hook name (e.g. "prebump").
        ran: False when no script is configured or under dry-run.
        stdout: Captured standard output.
    """

    hook: str
    ran: bool = False
    stdout: str = ""

    @property
    def override(self) -> str | None:
        """Trimmed stdout, or None if the script printed nothing."""
        text = self.stdout.strip()
        return text or None


class Recommendation(BaseModel):
    """A bump suggested from commit history.

    Attributes:
        release_type: Suggested bump, or the exact version requested with
                      --release-as.
        level: 0 for major, 1 for minor, 2 for patch.
        reason: Human-readable explanation.
    """

    release_type: ReleaseType | str
    level: int = 2
    reason: str = ""
