"""Conventional Commits parsing and bump recommendation.

Reads git log since the last release tag, parses each message as a
`Conventional Commit <https://www.conventionalcommits.org/>`_ and derives
the release type the history calls for:

    BREAKING CHANGE footer (or ``!``)  →  major
    feat:                              →  minor
    anything else                      →  patch

Below 1.0.0 (``pre_major``) every level is shifted down by one, so a
breaking change only bumps the minor version.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from .errors import CommandError
from .models import Recommendation
from .presets import Preset
from .shell import git
from .versions import semver_tags

HEADER_PATTERN: re.Pattern[str] = re.compile(
    r"^(?P<type>\w*)"  # type (e.g. feat, fix, chore)
    r"(?:\((?P<scope>[^)]*)\))?"  # optional scope in parens
    r"(?P<breaking>!)?"  # optional breaking change indicator
    r": (?P<subject>.+)$"
)

NOTE_PATTERN: re.Pattern[str] = re.compile(r"^BREAKING[ -]CHANGE:\s*(?P<text>.*)$")

# Field and record separators for git log output
_US = "\x1f"
_RS = "\x1e"

LEVEL_TYPES: tuple[str, str, str] = ("major", "minor", "patch")


class ParsedCommit(BaseModel):
    """A commit message split into its Conventional Commit parts.

    Attributes:
        hash: Full commit SHA.
        header: First line of the message.
        type: Commit type, "" if the header is not conventional.
        scope: Optional scope.
        subject: Header text after the colon (the whole header if not
                 conventional).
        body: Remaining message text.
        notes: Breaking change descriptions.
    """

    hash: str = ""
    header: str
    type: str = ""
    scope: str = ""
    subject: str
    body: str = ""
    notes: list[str] = Field(default_factory=list)

    @property
    def breaking(self) -> bool:
        return bool(self.notes)

    @property
    def short_hash(self) -> str:
        return self.hash[:7]


def parse_commit(message: str, sha: str = "") -> ParsedCommit:
    """Parse a full commit message (header and body).

    A ``BREAKING CHANGE:`` footer's text runs until the next blank line.
    A ``!`` in the header without such a footer records the subject as the
    breaking change.
    """
    header, _, body = message.strip().partition("\n")
    body = body.strip()

    notes: list[str] = []
    current: list[str] | None = None
    for line in body.splitlines():
        match = NOTE_PATTERN.match(line.strip())
        if match:
            current = [match.group("text")]
            notes.append("")
            continue
        if current is not None:
            if not line.strip():
                notes[-1] = "\n".join(current).strip()
                current = None
            else:
                current.append(line.strip())
    if current is not None:
        notes[-1] = "\n".join(current).strip()

    match = HEADER_PATTERN.match(header.strip())
    if not match:
        return ParsedCommit(hash=sha, header=header, subject=header, body=body)

    subject = match.group("subject")
    if match.group("breaking") and not notes:
        notes.append(subject)

    return ParsedCommit(
        hash=sha,
        header=header,
        type=match.group("type"),
        scope=match.group("scope") or "",
        subject=subject,
        body=body,
        notes=notes,
    )


def read_commits(since: str | None, path: str | None = None) -> list[ParsedCommit]:
    """Read and parse the non-merge commits after ``since`` up to HEAD.

    Args:
        since: Tag (or any revision) to start after; None reads all history.
        path: Only include commits touching this path.

    Returns:
        Parsed commits, newest first. Empty when HEAD has no commits yet.

    Raises:
        CommandError: If git log fails, e.g. outside a repository or for a
            revision that does not exist.
    """
    args = ["log", "--no-merges", "--format=%H%x1f%B%x1e"]
    if since:
        args.append(f"{since}..HEAD")
    if path:
        args.extend(["--", path])

    try:
        output = git(*args)
    except CommandError:
        if since is None and _unborn_head():
            return []
        raise

    commits: list[ParsedCommit] = []
    for record in output.split(_RS):
        record = record.strip()
        if not record:
            continue
        sha, _, message = record.partition(_US)
        commits.append(parse_commit(message, sha=sha.strip()))
    return commits


def _unborn_head() -> bool:
    """True inside a repository whose HEAD has no commits yet."""
    if not git("rev-parse", "--git-dir", check=False):
        return False
    return not git("rev-parse", "--verify", "--quiet", "HEAD", check=False)


def release_tag_prefix(tag_prefix: str, lerna_package: str | None = None) -> str:
    """Tag prefix to search: lerna-style ``name@`` tags when a package is set."""
    return f"{lerna_package}@" if lerna_package else tag_prefix


def what_bump(commits: list[ParsedCommit], pre_major: bool = False) -> Recommendation:
    """Recommend a release type for a set of commits."""
    level = 2
    breakings = 0
    features = 0
    for commit in commits:
        if commit.notes:
            breakings += len(commit.notes)
            level = 0
        elif commit.type in ("feat", "feature"):
            features += 1
            if level == 2:
                level = 1

    if pre_major and level < 2:
        level += 1

    verb = "is" if breakings == 1 else "are"
    plural = "" if breakings == 1 else "S"
    reason = f"There {verb} {breakings} BREAKING CHANGE{plural}"
    return Recommendation(
        release_type=LEVEL_TYPES[level],
        level=level,
        reason=f"{reason} and {features} features",
    )


def recommend_bump(
    preset: Preset,
    path: str | None = None,
    tag_prefix: str = "v",
    lerna_package: str | None = None,
) -> Recommendation:
    """Inspect commits since the latest release tag and recommend a bump."""
    tags = semver_tags(release_tag_prefix(tag_prefix, lerna_package))
    since = tags[0] if tags else None
    return what_bump(read_commits(since, path), pre_major=preset.pre_major)
