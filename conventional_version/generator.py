"""Changelog generation from commit history.

Renders the Markdown block for one release: a version heading, an optional
``⚠ BREAKING CHANGES`` block and one section per visible commit type. The
block is produced as a stream of chunks so the changelog stage can
concatenate them; a failure while reading history surfaces as an exception
from the iterator.

Example output::

    ## [1.1.0](https://github.com/o/r/compare/v1.0.0...v1.1.0) (2024-05-01)


    ### Features

    * **cli:** add --dry-run ([1a2b3c4](https://github.com/o/r/commit/1a2b3c4...))

Links are only rendered when every placeholder of the URL template can be
filled, so a repository without a recognisable ``origin`` remote gets a
plain heading and bare commit hashes.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator
from datetime import date

from .commits import ParsedCommit, read_commits, release_tag_prefix
from .presets import Preset, render_link
from .shell import git
from .versions import clean_version, parse_version, semver_tags

BREAKING_SECTION = "⚠ BREAKING CHANGES"

_REMOTE_PATTERN = re.compile(
    r"^(?:git\+)?(?:(?:https?|ssh|git)://)?(?:[^@/]+@)?"
    r"(?P<host>[^/:]+)(?::\d+)?[/:](?P<owner>.+?)/(?P<repository>[^/]+?)"
    r"(?:\.git)?/?$"
)
_CLOSING_PATTERN = re.compile(
    r"\b(?:close[sd]?|fix(?:e[sd])?|resolve[sd]?)\s+"
    r"(?P<ref>[^\s,]+(?:\s*,\s*[^\s,]+)*)",
    re.IGNORECASE,
)


def repository_context(remote_url: str | None = None) -> dict[str, str]:
    """Host, owner and repository parsed from the ``origin`` remote.

    Args:
        remote_url: Remote URL to parse; read from git config when None.

    Returns:
        A dict with ``host`` (including the https scheme), ``owner`` and
        ``repository``, or an empty dict when no usable remote exists.
    """
    if remote_url is None:
        remote_url = git("config", "--get", "remote.origin.url", check=False)
    match = _REMOTE_PATTERN.match(remote_url.strip()) if remote_url else None
    if not match:
        return {}
    return {
        "host": f"https://{match.group('host')}",
        "owner": match.group("owner"),
        "repository": match.group("repository"),
    }


def previous_release_tag(tags: list[str], prefix: str, version: str) -> str | None:
    """Greatest tag whose version is lower than ``version``."""
    target = parse_version(version)
    for tag in tags:
        found = clean_version(tag[len(prefix) :])
        if found is not None and parse_version(found) < target:
            return tag
    return None


def _issue_pattern(prefixes: list[str]) -> re.Pattern[str]:
    alternatives = "|".join(re.escape(p) for p in prefixes if p) or "#"
    return re.compile(rf"(?<![\w/\[])(?P<prefix>{alternatives})(?P<id>\d+)\b")


def _link_issues(text: str, preset: Preset, context: dict[str, str]) -> str:
    pattern = _issue_pattern(preset.issue_prefixes)

    def replace(match: re.Match[str]) -> str:
        url = render_link(
            preset.issue_url_format,
            {**context, "prefix": match.group("prefix"), "id": match.group("id")},
        )
        return f"[{match.group(0)}]({url})" if url else match.group(0)

    return pattern.sub(replace, text)


def _closed_references(commit: ParsedCommit, preset: Preset) -> list[str]:
    """Issue references closed by the commit body (``Closes #12``)."""
    pattern = _issue_pattern(preset.issue_prefixes)
    refs: list[str] = []
    for match in _CLOSING_PATTERN.finditer(commit.body):
        for ref in match.group("ref").split(","):
            ref = ref.strip().rstrip(".")
            if pattern.fullmatch(ref) and ref not in refs:
                refs.append(ref)
    return refs


def render_commit(commit: ParsedCommit, preset: Preset, context: dict[str, str]) -> str:
    """Render one changelog bullet."""
    line = "* "
    if commit.scope:
        line += f"**{commit.scope}:** "
    line += _link_issues(commit.subject, preset, context)

    if commit.hash:
        url = render_link(preset.commit_url_format, {**context, "hash": commit.hash})
        short = commit.short_hash
        line += f" ([{short}]({url}))" if url else f" ({short})"

    refs = _closed_references(commit, preset)
    if refs:
        linked = [_link_issues(ref, preset, context) for ref in refs]
        line += ", closes " + " ".join(linked)
    return line


def render_heading(
    version: str,
    preset: Preset,
    context: dict[str, str],
    previous_tag: str | None,
    current_tag: str,
    release_date: date | None = None,
) -> str:
    """Release heading; patch releases get a level-3 heading."""
    parsed = parse_version(version)
    is_patch = parsed.patch != 0 and parsed.prerelease is None
    marker = "###" if is_patch else "##"
    day = (release_date or date.today()).isoformat()

    title = version
    if previous_tag:
        url = render_link(
            preset.compare_url_format,
            {**context, "previousTag": previous_tag, "currentTag": current_tag},
        )
        if url:
            title = f"[{version}]({url})"
    return f"{marker} {title} ({day})"


def render_release(
    commits: list[ParsedCommit],
    preset: Preset,
    version: str,
    context: dict[str, str],
    previous_tag: str | None,
    current_tag: str,
    release_date: date | None = None,
) -> Iterator[str]:
    """Yield the heading and then one chunk per non-empty section."""
    yield (
        render_heading(
            version, preset, context, previous_tag, current_tag, release_date
        )
        + "\n"
    )

    breaking: list[str] = []
    grouped: dict[str, list[str]] = {}
    for commit in commits:
        for note in commit.notes:
            prefix = f"**{commit.scope}:** " if commit.scope else ""
            breaking.append(f"* {prefix}{_link_issues(note, preset, context)}")

        section = preset.section_for(commit.type)
        if section is None:
            continue
        grouped.setdefault(section, []).append(render_commit(commit, preset, context))

    if breaking:
        yield _section(BREAKING_SECTION, breaking)
    for section in preset.section_order():
        if section in grouped:
            yield _section(section, grouped.pop(section))


def _section(title: str, bullets: list[str]) -> str:
    return f"\n\n### {title}\n\n" + "\n".join(bullets) + "\n"


def generate_changelog(
    preset: Preset,
    version: str,
    tag_prefix: str = "v",
    path: str | None = None,
    output_unreleased: bool = False,
    lerna_package: str | None = None,
    debug: Callable[[str], None] | None = None,
) -> Iterator[str]:
    """Generate the changelog block for ``version``.

    Commits are read from the previous release tag (the greatest one below
    ``version``) up to HEAD. When ``version`` is already tagged its block is
    assumed to be in the changelog; only commits made after that tag are
    rendered, and only when ``output_unreleased`` is set.

    Args:
        preset: Section and link configuration.
        version: Version the block is generated for.
        tag_prefix: Prefix of release tags.
        path: Only include commits touching this path.
        output_unreleased: Render commits made after an existing tag for
                           ``version``.
        lerna_package: Look for ``<package>@<version>`` tags instead.
        debug: Called with a description of each commit read.

    Yields:
        Markdown chunks; their concatenation is the release block.
    """
    prefix = release_tag_prefix(tag_prefix, lerna_package)
    current_tag = f"{prefix}{version}"
    tags = semver_tags(prefix)

    if current_tag in tags:
        if not output_unreleased:
            return
        since: str | None = current_tag
    else:
        since = previous_release_tag(tags, prefix, version)

    commits = read_commits(since, path)
    if debug is not None:
        for commit in commits:
            debug(f"{commit.short_hash} {commit.header}")

    context = repository_context()
    yield from render_release(
        commits,
        preset,
        version,
        context,
        previous_tag=since,
        current_tag=current_tag,
    )
    yield "\n"
