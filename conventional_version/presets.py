"""Commit-message presets.

A preset decides which commit types appear in the changelog and under
which heading, and how commit, compare, issue and user links are built.

- ``conventionalcommits`` (default) is configured from ReleaseOptions
  (``types``, ``*_url_format``, ``issue_prefixes``...), so it can be tuned
  in ``.versionrc`` or on the command line.
- ``angular`` uses the fixed Angular sections and ignores those options.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field

from .errors import ConfigurationError
from .models import CommitType, ReleaseOptions

DEFAULT_PRESET = "conventionalcommits"

ANGULAR_TYPES: list[CommitType] = [
    CommitType(type="feat", section="Features"),
    CommitType(type="fix", section="Bug Fixes"),
    CommitType(type="perf", section="Performance Improvements"),
    CommitType(type="revert", section="Reverts"),
    CommitType(type="docs", hidden=True),
    CommitType(type="style", hidden=True),
    CommitType(type="refactor", hidden=True),
    CommitType(type="test", hidden=True),
    CommitType(type="build", hidden=True),
    CommitType(type="ci", hidden=True),
    CommitType(type="chore", hidden=True),
]

_PLACEHOLDER = re.compile(r"{{\s*(\w+)\s*}}")


class Preset(BaseModel):
    """Resolved preset configuration handed to the recommendation engine
    and the changelog generator."""

    name: str
    types: list[CommitType]
    pre_major: bool = False
    commit_url_format: str
    compare_url_format: str
    issue_url_format: str
    user_url_format: str
    issue_prefixes: list[str] = Field(default_factory=lambda: ["#"])

    def section_for(self, commit_type: str) -> str | None:
        """Changelog heading for a commit type, or None if it is hidden.

        Types missing from the table are hidden too.
        """
        for entry in self.types:
            if entry.type == commit_type:
                if entry.hidden:
                    return None
                return entry.section or commit_type.capitalize()
        return None

    def section_order(self) -> list[str]:
        return [e.section or e.type.capitalize() for e in self.types if not e.hidden]


def load_preset(options: ReleaseOptions) -> Preset:
    """Build the preset named by ``options.preset``.

    Raises:
        ConfigurationError: If the preset name is unknown.
    """
    name = options.preset or DEFAULT_PRESET
    url_formats = {
        "commit_url_format": options.commit_url_format,
        "compare_url_format": options.compare_url_format,
        "issue_url_format": options.issue_url_format,
        "user_url_format": options.user_url_format,
    }

    if name in (DEFAULT_PRESET, "conventional-changelog-conventionalcommits"):
        return Preset(
            name=DEFAULT_PRESET,
            types=list(options.types),
            pre_major=options.pre_major,
            issue_prefixes=list(options.issue_prefixes),
            **url_formats,
        )

    if name in ("angular", "conventional-changelog-angular"):
        defaults = ReleaseOptions()
        return Preset(
            name="angular",
            types=list(ANGULAR_TYPES),
            commit_url_format=defaults.commit_url_format,
            compare_url_format=defaults.compare_url_format,
            issue_url_format=defaults.issue_url_format,
            user_url_format=defaults.user_url_format,
        )

    raise ConfigurationError(
        f"Unknown preset: {name}. Available presets: conventionalcommits, angular"
    )


def render_template(template: str, context: dict[str, str]) -> str:
    """Substitute ``{{name}}`` placeholders; unknown names are left as is."""
    return _PLACEHOLDER.sub(lambda m: context.get(m.group(1), m.group(0)), template)


def render_link(template: str, context: dict[str, str]) -> str | None:
    """Render a URL template, or None if a placeholder could not be filled."""
    rendered = render_template(template, context)
    return None if _PLACEHOLDER.search(rendered) else rendered


def format_commit_message(raw_msg: str, new_version: str) -> str:
    """Substitute every ``{{currentTag}}`` in a message format.

    >>> format_commit_message("chore(release): {{currentTag}}", "1.0.0")
    'chore(release): 1.0.0'
    """
    return raw_msg.replace("{{currentTag}}", new_version)
