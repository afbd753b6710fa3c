"""Tests for conventional_version.generator."""

from __future__ import annotations

from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from conventional_version.commits import parse_commit
from conventional_version.generator import (
    generate_changelog,
    previous_release_tag,
    render_commit,
    render_heading,
    render_release,
    repository_context,
)
from conventional_version.models import ReleaseOptions
from conventional_version.presets import Preset, load_preset

GITHUB = {"host": "https://github.com", "owner": "acme", "repository": "widget"}
RELEASE_DATE = date(2024, 5, 1)


@pytest.fixture
def preset() -> Preset:
    return load_preset(ReleaseOptions())


class TestRepositoryContext:
    @pytest.mark.parametrize(
        "url",
        [
            "git@github.com:acme/widget.git",
            "https://github.com/acme/widget.git",
            "https://github.com/acme/widget",
            "git+https://github.com/acme/widget.git",
            "ssh://git@github.com/acme/widget.git",
        ],
    )
    def test_remote_formats(self, url: str) -> None:
        assert repository_context(url) == GITHUB

    def test_nested_group(self) -> None:
        assert repository_context("https://gitlab.com/org/team/widget.git") == {
            "host": "https://gitlab.com",
            "owner": "org/team",
            "repository": "widget",
        }

    @patch("conventional_version.generator.git")
    def test_no_remote(self, mock_git: MagicMock) -> None:
        mock_git.return_value = ""

        assert repository_context() == {}
        mock_git.assert_called_once_with(
            "config", "--get", "remote.origin.url", check=False
        )


class TestPreviousReleaseTag:
    def test_greatest_lower_version(self) -> None:
        tags = ["v2.0.0", "v1.1.0", "v1.0.0"]

        assert previous_release_tag(tags, "v", "1.2.0") == "v1.1.0"

    def test_none_lower(self) -> None:
        assert previous_release_tag(["v2.0.0"], "v", "1.0.0") is None

    def test_prerelease_is_lower_than_release(self) -> None:
        tags = ["v1.1.0-rc.0", "v1.0.0"]

        assert previous_release_tag(tags, "v", "1.1.0") == "v1.1.0-rc.0"


class TestRenderHeading:
    def test_minor_release_links_compare(self, preset: Preset) -> None:
        heading = render_heading(
            "1.1.0", preset, GITHUB, "v1.0.0", "v1.1.0", RELEASE_DATE
        )

        assert heading == (
            "## [1.1.0](https://github.com/acme/widget/compare/v1.0.0...v1.1.0)"
            " (2024-05-01)"
        )

    def test_patch_release_is_level_three(self, preset: Preset) -> None:
        heading = render_heading("1.0.1", preset, {}, "v1.0.0", "v1.0.1", RELEASE_DATE)

        assert heading == "### 1.0.1 (2024-05-01)"

    def test_patch_prerelease_is_level_two(self, preset: Preset) -> None:
        heading = render_heading("1.0.1-0", preset, {}, None, "v1.0.1-0", RELEASE_DATE)

        assert heading == "## 1.0.1-0 (2024-05-01)"

    def test_first_release_has_no_compare_link(self, preset: Preset) -> None:
        heading = render_heading("1.0.0", preset, GITHUB, None, "v1.0.0", RELEASE_DATE)

        assert heading == "## 1.0.0 (2024-05-01)"


class TestRenderCommit:
    def test_scope_and_commit_link(self, preset: Preset) -> None:
        commit = parse_commit("feat(cli): add flag", sha="1234567890abcdef")

        assert render_commit(commit, preset, GITHUB) == (
            "* **cli:** add flag "
            "([1234567](https://github.com/acme/widget/commit/1234567890abcdef))"
        )

    def test_without_repository(self, preset: Preset) -> None:
        commit = parse_commit("fix: crash on start (#12)", sha="abcdef123456")

        assert render_commit(commit, preset, {}) == (
            "* crash on start (#12) (abcdef1)"
        )

    def test_issue_links(self, preset: Preset) -> None:
        commit = parse_commit(
            "fix: crash on start (#12)\n\nCloses #14, #15", sha="abcdef123456"
        )

        assert render_commit(commit, preset, GITHUB) == (
            "* crash on start ([#12](https://github.com/acme/widget/issues/12)) "
            "([abcdef1](https://github.com/acme/widget/commit/abcdef123456))"
            ", closes [#14](https://github.com/acme/widget/issues/14)"
            " [#15](https://github.com/acme/widget/issues/15)"
        )

    def test_custom_issue_prefix_and_url(self) -> None:
        preset = load_preset(
            ReleaseOptions(
                issue_prefixes=["ABC-"],
                issue_url_format="https://jira.example.com/browse/{{prefix}}{{id}}",
            )
        )
        commit = parse_commit("fix: handle ABC-123")

        assert render_commit(commit, preset, {}) == (
            "* handle [ABC-123](https://jira.example.com/browse/ABC-123)"
        )


class TestRenderRelease:
    def test_sections_in_preset_order(self, preset: Preset) -> None:
        commits = [
            parse_commit("fix: b", sha="b" * 40),
            parse_commit("chore: hidden", sha="c" * 40),
            parse_commit("feat(x): a", sha="a" * 40),
        ]

        text = "".join(
            render_release(commits, preset, "1.1.0", {}, None, "v1.1.0", RELEASE_DATE)
        )

        assert text == (
            "## 1.1.0 (2024-05-01)\n"
            "\n\n### Features\n\n* **x:** a (aaaaaaa)\n"
            "\n\n### Bug Fixes\n\n* b (bbbbbbb)\n"
        )

    def test_breaking_changes_first(self, preset: Preset) -> None:
        commits = [
            parse_commit(
                "chore(deps)!: require python 3.10\n\nBREAKING CHANGE: 3.9 is gone"
            )
        ]

        text = "".join(
            render_release(commits, preset, "2.0.0", {}, None, "v2.0.0", RELEASE_DATE)
        )

        assert text == (
            "## 2.0.0 (2024-05-01)\n"
            "\n\n### ⚠ BREAKING CHANGES\n\n* **deps:** 3.9 is gone\n"
        )

    def test_no_visible_commits(self, preset: Preset) -> None:
        commits = [parse_commit("docs: typo")]

        text = "".join(
            render_release(commits, preset, "1.0.1", {}, None, "v1.0.1", RELEASE_DATE)
        )

        assert text == "### 1.0.1 (2024-05-01)\n"


class TestGenerateChangelog:
    @patch("conventional_version.generator.repository_context")
    @patch("conventional_version.generator.read_commits")
    @patch("conventional_version.generator.semver_tags")
    def test_reads_since_previous_release(
        self,
        mock_tags: MagicMock,
        mock_read: MagicMock,
        mock_context: MagicMock,
        preset: Preset,
    ) -> None:
        mock_tags.return_value = ["v1.0.0"]
        mock_read.return_value = [parse_commit("feat: a", sha="a" * 40)]
        mock_context.return_value = {}

        text = "".join(generate_changelog(preset, "1.1.0", path="src"))

        today = date.today().isoformat()
        assert text == (
            f"## 1.1.0 ({today})\n\n\n### Features\n\n* a (aaaaaaa)\n\n"
        )
        mock_tags.assert_called_once_with("v")
        mock_read.assert_called_once_with("v1.0.0", "src")

    @patch("conventional_version.generator.repository_context")
    @patch("conventional_version.generator.read_commits")
    @patch("conventional_version.generator.semver_tags")
    def test_already_tagged_version(
        self,
        mock_tags: MagicMock,
        mock_read: MagicMock,
        mock_context: MagicMock,
        preset: Preset,
    ) -> None:
        """A version that is already tagged produces nothing by default."""
        mock_tags.return_value = ["v1.0.0"]

        assert list(generate_changelog(preset, "1.0.0")) == []
        mock_read.assert_not_called()

    @patch("conventional_version.generator.repository_context")
    @patch("conventional_version.generator.read_commits")
    @patch("conventional_version.generator.semver_tags")
    def test_output_unreleased(
        self,
        mock_tags: MagicMock,
        mock_read: MagicMock,
        mock_context: MagicMock,
        preset: Preset,
    ) -> None:
        mock_tags.return_value = ["v1.0.0"]
        mock_read.return_value = []
        mock_context.return_value = {}

        chunks = list(generate_changelog(preset, "1.0.0", output_unreleased=True))

        assert chunks[0].startswith("## 1.0.0 (")
        mock_read.assert_called_once_with("v1.0.0", None)

    @patch("conventional_version.generator.repository_context")
    @patch("conventional_version.generator.read_commits")
    @patch("conventional_version.generator.semver_tags")
    def test_lerna_tags_and_debug(
        self,
        mock_tags: MagicMock,
        mock_read: MagicMock,
        mock_context: MagicMock,
        preset: Preset,
    ) -> None:
        mock_tags.return_value = ["pkg@0.1.0"]
        mock_read.return_value = [parse_commit("fix: a", sha="f" * 40)]
        mock_context.return_value = {}
        debug = MagicMock()

        list(generate_changelog(preset, "0.1.1", lerna_package="pkg", debug=debug))

        mock_tags.assert_called_once_with("pkg@")
        mock_read.assert_called_once_with("pkg@0.1.0", None)
        debug.assert_called_once_with("fffffff fix: a")
