"""Tests for conventional_version.versions."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from conventional_version.versions import (
    clean_version,
    get_current_active_type,
    get_type_priority,
    increment,
    is_pre_major,
    latest_semver_tag,
    next_version,
    parse_version,
    resolve_release_type,
    semver_tags,
)


class TestCleanVersion:
    def test_plain(self) -> None:
        assert clean_version("1.2.3") == "1.2.3"

    def test_leading_v_and_whitespace(self) -> None:
        assert clean_version(" v100.0.0 ") == "100.0.0"

    def test_leading_equals(self) -> None:
        assert clean_version("=2.0.0") == "2.0.0"
        assert clean_version("=v2.0.0") == "2.0.0"

    def test_prerelease(self) -> None:
        assert clean_version("200.0.0-amazing") == "200.0.0-amazing"

    def test_partial_is_invalid(self) -> None:
        assert clean_version("1.2") is None

    def test_release_type_is_invalid(self) -> None:
        assert clean_version("minor") is None


class TestParseVersion:
    def test_full_semver(self) -> None:
        v = parse_version("1.2.3")
        assert (v.major, v.minor, v.patch) == (1, 2, 3)

    def test_two_part_version(self) -> None:
        v = parse_version("1.2")
        assert (v.major, v.minor, v.patch) == (1, 2, 0)

    def test_single_part_version(self) -> None:
        v = parse_version("5")
        assert (v.major, v.minor, v.patch) == (5, 0, 0)

    def test_prerelease(self) -> None:
        assert parse_version("v1.2.3-dev.0").prerelease == "dev.0"

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            parse_version("not-a-version")


class TestIncrement:
    @pytest.mark.parametrize(
        "version,release_type,expected",
        [
            ("1.0.0", "patch", "1.0.1"),
            ("1.0.0", "minor", "1.1.0"),
            ("1.0.0", "major", "2.0.0"),
            ("1.2.3", "minor", "1.3.0"),
            ("1.2.3", "major", "2.0.0"),
        ],
    )
    def test_release_types(
        self, version: str, release_type: str, expected: str
    ) -> None:
        assert increment(version, release_type) == expected

    def test_release_promotes_matching_prerelease(self) -> None:
        """A prerelease of the target release is promoted, not bumped again."""
        assert increment("1.1.0-dev.3", "minor") == "1.1.0"
        assert increment("2.0.0-rc.1", "major") == "2.0.0"
        assert increment("1.0.1-0", "patch") == "1.0.1"

    def test_minor_on_patch_prerelease_bumps_minor(self) -> None:
        assert increment("1.0.1-dev.0", "minor") == "1.1.0"

    def test_pre_types_start_at_zero(self) -> None:
        assert increment("1.0.0", "premajor", "rc") == "2.0.0-rc.0"
        assert increment("1.0.0", "preminor", "dev") == "1.1.0-dev.0"
        assert increment("1.0.0", "prepatch", "dev") == "1.0.1-dev.0"

    def test_pre_type_without_identifier(self) -> None:
        assert increment("1.0.0", "preminor", "") == "1.1.0-0"

    def test_prerelease_bumps_counter(self) -> None:
        assert increment("1.0.1-dev.0", "prerelease", "dev") == "1.0.1-dev.1"
        assert increment("1.0.1-0", "prerelease", "") == "1.0.1-1"

    def test_prerelease_switches_identifier(self) -> None:
        assert increment("1.0.1-alpha.3", "prerelease", "beta") == "1.0.1-beta.0"

    def test_prerelease_on_release_bumps_patch(self) -> None:
        assert increment("1.0.0", "prerelease", "dev") == "1.0.1-dev.0"

    def test_unknown_type(self) -> None:
        with pytest.raises(ValueError, match="invalid increment argument"):
            increment("1.0.0", "huge")


class TestReleaseTypeResolution:
    def test_active_type(self) -> None:
        assert get_current_active_type("1.1.0-dev.0") == "minor"
        assert get_current_active_type("1.0.1-dev.0") == "patch"
        assert get_current_active_type("2.0.0-rc.1") == "major"
        assert get_current_active_type("0.0.0") is None

    def test_type_priority(self) -> None:
        assert get_type_priority("major") == 2
        assert get_type_priority("minor") == 1
        assert get_type_priority("patch") == 0
        assert get_type_priority(None) == -1

    def test_no_prerelease_uses_expected_type(self) -> None:
        assert resolve_release_type(None, "minor", "1.0.0-dev.0") == "minor"

    def test_continues_higher_priority_prerelease(self) -> None:
        assert resolve_release_type("dev", "patch", "1.1.0-dev.1") == "prerelease"

    def test_starts_new_prerelease_for_higher_type(self) -> None:
        assert resolve_release_type("dev", "minor", "1.0.1-dev.1") == "preminor"

    def test_starts_prerelease_from_release(self) -> None:
        assert resolve_release_type("", "minor", "1.0.0") == "preminor"


class TestNextVersion:
    def test_exact_version_is_used_verbatim(self) -> None:
        assert next_version("1.0.0", "v100.0.0") == "100.0.0"
        assert next_version("1.0.0", "200.0.0-amazing") == "200.0.0-amazing"

    def test_exact_version_ignores_prerelease(self) -> None:
        assert next_version("1.0.0", "3.0.0", prerelease="dev") == "3.0.0"

    def test_untagged_prerelease(self) -> None:
        assert next_version("1.0.0", "minor", prerelease="") == "1.1.0-0"

    def test_prerelease_sequence(self) -> None:
        """Repeated prerelease runs continue or restart the sequence."""
        steps = [
            ("patch", "1.0.1-dev.0"),
            ("patch", "1.0.1-dev.1"),
            ("minor", "1.1.0-dev.0"),
            ("minor", "1.1.0-dev.1"),
            ("patch", "1.1.0-dev.2"),
        ]
        version = "1.0.0"
        for release_type, expected in steps:
            version = next_version(version, release_type, prerelease="dev")
            assert version == expected

    def test_graduates_prerelease(self) -> None:
        assert next_version("1.1.0-dev.2", "minor") == "1.1.0"


class TestIsPreMajor:
    def test_below_one(self) -> None:
        assert is_pre_major("0.5.0") is True

    def test_prerelease_of_one(self) -> None:
        assert is_pre_major("1.0.0-rc.0") is True

    def test_one_and_above(self) -> None:
        assert is_pre_major("1.0.0") is False


class TestSemverTags:
    @patch("conventional_version.versions.git")
    def test_filters_and_sorts(self, mock_git: MagicMock) -> None:
        """Only prefixed semver tags are kept, greatest first."""
        mock_git.return_value = (
            "v1.0.0\nv1.10.0\nv1.2.0\nfoo\nv2.0.0-rc.1\nrelease-3.0.0\nv1.3"
        )

        assert semver_tags("v") == ["v2.0.0-rc.1", "v1.10.0", "v1.2.0", "v1.0.0"]
        mock_git.assert_called_once_with("tag", "--merged", "HEAD", check=False)

    @patch("conventional_version.versions.git")
    def test_custom_prefix(self, mock_git: MagicMock) -> None:
        mock_git.return_value = "pkg@1.0.0\nv5.0.0\npkg@1.1.0"

        assert semver_tags("pkg@") == ["pkg@1.1.0", "pkg@1.0.0"]


class TestLatestSemverTag:
    @patch("conventional_version.versions.git")
    def test_defaults_without_tags(self, mock_git: MagicMock) -> None:
        mock_git.return_value = ""

        assert latest_semver_tag("v") == "1.0.0"

    @patch("conventional_version.versions.git")
    def test_greatest_tag_without_prefix(self, mock_git: MagicMock) -> None:
        mock_git.return_value = "v1.2.3\nv1.10.0\nv0.9.0"

        assert latest_semver_tag("v") == "1.10.0"
