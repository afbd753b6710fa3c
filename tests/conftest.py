"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest

from conventional_version.models import Recommendation


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty project directory."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_json():
    """Write a JSON document the way npm does (two-space indent)."""

    def _write(path: Path, data: Any) -> Path:
        path.write_text(json.dumps(data, indent=2) + "\n")
        return path

    return _write


@pytest.fixture
def release_stubs(monkeypatch: pytest.MonkeyPatch) -> SimpleNamespace:
    """Replace git and the commit-history collaborators with mocks.

    - recommend_bump recommends a patch release
    - generate_changelog yields a single bullet
    - git commands issued by the commit and tag stages succeed; rev-parse
      reports the "main" branch
    - latest_semver_tag returns "1.0.0"
    """
    stubs = SimpleNamespace(
        recommend=MagicMock(return_value=Recommendation(release_type="patch")),
        generate=MagicMock(
            side_effect=lambda *args, **kwargs: iter(["* patch release\n"])
        ),
        commit_exec=MagicMock(return_value=""),
        tag_exec=MagicMock(return_value="main\n"),
        latest_tag=MagicMock(return_value="1.0.0"),
    )
    monkeypatch.setattr("conventional_version.bump.recommend_bump", stubs.recommend)
    monkeypatch.setattr(
        "conventional_version.changelog.generate_changelog", stubs.generate
    )
    monkeypatch.setattr("conventional_version.commit.run_exec_file", stubs.commit_exec)
    monkeypatch.setattr("conventional_version.tag.run_exec_file", stubs.tag_exec)
    monkeypatch.setattr(
        "conventional_version.pipeline.latest_semver_tag", stubs.latest_tag
    )
    return stubs
