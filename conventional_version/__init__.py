"""conventional-version: release versioning from Conventional Commits."""

from conventional_version.models import BumpResult, ReleaseOptions
from conventional_version.pipeline import conventional_version
from conventional_version.updaters import Updater

__all__ = ["BumpResult", "ReleaseOptions", "Updater", "conventional_version"]
