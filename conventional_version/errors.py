"""Exceptions raised by the release pipeline.

Everything the pipeline raises on purpose derives from ReleaseError, so the
CLI can turn a failed run into a non-zero exit status without a traceback.
"""

from __future__ import annotations


class ReleaseError(Exception):
    """Base class for release pipeline failures."""


class ConfigurationError(ReleaseError):
    """Invalid options or configuration file. Raised before anything is written."""


class MissingPackageFileError(ReleaseError):
    """No version source was found and falling back to git tags is disabled."""

    def __init__(self) -> None:
        super().__init__("no package file found")


class UpdaterError(ReleaseError):
    """A version-bearing file could not be read or rewritten."""


class CommandError(ReleaseError):
    """An external command (git or a lifecycle script) exited non-zero.

    The message is the command's stderr when it wrote any, otherwise its
    stdout, otherwise a generic description of the failure.
    """

    def __init__(
        self,
        cmd: str,
        returncode: int,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        message = (
            stderr.strip()
            or stdout.strip()
            or f"Command failed with exit code {returncode}: {cmd}"
        )
        super().__init__(message)
