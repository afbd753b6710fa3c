"""Lifecycle scripts.

Users can configure shell commands to run around each stage:

    prerelease, prebump, postbump, prechangelog, postchangelog,
    precommit, postcommit, pretag, posttag

A script vetoes the release by exiting non-zero. Two hooks can also steer
it through their stdout: ``prebump`` may print a version or release type
that replaces --release-as, and ``precommit`` may print a replacement commit
message format.
"""

from __future__ import annotations

import click

from .models import HookResult, ReleaseOptions
from .shell import INFO, checkpoint, run_exec

HOOK_NAMES: tuple[str, ...] = (
    "prerelease",
    "prebump",
    "postbump",
    "prechangelog",
    "postchangelog",
    "precommit",
    "postcommit",
    "pretag",
    "posttag",
)


def run_lifecycle_script(options: ReleaseOptions, hook: str) -> HookResult:
    """Run the script configured for ``hook``, if any.

    Raises:
        CommandError: If the script exits non-zero.
    """
    command = options.scripts.get(hook)
    if not command:
        return HookResult(hook=hook)

    checkpoint(options, 'Running lifecycle script "%s"', [hook])
    checkpoint(
        options,
        '- execute command: "%s"',
        [command],
        click.style(INFO, fg="blue"),
    )
    stdout = run_exec(options, command)
    return HookResult(hook=hook, ran=stdout is not None, stdout=stdout or "")
