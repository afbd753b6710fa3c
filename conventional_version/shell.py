"""Shell and git utilities.

Provides wrappers around subprocess calls for lifecycle scripts and git,
plus the console helpers used to report progress. Every helper that mutates
the working tree honours ``dry_run`` here, at the lowest level, so the stages
never need to check it themselves.
"""

from __future__ import annotations

import shlex
import subprocess
from pathlib import Path
from typing import Any

import click

from .errors import CommandError
from .models import ReleaseOptions

TICK = "✔"
CROSS = "✖"
INFO = "ℹ"


def git(*args: str, check: bool = True) -> str:
    """Run a read-only git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "tag", "--merged", "HEAD").
        check: If True (default), raise CommandError on non-zero exit. Set to
               False for queries that may legitimately fail (e.g., outside a
               repository).

    Returns:
        Stripped stdout from the git command, or "" when it failed and
        check is False.
    """
    result = subprocess.run(["git", *args], capture_output=True, text=True)
    if result.returncode != 0:
        if check:
            raise CommandError(
                shlex.join(["git", *args]),
                result.returncode,
                result.stdout,
                result.stderr,
            )
        return ""
    return result.stdout.strip()


def run_exec(options: ReleaseOptions, cmd: str) -> str | None:
    """Run a shell command string (used for lifecycle scripts).

    Returns None without running anything under dry-run. Output written to
    stderr by a successful command is surfaced as a warning.

    Raises:
        CommandError: If the command exits non-zero.
    """
    if options.dry_run:
        return None

    result = subprocess.run(cmd, shell=True, capture_output=True, text=True)
    return _handle_result(options, cmd, result)


def run_exec_file(
    options: ReleaseOptions,
    cmd: str,
    args: list[str],
    honor_dry_run: bool = True,
) -> str | None:
    """Run an executable with an explicit argument list (no shell).

    Arguments are never interpolated by a shell, so values coming from
    configuration (commit messages, tag names) cannot inject commands.

    Args:
        options: Release options (for dry-run and silent).
        cmd: Executable name, e.g. "git".
        args: Arguments passed verbatim.
        honor_dry_run: If False the command runs even under dry-run; used
                       for read-only probes such as ``rev-parse``.

    Raises:
        CommandError: If the command exits non-zero.
    """
    if honor_dry_run and options.dry_run:
        return None

    result = subprocess.run([cmd, *args], capture_output=True, text=True)
    return _handle_result(options, shlex.join([cmd, *args]), result)


def _handle_result(
    options: ReleaseOptions, cmd: str, result: subprocess.CompletedProcess[str]
) -> str:
    if result.returncode != 0:
        error = CommandError(cmd, result.returncode, result.stdout, result.stderr)
        print_error(options, str(error))
        raise error

    # Commands may chat on stderr while still succeeding
    if result.stderr:
        print_error(options, result.stderr, level="warn", color="yellow")
    return result.stdout


def write_file(options: ReleaseOptions, path: str | Path, content: str) -> None:
    """Write text to a file unless running in dry-run mode.

    Newlines are written verbatim so CRLF content survives on every platform.
    """
    if options.dry_run:
        return
    with open(path, "w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def checkpoint(
    options: ReleaseOptions,
    msg: str,
    args: list[Any],
    figure: str | None = None,
) -> None:
    """Print a progress line, substituting ``%s`` placeholders with bold args.

    The default figure is a tick: green normally, yellow under dry-run.
    """
    if options.silent:
        return
    if figure is None:
        figure = click.style(TICK, fg="yellow" if options.dry_run else "green")
    text = msg % tuple(click.style(str(arg), bold=True) for arg in args)
    click.echo(f"{figure} {text}")


def print_error(
    options: ReleaseOptions,
    msg: str,
    level: str = "error",
    color: str = "red",
) -> None:
    """Print an error or warning (stderr) or an info message (stdout)."""
    if options.silent:
        return
    click.echo(click.style(msg, fg=color), err=level != "info")
