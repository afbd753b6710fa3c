"""Commit stage: stage and commit the changelog and the bumped files."""

from __future__ import annotations

from .hooks import run_lifecycle_script
from .models import ReleaseOptions
from .presets import format_commit_message
from .shell import checkpoint, run_exec_file


def commit(
    options: ReleaseOptions, new_version: str, updated_files: list[str]
) -> ReleaseOptions:
    """Run the commit stage.

    Args:
        options: Release options.
        new_version: Version being released, substituted into the message.
        updated_files: Files rewritten by the bump stage.

    Returns:
        The options for the rest of the run; a precommit script that prints
        a message format replaces ``release_commit_message_format``.

    Raises:
        CommandError: If git or a lifecycle script fails.
    """
    if options.skip.commit:
        return options

    precommit = run_lifecycle_script(options, "precommit")
    if precommit.override:
        options = options.model_copy(
            update={"release_commit_message_format": precommit.override}
        )
    exec_commit(options, new_version, updated_files)
    run_lifecycle_script(options, "postcommit")
    return options


def exec_commit(
    options: ReleaseOptions, new_version: str, updated_files: list[str]
) -> None:
    # Display order lists the bumped files first, most recent first; git
    # receives the changelog first
    paths: list[str] = []
    to_add: list[str] = []
    if not options.skip.changelog:
        paths.append(options.infile)
        to_add.append(options.infile)
    for filename in updated_files:
        paths.insert(0, filename)
        to_add.append(filename)
    if options.commit_all:
        paths.append("all staged files")

    if paths:
        msg = "committing " + " and ".join(["%s"] * len(paths))
        checkpoint(options, msg, paths)

    # Nothing to commit
    if options.skip.changelog and options.skip.bump and not to_add:
        return

    args = ["commit"]
    if options.no_verify:
        args.append("--no-verify")
    if options.sign:
        args.append("-S")
    if not options.commit_all:
        args.extend(to_add)
    message = format_commit_message(options.release_commit_message_format, new_version)
    args.extend(["-m", message])

    run_exec_file(options, "git", ["add", *to_add])
    run_exec_file(options, "git", args)
