"""VCS log adapters for git and jj."""

from __future__ import annotations

from .git import GitLog
from .jj import JjLog
from .process import CommandStatus, RunCommand, command_status, run_command
from .types import RevisionKind, RevisionRecord

VCS_KINDS = ("git", "jj")


def log_adapter(
    vcs: str,
    run: RunCommand = run_command,
    status: CommandStatus = command_status,
) -> GitLog | JjLog:
    """Return the log adapter for ``vcs`` (``"git"`` or ``"jj"``)."""
    if vcs == "git":
        return GitLog(run=run, status=status)
    if vcs == "jj":
        return JjLog(run=run)
    raise ValueError(f"unsupported vcs: {vcs!r}")


__all__ = [
    "VCS_KINDS",
    "CommandStatus",
    "GitLog",
    "JjLog",
    "RevisionKind",
    "RevisionRecord",
    "RunCommand",
    "command_status",
    "log_adapter",
    "run_command",
]
