"""git log adapter.

Lists commits through a fixed tab-delimited ``--pretty`` format and can
prepend a pseudo-record for staged changes.
"""

from __future__ import annotations

import logging

from ..errors import BackendUnavailable
from .process import CommandStatus, RunCommand, command_status, run_command
from .revsets import is_set
from .types import RevisionKind, RevisionRecord, staged_record

logger = logging.getLogger(__name__)

GIT_LOG_FORMAT = "%H\t%h\t%ad\t%s"
GIT_STAGED_CHECK_ARGV = ["git", "diff", "--cached", "--quiet"]


def git_log_argv(limit: int, revspec: str | None = None) -> list[str]:
    argv = ["git", "log", "--date=short", f"--pretty=format:{GIT_LOG_FORMAT}", "-n", str(limit)]
    if is_set(revspec):
        argv.append(revspec)
    return argv


def parse_git_log_line(line: str) -> RevisionRecord | None:
    """Parse ``full<TAB>short<TAB>date<TAB>subject``; ``None`` when malformed.

    The subject is the remainder of the line, so tabs inside it survive.
    """
    fields = line.split("\t", 3)
    if len(fields) != 4:
        return None
    full, short, date, subject = fields
    if not full or not short or not date:
        return None
    return RevisionRecord(
        revision_id=full,
        short_id=short,
        description=subject,
        age=date,
        kind=RevisionKind.NORMAL,
    )


def parse_git_log_lines(lines: list[str], exclude_revision: str | None = None) -> list[RevisionRecord]:
    records: list[RevisionRecord] = []
    for line in lines:
        record = parse_git_log_line(line)
        if record is None:
            logger.debug("skipping malformed git log line: %r", line)
            continue
        if record.revision_id == exclude_revision:
            continue
        records.append(record)
    return records


class GitLog:
    """Revision listing backed by ``git log``."""

    vcs = "git"

    def __init__(self, run: RunCommand = run_command, status: CommandStatus = command_status) -> None:
        self.run = run
        self.status = status

    def has_staged_changes(self) -> bool:
        # --quiet exits 1 when the index differs from HEAD.
        return self.status(list(GIT_STAGED_CHECK_ARGV)) == 1

    def list_revisions(
        self,
        limit: int,
        filter_expr: str | None = None,
        exclude_revision: str | None = None,
        include_staged: bool = False,
    ) -> list[RevisionRecord]:
        argv = git_log_argv(limit, filter_expr)
        lines = self.run(argv)
        if lines is None:
            raise BackendUnavailable(self.vcs, argv)

        records = parse_git_log_lines(lines, exclude_revision)
        if include_staged and self.has_staged_changes():
            records.insert(0, staged_record())
        return records
