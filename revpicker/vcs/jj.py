"""jj log adapter.

Runs ``jj log --no-graph`` with a template that emits one tab-delimited line
per change: icon, first description line, shortest change id, relative age,
and full commit id.
"""

from __future__ import annotations

import logging

from ..errors import BackendUnavailable
from .process import RunCommand, run_command
from .revsets import is_set
from .types import JJ_ICON_KINDS, RevisionKind, RevisionRecord

logger = logging.getLogger(__name__)

JJ_LOG_TEMPLATE = (
    'if(current_working_copy, "@", if(immutable, "◆", "○"))'
    ' ++ "\\t" ++ description.first_line()'
    ' ++ "\\t" ++ change_id.shortest()'
    ' ++ "\\t" ++ author.timestamp().ago()'
    ' ++ "\\t" ++ commit_id ++ "\\n"'
)
JJ_LOG_FIELD_COUNT = 5


def jj_log_argv(limit: int, revset: str | None = None) -> list[str]:
    argv = ["jj", "log", "--no-graph", "-n", str(limit)]
    if is_set(revset):
        argv.extend(["-r", revset])
    argv.extend(["-T", JJ_LOG_TEMPLATE])
    return argv


def parse_jj_log_line(line: str) -> RevisionRecord | None:
    fields = line.split("\t")
    if len(fields) != JJ_LOG_FIELD_COUNT:
        return None
    icon, description, change_id, age, commit_id = fields
    if not commit_id:
        return None
    return RevisionRecord(
        revision_id=commit_id,
        short_id=change_id,
        description=description,
        age=age,
        kind=JJ_ICON_KINDS.get(icon, RevisionKind.NORMAL),
        icon=icon,
    )


def parse_jj_log_lines(lines: list[str], exclude_revision: str | None = None) -> list[RevisionRecord]:
    records: list[RevisionRecord] = []
    for line in lines:
        record = parse_jj_log_line(line)
        if record is None:
            logger.debug("skipping malformed jj log line: %r", line)
            continue
        if record.revision_id == exclude_revision:
            continue
        records.append(record)
    return records


class JjLog:
    """Revision listing backed by ``jj log``."""

    vcs = "jj"

    def __init__(self, run: RunCommand = run_command) -> None:
        self.run = run

    def list_revisions(
        self,
        limit: int,
        filter_expr: str | None = None,
        exclude_revision: str | None = None,
        include_staged: bool = False,
    ) -> list[RevisionRecord]:
        """List changes matching ``filter_expr`` (already combined with any base revset).

        ``include_staged`` is accepted for signature parity with git and ignored:
        jj has no index.
        """
        argv = jj_log_argv(limit, filter_expr)
        lines = self.run(argv)
        if lines is None:
            raise BackendUnavailable(self.vcs, argv)
        return parse_jj_log_lines(lines, exclude_revision)
