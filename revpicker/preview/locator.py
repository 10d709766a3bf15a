"""Find the preview line(s) that describe a hovered revision.

The preview text comes from an external log renderer, so the only structure
available is textual: header lines end with an abbreviated commit id and
entries are separated by ``~`` rows or blank lines.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from ..ansi import strip_ansi

MATCH_KEY_LENGTH = 8

_SEPARATOR_RE = re.compile(r"~+")
_COMMIT_HEADER_RE = re.compile(r"[0-9A-Fa-f]{8}$")


@dataclass(frozen=True)
class HighlightTarget:
    """1-based preview line numbers to highlight."""

    primary_line: int
    continuation_line: int | None = None

    @property
    def lines(self) -> list[int]:
        if self.continuation_line is None:
            return [self.primary_line]
        return [self.primary_line, self.continuation_line]


def match_key(revision: str) -> str:
    return revision[:MATCH_KEY_LENGTH]


def is_separator_line(line: str) -> bool:
    return _SEPARATOR_RE.fullmatch(strip_ansi(line)) is not None


def is_commit_header_line(line: str) -> bool:
    """Return whether ``line`` ends with an 8-digit hex id once styling is removed."""
    return _COMMIT_HEADER_RE.search(strip_ansi(line).rstrip()) is not None


def is_continuation_line(line: str | None) -> bool:
    if line is None:
        return False
    plain = strip_ansi(line)
    if not plain:
        return False
    if is_separator_line(plain):
        return False
    return not is_commit_header_line(plain)


def locate_hover_target(lines: Sequence[str], revision: str | None) -> HighlightTarget | None:
    """Locate the first line mentioning ``revision`` plus its continuation line.

    Returns ``None`` when no line contains the first eight characters of the
    revision.
    """
    if not revision:
        return None
    key = match_key(revision)

    primary_index: int | None = None
    for index, line in enumerate(lines):
        if key in strip_ansi(line):
            primary_index = index
            break
    if primary_index is None:
        return None

    next_index = primary_index + 1
    next_line = lines[next_index] if next_index < len(lines) else None
    primary_line = primary_index + 1
    if is_continuation_line(next_line):
        return HighlightTarget(primary_line=primary_line, continuation_line=primary_line + 1)
    return HighlightTarget(primary_line=primary_line)
