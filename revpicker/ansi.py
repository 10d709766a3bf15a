"""Terminal cell measurement for list entries and styled preview lines.

A cell count is what a terminal draws, not a byte or code point count: wide
East Asian characters fill two cells and combining marks fill none. Preview
lines are measured and searched with their SGR styling stripped.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
SGR_RE = re.compile(r"\x1b\[([0-9;]*)m")
TAB_STOP = 8
ELLIPSIS = "..."

_WIDE_CLASSES = frozenset({"W", "F"})


def char_display_width(ch: str, col: int) -> int:
    """Cells taken by ``ch`` when drawn at column ``col`` (tabs depend on ``col``)."""
    if ch == "\t":
        return TAB_STOP - col % TAB_STOP
    if unicodedata.combining(ch):
        return 0
    return 2 if unicodedata.east_asian_width(ch) in _WIDE_CLASSES else 1


def display_width(text: str) -> int:
    """Return the number of terminal cells ``text`` occupies."""
    col = 0
    for ch in text:
        col += char_display_width(ch, col)
    return col


def pad_right(text: str, width: int) -> str:
    pad = width - display_width(text)
    if pad <= 0:
        return text
    return text + " " * pad


def truncate(text: str, max_chars: int) -> str:
    """Cut ``text`` to ``max_chars`` characters and mark the cut with an ellipsis.

    Counting is per character, so an already truncated value is returned
    unchanged by a second call with the same limit.
    """
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS


def strip_ansi(text: str) -> str:
    return SGR_RE.sub("", text)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Keep the leading ``max_cols`` cells of a styled line.

    Escape sequences pass through untouched and cost nothing; a tab becomes
    the spaces it would have drawn.
    """
    kept: list[str] = []
    col = 0
    pos = 0
    for escape in [*ANSI_ESCAPE_RE.finditer(text), None]:
        chunk_end = escape.start() if escape is not None else len(text)
        for ch in text[pos:chunk_end]:
            width = char_display_width(ch, col)
            if col + width > max_cols:
                return "".join(kept)
            kept.append(" " * width if ch == "\t" else ch)
            col += width
        if escape is None or col >= max_cols:
            break
        kept.append(escape.group(0))
        pos = escape.end()
    return "".join(kept)


def apply_line_background(text: str, bg_sgr: str) -> str:
    """Paint ``bg_sgr`` behind a styled line, surviving embedded resets.

    Every SGR sequence inside ``text`` gets the background appended so a
    ``\\033[0m`` in the middle of the line does not drop the highlight.
    """

    def _inject_bg(match: re.Match[str]) -> str:
        params = match.group(1)
        if params:
            return f"\033[{params};{bg_sgr}m"
        return f"\033[{bg_sgr}m"

    line_with_persistent_bg = SGR_RE.sub(_inject_bg, text)
    return f"\033[{bg_sgr}m{line_with_persistent_bg}\033[K\033[0m"
