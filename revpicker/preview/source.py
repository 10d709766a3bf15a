"""Preview text producers for the picker's preview pane.

jj previews show the colored log around the candidates so the hovered entry
can be found and highlighted in context. git previews show the hovered
commit itself, colorized with Pygments.
"""

from __future__ import annotations

import logging
import re

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import DiffLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from ..vcs.process import RunCommand, run_command
from ..vcs.revsets import is_set
from ..vcs.types import STAGED_REVISION

logger = logging.getLogger(__name__)

PREVIEW_UNAVAILABLE = "(preview unavailable)"
DEFAULT_PREVIEW_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}


def jj_preview_argv(limit: int, revset: str | None = None) -> list[str]:
    argv = ["jj", "log", "--color=always", "-n", str(limit)]
    if is_set(revset):
        argv.extend(["-r", revset])
    return argv


def git_preview_argv(revision: str) -> list[str]:
    if revision == STAGED_REVISION:
        return ["git", "diff", "--cached", "--stat", "--patch", "--no-color"]
    return ["git", "show", "--stat", "--patch", "--no-color", revision]


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def _normalize_style(style: str) -> str:
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_PREVIEW_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def colorize_diff(text: str, style: str = DEFAULT_PREVIEW_STYLE) -> str:
    """Colorize unified diff text; unknown styles fall back to monokai."""
    if not text:
        return text
    formatter = _formatter_for_style(_normalize_style(style))
    rendered = pygments_highlight(text, DiffLexer(stripnl=False), formatter)
    # Pygments always terminates output with a newline.
    if not text.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered


def load_jj_preview(limit: int, revset: str | None = None, run: RunCommand = run_command) -> list[str]:
    lines = run(jj_preview_argv(limit, revset))
    if lines is None:
        logger.debug("jj preview failed for revset %r", revset)
        return [PREVIEW_UNAVAILABLE]
    return lines


def load_git_preview(
    revision: str,
    style: str = DEFAULT_PREVIEW_STYLE,
    colorize: bool = True,
    run: RunCommand = run_command,
) -> list[str]:
    lines = run(git_preview_argv(revision))
    if lines is None:
        logger.debug("git preview failed for %s", revision)
        return [PREVIEW_UNAVAILABLE]
    text = sanitize_terminal_text("\n".join(lines))
    if colorize:
        text = colorize_diff(text, style)
    return text.split("\n") if text else []
