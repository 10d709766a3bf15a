"""In-memory preview surface rendered to ANSI terminal text.

Implements every overlay primitive the renderer knows about, which makes it
both the CLI's preview pane and a faithful stand-in for an editor host.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable, Hashable

from ..ansi import apply_line_background, clip_ansi_line
from ..errors import StaleHandle
from ..ui_theme import DEFAULT_THEME, UITheme

GUTTER_MARKER = "▌"

_SURFACE_IDS = itertools.count(1)


class TerminalPreview:
    """A line buffer shown through a fixed-height viewport."""

    def __init__(
        self,
        lines: list[str] | None = None,
        height: int = 24,
        theme: UITheme = DEFAULT_THEME,
        buffer_id: Hashable | None = None,
        viewport_id: Hashable | None = None,
    ) -> None:
        self.buffer_id = buffer_id if buffer_id is not None else f"buf-{next(_SURFACE_IDS)}"
        self.viewport_id = viewport_id if viewport_id is not None else f"win-{next(_SURFACE_IDS)}"
        self.lines: list[str] = list(lines or [])
        self.height = max(1, height)
        self.theme = theme
        self.cursor_line = 1
        self.top_line = 1
        self.spans: dict[int, tuple[int, int, int, str]] = {}
        self.line_matches: dict[int, tuple[int, str]] = {}
        self.markers: dict[int, tuple[int, str]] = {}
        self._buffer_valid = True
        self._viewport_valid = True
        self._close_callbacks: list[Callable[[], None]] = []
        self._ids = itertools.count(1)

    def is_buffer_valid(self) -> bool:
        return self._buffer_valid

    def is_viewport_valid(self) -> bool:
        return self._viewport_valid

    def _require_buffer(self) -> None:
        if not self._buffer_valid:
            raise StaleHandle(f"buffer {self.buffer_id} is gone")

    def _require_viewport(self) -> None:
        if not self._viewport_valid:
            raise StaleHandle(f"viewport {self.viewport_id} is closed")

    def read_lines(self) -> list[str]:
        self._require_buffer()
        return list(self.lines)

    def write_lines(self, lines: list[str]) -> None:
        self._require_buffer()
        self.lines = list(lines)
        self.cursor_line = min(self.cursor_line, max(1, len(self.lines)))

    def set_cursor(self, line: int) -> None:
        self._require_viewport()
        self.cursor_line = max(1, min(line, max(1, len(self.lines))))

    def recenter(self) -> None:
        self._require_viewport()
        max_top = max(1, len(self.lines) - self.height + 1)
        self.top_line = max(1, min(self.cursor_line - self.height // 2, max_top))

    def place_span(self, line: int, start_col: int, end_col: int, style: str) -> int:
        self._require_buffer()
        span_id = next(self._ids)
        self.spans[span_id] = (line, start_col, end_col, style)
        return span_id

    def clear_span(self, span_id: Hashable) -> None:
        self._require_buffer()
        self.spans.pop(span_id, None)

    def add_line_match(self, line: int, style: str) -> int:
        self._require_viewport()
        match_id = next(self._ids)
        self.line_matches[match_id] = (line, style)
        return match_id

    def delete_line_match(self, match_id: Hashable) -> None:
        self._require_viewport()
        self.line_matches.pop(match_id, None)

    def place_marker(self, line: int, style: str) -> int:
        self._require_buffer()
        marker_id = next(self._ids)
        self.markers[marker_id] = (line, style)
        return marker_id

    def clear_marker(self, marker_id: Hashable) -> None:
        self._require_buffer()
        self.markers.pop(marker_id, None)

    def on_close(self, callback: Callable[[], None]) -> None:
        self._close_callbacks.append(callback)

    def close(self) -> None:
        """Close the viewport; overlays drawn in it go with it."""
        if not self._viewport_valid:
            return
        self._viewport_valid = False
        self.line_matches.clear()
        callbacks, self._close_callbacks = self._close_callbacks, []
        for callback in callbacks:
            callback()

    def wipe(self) -> None:
        """Invalidate the buffer, as when the host replaces the preview."""
        self._buffer_valid = False

    def highlighted_lines(self) -> set[int]:
        highlighted = {line for line, _start, _end, _style in self.spans.values()}
        highlighted.update(line for line, _style in self.line_matches.values())
        return highlighted

    def marked_lines(self) -> set[int]:
        return {line for line, _style in self.markers.values()}

    def render(self, max_cols: int | None = None, whole_buffer: bool = False) -> str:
        """Render the viewport (or the whole buffer) with gutter and highlights."""
        if whole_buffer:
            first, last = 1, len(self.lines)
        else:
            first = self.top_line
            last = min(len(self.lines), self.top_line + self.height - 1)
        highlighted = self.highlighted_lines()
        marked = self.marked_lines()

        out: list[str] = []
        for line_nr in range(first, last + 1):
            text = self.lines[line_nr - 1]
            if max_cols is not None:
                text = clip_ansi_line(text, max(0, max_cols - 1))
            if line_nr in highlighted and self.theme.preview_hover:
                text = apply_line_background(text, self.theme.preview_hover)
            if line_nr in marked:
                gutter = f"{self.theme.gutter_marker}{GUTTER_MARKER}{self.theme.reset}"
            else:
                gutter = " "
            out.append(f"{gutter}{text}")
        return "\n".join(out)
