"""Tests for drawing and clearing preview hover overlays.

Covers the clear-before-draw guarantee, the fan-out to whichever overlay
primitives a surface offers, and tolerance of closed or replaced previews.
"""

from __future__ import annotations

import itertools
import unittest
from collections.abc import Callable

from revpicker.ansi import display_width, strip_ansi
from revpicker.errors import StaleHandle
from revpicker.preview.locator import HighlightTarget
from revpicker.preview.overlay import PREVIEW_HOVER_STYLE, OverlayRenderer, surface_key
from revpicker.preview.terminal import GUTTER_MARKER, TerminalPreview
from revpicker.ui_theme import DEFAULT_THEME

REV_A = "9023e373a337c54aaa66ac5cb5b0d7622a136beb"
REV_B = "484bfb04d1f5a0e0c1b3b7de1c51c1f0a1b2c3d4"

LINES = [
    "○ xqrwlozy ben@clab.by 1 hour ago \x1b[32m9023e373\x1b[0m",
    "│  (no description set)",
    "○ wpmrqlvy ben@clab.by 1 hour ago 484bfb04",
]


class _SpanOnlySurface:
    """A host that only supports inline spans."""

    def __init__(self, lines: list[str]) -> None:
        self.buffer_id = "buf"
        self.viewport_id = "win"
        self.lines = lines
        self.spans: dict[int, tuple[int, int, int, str]] = {}
        self.cursor: int | None = None
        self.recentered = 0
        self._next_id = 0

    def is_buffer_valid(self) -> bool:
        return True

    def is_viewport_valid(self) -> bool:
        return True

    def read_lines(self) -> list[str]:
        return list(self.lines)

    def set_cursor(self, line: int) -> None:
        self.cursor = line

    def recenter(self) -> None:
        self.recentered += 1

    def place_span(self, line: int, start_col: int, end_col: int, style: str) -> int:
        self._next_id += 1
        self.spans[self._next_id] = (line, start_col, end_col, style)
        return self._next_id

    def clear_span(self, span_id: int) -> None:
        del self.spans[span_id]


class _VanishingSurface(_SpanOnlySurface):
    """Viewport disappears while the highlight is being applied."""

    def set_cursor(self, line: int) -> None:
        raise StaleHandle("viewport closed")


class _ClosableSpanSurface(_SpanOnlySurface):
    """Span-only host that can lose its viewport but never announces it."""

    def __init__(self, lines: list[str]) -> None:
        super().__init__(lines)
        self.viewport_open = True

    def is_viewport_valid(self) -> bool:
        return self.viewport_open


class _SharedBuffer:
    """One buffer whose spans and gutter markers show in every window onto it."""

    def __init__(self, lines: list[str]) -> None:
        self.lines = list(lines)
        self.spans: dict[int, int] = {}
        self.markers: dict[int, int] = {}
        self._ids = itertools.count(1)

    def new_id(self) -> int:
        return next(self._ids)


class _Window:
    """A viewport onto a :class:`_SharedBuffer`."""

    def __init__(self, buffer: _SharedBuffer, viewport_id: str) -> None:
        self.buffer = buffer
        self.buffer_id = "shared"
        self.viewport_id = viewport_id
        self.open = True
        self.cursor: int | None = None
        self._close_callbacks: list[Callable[[], None]] = []

    def is_buffer_valid(self) -> bool:
        return True

    def is_viewport_valid(self) -> bool:
        return self.open

    def read_lines(self) -> list[str]:
        return list(self.buffer.lines)

    def set_cursor(self, line: int) -> None:
        self.cursor = line

    def recenter(self) -> None:
        pass

    def place_span(self, line: int, start_col: int, end_col: int, style: str) -> int:
        span_id = self.buffer.new_id()
        self.buffer.spans[span_id] = line
        return span_id

    def clear_span(self, span_id: int) -> None:
        self.buffer.spans.pop(span_id, None)

    def place_marker(self, line: int, style: str) -> int:
        marker_id = self.buffer.new_id()
        self.buffer.markers[marker_id] = line
        return marker_id

    def clear_marker(self, marker_id: int) -> None:
        self.buffer.markers.pop(marker_id, None)

    def on_close(self, callback: Callable[[], None]) -> None:
        self._close_callbacks.append(callback)

    def close(self) -> None:
        self.open = False
        for callback in self._close_callbacks:
            callback()


class OverlayRendererTests(unittest.TestCase):
    def test_apply_draws_all_three_primitives_for_each_target_line(self) -> None:
        surface = TerminalPreview(LINES)
        renderer = OverlayRenderer()

        target = renderer.apply(surface, REV_A)

        self.assertEqual(target, HighlightTarget(primary_line=1, continuation_line=2))
        self.assertEqual(sorted(line for line, *_ in surface.spans.values()), [1, 2])
        self.assertEqual(sorted(line for line, _ in surface.line_matches.values()), [1, 2])
        self.assertEqual(surface.marked_lines(), {1, 2})
        self.assertEqual(surface.cursor_line, 1)

    def test_span_covers_visible_width_of_the_line(self) -> None:
        surface = TerminalPreview(LINES + [""])
        renderer = OverlayRenderer()
        renderer.apply(surface, REV_A)

        spans = {line: (start, end, style) for line, start, end, style in surface.spans.values()}
        self.assertEqual(spans[1], (0, display_width(strip_ansi(LINES[0])), PREVIEW_HOVER_STYLE))

        empty_surface = TerminalPreview(["○ x 9023e373"])
        renderer.draw(empty_surface, HighlightTarget(primary_line=1, continuation_line=2), ["○ x 9023e373"])
        ends = sorted(end for _line, _start, end, _style in empty_surface.spans.values())
        self.assertEqual(ends[0], 1)

    def test_repeated_apply_leaves_exactly_one_highlight(self) -> None:
        surface = TerminalPreview(LINES)
        renderer = OverlayRenderer()

        renderer.apply(surface, REV_A)
        renderer.apply(surface, REV_A)
        self.assertEqual(len(surface.spans), 2)
        self.assertEqual(len(surface.line_matches), 2)
        self.assertEqual(len(surface.markers), 2)

        renderer.apply(surface, REV_B)
        self.assertEqual(surface.highlighted_lines(), {3})
        self.assertEqual(surface.marked_lines(), {3})
        self.assertEqual(len(surface.spans), 1)
        self.assertEqual(surface.cursor_line, 3)

    def test_missing_revision_only_clears(self) -> None:
        surface = TerminalPreview(LINES)
        renderer = OverlayRenderer()
        renderer.apply(surface, REV_A)

        self.assertIsNone(renderer.apply(surface, "ffffffff00000000"))
        self.assertEqual(surface.spans, {})
        self.assertEqual(surface.line_matches, {})
        self.assertEqual(surface.markers, {})

    def test_clear_is_safe_without_prior_draw(self) -> None:
        surface = TerminalPreview(LINES)
        OverlayRenderer().clear(surface)
        self.assertEqual(surface.spans, {})

    def test_surface_with_only_spans_still_gets_highlighted(self) -> None:
        surface = _SpanOnlySurface(list(LINES))
        renderer = OverlayRenderer()

        renderer.apply(surface, REV_A)
        self.assertEqual(sorted(line for line, *_ in surface.spans.values()), [1, 2])
        self.assertEqual(surface.cursor, 1)
        self.assertEqual(surface.recentered, 1)

        renderer.apply(surface, REV_B)
        self.assertEqual([line for line, *_ in surface.spans.values()], [3])

    def test_closed_or_wiped_preview_is_a_no_op(self) -> None:
        renderer = OverlayRenderer()

        closed = TerminalPreview(LINES)
        renderer.apply(closed, REV_A)
        closed.close()
        self.assertIsNone(renderer.apply(closed, REV_B))

        wiped = TerminalPreview(LINES)
        wiped.wipe()
        self.assertIsNone(renderer.apply(wiped, REV_A))
        self.assertEqual(wiped.spans, {})

    def test_handle_going_stale_mid_update_is_absorbed(self) -> None:
        surface = _VanishingSurface(list(LINES))
        renderer = OverlayRenderer()
        self.assertIsNone(renderer.apply(surface, REV_A))
        self.assertNotIn(surface_key(surface), renderer.registry)


class OverlayRegistryTests(unittest.TestCase):
    def test_entries_are_created_on_use_and_dropped_on_close(self) -> None:
        renderer = OverlayRenderer()
        first = TerminalPreview(LINES)
        second = TerminalPreview(LINES)

        renderer.apply(first, REV_A)
        renderer.apply(second, REV_B)
        self.assertEqual(len(renderer.registry), 2)
        self.assertEqual(second.highlighted_lines(), {3})
        self.assertEqual(first.highlighted_lines(), {1, 2})

        first.close()
        self.assertNotIn(surface_key(first), renderer.registry)
        self.assertIn(surface_key(second), renderer.registry)
        self.assertEqual(first.spans, {})
        self.assertEqual(first.markers, {})

    def test_closing_a_viewport_erases_its_marks_from_the_shared_buffer(self) -> None:
        buffer = _SharedBuffer(LINES)
        renderer = OverlayRenderer()

        first = _Window(buffer, "win-1")
        renderer.apply(first, REV_A)
        self.assertEqual(sorted(buffer.spans.values()), [1, 2])
        self.assertEqual(sorted(buffer.markers.values()), [1, 2])

        first.close()
        self.assertEqual(buffer.spans, {})
        self.assertEqual(buffer.markers, {})

        second = _Window(buffer, "win-2")
        renderer.apply(second, REV_B)
        self.assertEqual(sorted(buffer.spans.values()), [3])
        self.assertEqual(sorted(buffer.markers.values()), [3])

    def test_invalid_surface_without_close_events_is_dropped(self) -> None:
        surface = _ClosableSpanSurface(list(LINES))
        renderer = OverlayRenderer()
        renderer.apply(surface, REV_A)
        self.assertIn(surface_key(surface), renderer.registry)

        surface.viewport_open = False
        self.assertIsNone(renderer.apply(surface, REV_B))
        self.assertNotIn(surface_key(surface), renderer.registry)
        self.assertEqual(surface.spans, {})


class TerminalPreviewTests(unittest.TestCase):
    def test_recenter_places_cursor_mid_viewport(self) -> None:
        lines = [f"line {idx:08x}" for idx in range(1, 101)]
        surface = TerminalPreview(lines, height=10)
        surface.set_cursor(50)
        surface.recenter()
        self.assertEqual(surface.top_line, 45)

        surface.set_cursor(100)
        surface.recenter()
        self.assertEqual(surface.top_line, 91)

    def test_render_marks_gutter_and_paints_background(self) -> None:
        surface = TerminalPreview(LINES, theme=DEFAULT_THEME)
        OverlayRenderer().apply(surface, REV_B)

        rows = surface.render(whole_buffer=True).split("\n")
        self.assertEqual(len(rows), 3)
        self.assertTrue(rows[0].startswith(" "))
        self.assertIn(GUTTER_MARKER, rows[2])
        self.assertIn(DEFAULT_THEME.preview_hover, rows[2])
        self.assertNotIn(DEFAULT_THEME.preview_hover, rows[0])


if __name__ == "__main__":
    unittest.main()
