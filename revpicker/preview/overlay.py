"""Draw and clear the hover highlight on a preview surface.

Hosts differ in which overlay primitives they honor, so the same target is
drawn three ways: an inline span, a viewport-local line match, and a gutter
marker. Each primitive is optional; a surface advertises it by implementing
the matching protocol. Everything drawn is tracked per (buffer, viewport) in
an :class:`OverlayRegistry` and cleared before the next draw, so at most one
hover highlight is visible per viewport.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Sequence
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from ..ansi import display_width, strip_ansi
from ..errors import StaleHandle
from .locator import HighlightTarget, locate_hover_target

logger = logging.getLogger(__name__)

PREVIEW_HOVER_STYLE = "preview_hover"


@runtime_checkable
class PreviewSurface(Protocol):
    """A preview buffer shown in a viewport. Line numbers are 1-based."""

    buffer_id: Hashable
    viewport_id: Hashable

    def is_buffer_valid(self) -> bool: ...

    def is_viewport_valid(self) -> bool: ...

    def read_lines(self) -> list[str]: ...

    def set_cursor(self, line: int) -> None: ...

    def recenter(self) -> None: ...


@runtime_checkable
class WritableSurface(Protocol):
    def write_lines(self, lines: list[str]) -> None: ...


@runtime_checkable
class SpanOverlay(Protocol):
    def place_span(self, line: int, start_col: int, end_col: int, style: str) -> Hashable: ...

    def clear_span(self, span_id: Hashable) -> None: ...


@runtime_checkable
class LineMatchOverlay(Protocol):
    def add_line_match(self, line: int, style: str) -> Hashable | None: ...

    def delete_line_match(self, match_id: Hashable) -> None: ...


@runtime_checkable
class GutterMarkers(Protocol):
    def place_marker(self, line: int, style: str) -> Hashable: ...

    def clear_marker(self, marker_id: Hashable) -> None: ...


@runtime_checkable
class CloseNotifier(Protocol):
    def on_close(self, callback: Callable[[], None]) -> None: ...


def surface_key(surface: PreviewSurface) -> tuple[Hashable, Hashable]:
    return (surface.buffer_id, surface.viewport_id)


def surface_is_valid(surface: PreviewSurface) -> bool:
    return surface.is_buffer_valid() and surface.is_viewport_valid()


@dataclass
class OverlayState:
    """Overlay ids currently drawn on one (buffer, viewport) pair."""

    span_ids: list[Hashable] = field(default_factory=list)
    match_ids: list[Hashable] = field(default_factory=list)
    marker_ids: list[Hashable] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.span_ids or self.match_ids or self.marker_ids)


class OverlayRegistry:
    """Overlay state keyed by (buffer, viewport).

    Entries are created on first use and dropped when the host reports the
    viewport closed. A closed viewport's marks are erased from its buffer
    before the entry goes.
    """

    def __init__(self) -> None:
        self._states: dict[tuple[Hashable, Hashable], OverlayState] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, key: object) -> bool:
        return key in self._states

    def get(self, surface: PreviewSurface) -> OverlayState | None:
        return self._states.get(surface_key(surface))

    def state_for(self, surface: PreviewSurface) -> OverlayState:
        key = surface_key(surface)
        state = self._states.get(key)
        if state is None:
            state = OverlayState()
            self._states[key] = state
            if isinstance(surface, CloseNotifier):
                surface.on_close(lambda: self.release(surface))
        return state

    def release(self, surface: PreviewSurface) -> None:
        """Drop the entry for ``surface`` and erase the marks it left on the buffer.

        Spans and gutter markers belong to the buffer and outlive the viewport
        they were drawn through; line matches go away with the viewport.
        """
        state = self._states.pop(surface_key(surface), None)
        if state is None or not surface.is_buffer_valid():
            return
        try:
            if isinstance(surface, SpanOverlay):
                for span_id in state.span_ids:
                    surface.clear_span(span_id)
            if isinstance(surface, GutterMarkers):
                for marker_id in state.marker_ids:
                    surface.clear_marker(marker_id)
        except StaleHandle:
            logger.debug("buffer %r went away while releasing overlays", surface.buffer_id)


class OverlayRenderer:
    """Apply hover highlights through whichever primitives a surface exposes."""

    def __init__(self, registry: OverlayRegistry | None = None, style: str = PREVIEW_HOVER_STYLE) -> None:
        self.registry = registry if registry is not None else OverlayRegistry()
        self.style = style

    def clear(self, surface: PreviewSurface) -> None:
        """Remove every overlay this renderer drew on ``surface``; safe when none exist."""
        state = self.registry.get(surface)
        if state is None or state.is_empty():
            return
        if isinstance(surface, SpanOverlay):
            for span_id in state.span_ids:
                surface.clear_span(span_id)
        if isinstance(surface, LineMatchOverlay):
            for match_id in state.match_ids:
                surface.delete_line_match(match_id)
        if isinstance(surface, GutterMarkers):
            for marker_id in state.marker_ids:
                surface.clear_marker(marker_id)
        state.span_ids.clear()
        state.match_ids.clear()
        state.marker_ids.clear()

    def draw(self, surface: PreviewSurface, target: HighlightTarget, preview_lines: Sequence[str]) -> None:
        state = self.registry.state_for(surface)
        for line_nr in target.lines:
            text = preview_lines[line_nr - 1] if line_nr - 1 < len(preview_lines) else ""
            end_col = max(display_width(strip_ansi(text)), 1)
            if isinstance(surface, SpanOverlay):
                state.span_ids.append(surface.place_span(line_nr, 0, end_col, self.style))
            if isinstance(surface, LineMatchOverlay):
                match_id = surface.add_line_match(line_nr, self.style)
                if match_id is not None:
                    state.match_ids.append(match_id)
            if isinstance(surface, GutterMarkers):
                state.marker_ids.append(surface.place_marker(line_nr, self.style))

    def focus(self, surface: PreviewSurface, line: int) -> None:
        surface.set_cursor(line)
        surface.recenter()

    def apply(
        self,
        surface: PreviewSurface,
        revision: str | None,
        preview_lines: Sequence[str] | None = None,
    ) -> HighlightTarget | None:
        """Clear the previous highlight and draw the one for ``revision``.

        Returns the drawn target, or ``None`` when nothing matched or the
        surface was invalidated before or during the update.
        """
        if not surface_is_valid(surface):
            logger.debug("preview surface %r is gone; skipping highlight", surface_key(surface))
            self.registry.release(surface)
            return None
        try:
            lines = list(preview_lines) if preview_lines is not None else surface.read_lines()
            self.clear(surface)
            target = locate_hover_target(lines, revision)
            if target is None:
                logger.debug("no preview line mentions %r", revision)
                return None
            self.draw(surface, target, lines)
            self.focus(surface, target.primary_line)
            return target
        except StaleHandle:
            logger.debug("preview surface %r went stale mid-update", surface_key(surface))
            self.registry.release(surface)
            return None
