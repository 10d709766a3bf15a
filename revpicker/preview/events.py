"""Preview-pane event handlers for hover highlighting.

Preview-render completion and selection changes both end in the same
clear-then-draw call, so a burst of events leaves only the latest
highlight. Selection changes are deferred through the host's scheduler and
re-check the surface before touching it.
"""

from __future__ import annotations

from collections.abc import Callable

from .locator import HighlightTarget
from .overlay import OverlayRenderer, PreviewSurface, WritableSurface, surface_is_valid

Schedule = Callable[[Callable[[], None]], None]


def call_now(callback: Callable[[], None]) -> None:
    callback()


class PreviewHighlighter:
    """Keeps a preview surface's hover highlight in sync with the selection."""

    def __init__(self, renderer: OverlayRenderer | None = None, schedule: Schedule = call_now) -> None:
        self.renderer = renderer if renderer is not None else OverlayRenderer()
        self.schedule = schedule

    def show_preview(self, surface: PreviewSurface, lines: list[str], revision: str | None) -> HighlightTarget | None:
        """Write freshly rendered preview lines, then highlight ``revision`` in them."""
        if not surface_is_valid(surface):
            return None
        if isinstance(surface, WritableSurface):
            surface.write_lines(lines)
        return self.on_preview_rendered(surface, revision)

    def on_preview_rendered(self, surface: PreviewSurface, revision: str | None) -> HighlightTarget | None:
        if not revision:
            return None
        return self.renderer.apply(surface, revision)

    def on_selection_changed(self, surface: PreviewSurface | None, revision: str | None) -> None:
        if surface is None or not revision:
            return

        def _apply_latest() -> None:
            if not surface_is_valid(surface):
                return
            self.renderer.apply(surface, revision)

        self.schedule(_apply_latest)
