"""Public preview API: hover-target location, overlay rendering, preview sources."""

from __future__ import annotations

from .events import PreviewHighlighter, call_now
from .locator import (
    MATCH_KEY_LENGTH,
    HighlightTarget,
    is_commit_header_line,
    is_continuation_line,
    is_separator_line,
    locate_hover_target,
)
from .overlay import (
    PREVIEW_HOVER_STYLE,
    CloseNotifier,
    GutterMarkers,
    LineMatchOverlay,
    OverlayRegistry,
    OverlayRenderer,
    OverlayState,
    PreviewSurface,
    SpanOverlay,
    WritableSurface,
)
from .source import PREVIEW_UNAVAILABLE, load_git_preview, load_jj_preview
from .terminal import TerminalPreview

__all__ = [
    "MATCH_KEY_LENGTH",
    "PREVIEW_HOVER_STYLE",
    "PREVIEW_UNAVAILABLE",
    "CloseNotifier",
    "GutterMarkers",
    "HighlightTarget",
    "LineMatchOverlay",
    "OverlayRegistry",
    "OverlayRenderer",
    "OverlayState",
    "PreviewHighlighter",
    "PreviewSurface",
    "SpanOverlay",
    "TerminalPreview",
    "WritableSurface",
    "call_now",
    "is_commit_header_line",
    "is_continuation_line",
    "is_separator_line",
    "load_git_preview",
    "load_jj_preview",
    "locate_hover_target",
]
