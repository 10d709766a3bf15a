"""Revision picking flows over an external list widget.

``pick_one`` lists revisions and reports the chosen one. ``pick_range`` runs
two listings in sequence: the range end first, then start candidates that
are valid for that end. Listing failures are reported through the injected
``notify`` callable and end the flow; nothing here raises into the host.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable

from .errors import BackendUnavailable, RevPickerError
from .formatting import DisplayItem, format_items, item_label
from .preview.events import PreviewHighlighter, Schedule, call_now
from .preview.overlay import PreviewSurface
from .preview.source import DEFAULT_PREVIEW_STYLE, load_git_preview, load_jj_preview
from .vcs import VCS_KINDS, log_adapter
from .vcs.process import CommandStatus, RunCommand, command_status, run_command
from .vcs.revsets import DEFAULT_TRUNK, combine_revsets, is_set, range_start_filter

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 200
RANGE_TITLE_REV_CHARS = 12

Notify = Callable[[str, int], None]
FormatItem = Callable[..., object]


@runtime_checkable
class SelectWidget(Protocol):
    """Minimal list widget: shows items, reports one choice or ``None``."""

    def select(
        self,
        items: list[DisplayItem],
        prompt: str,
        format_item: FormatItem,
        on_choice: Callable[[DisplayItem | None], None],
    ) -> None: ...


@runtime_checkable
class PickWidget(Protocol):
    """List widget with a preview pane.

    ``preview(item, surface)`` renders into the preview surface,
    ``on_change(item, surface)`` fires on every selection move, and
    ``confirm(item)`` fires after the widget has closed itself.
    """

    def pick(
        self,
        title: str,
        items: list[DisplayItem],
        format_item: FormatItem,
        preview: Callable[[DisplayItem, PreviewSurface], None],
        on_change: Callable[[DisplayItem | None, PreviewSurface | None], None],
        confirm: Callable[[DisplayItem | None], None],
    ) -> None: ...


def log_notify(message: str, level: int) -> None:
    logging.getLogger("revpicker").log(level, message)


@dataclass(frozen=True)
class PickerOptions:
    """Listing options.

    ``revset`` is the externally configured base revset for jj and the
    revspec for git.
    """

    limit: int = DEFAULT_LIMIT
    revset: str | None = None
    include_staged: bool = True
    trunk: str = DEFAULT_TRUNK
    preview_style: str = DEFAULT_PREVIEW_STYLE


@dataclass(frozen=True)
class PickerDeps:
    """Host collaborators used by :class:`RevisionPicker`."""

    widget: object
    notify: Notify = log_notify
    run: RunCommand = run_command
    status: CommandStatus = command_status
    schedule: Schedule = call_now


class RangeState(Enum):
    SELECTING_END = "selecting_end"
    SELECTING_START = "selecting_start"
    RANGE_CHOSEN = "range_chosen"
    ABORTED = "aborted"


@dataclass
class RangeSelection:
    """Progress of one two-step range pick."""

    state: RangeState = RangeState.SELECTING_END
    end_revision: str | None = None
    start_revision: str | None = None

    def _move(self, expected: RangeState, new_state: RangeState) -> None:
        if self.state is not expected:
            raise RevPickerError(f"cannot move from {self.state.value} to {new_state.value}")
        self.state = new_state

    def choose_end(self, revision: str) -> None:
        self._move(RangeState.SELECTING_END, RangeState.SELECTING_START)
        self.end_revision = revision

    def choose_start(self, revision: str) -> None:
        self._move(RangeState.SELECTING_START, RangeState.RANGE_CHOSEN)
        self.start_revision = revision

    def abort(self) -> None:
        if self.state in {RangeState.RANGE_CHOSEN, RangeState.ABORTED}:
            return
        self.state = RangeState.ABORTED

    @property
    def revision_range(self) -> tuple[str, str] | None:
        if self.state is not RangeState.RANGE_CHOSEN:
            return None
        assert self.start_revision is not None and self.end_revision is not None
        return self.start_revision, self.end_revision


def _check_vcs(vcs: str) -> None:
    if vcs not in VCS_KINDS:
        raise ValueError(f"unsupported vcs: {vcs!r}")


class RevisionPicker:
    """Binds listing, formatting, widget dispatch, and preview highlighting."""

    def __init__(self, deps: PickerDeps, options: PickerOptions | None = None) -> None:
        self.deps = deps
        self.options = options if options is not None else PickerOptions()
        self.highlighter = PreviewHighlighter(schedule=deps.schedule)

    def effective_filter(self, vcs: str, filter_expr: str | None) -> str | None:
        """Combine a caller filter with the configured base revset/revspec."""
        if vcs == "jj":
            return combine_revsets(filter_expr, self.options.revset)
        if is_set(filter_expr):
            return filter_expr
        return self.options.revset if is_set(self.options.revset) else None

    def load_items(
        self,
        vcs: str,
        filter_expr: str | None = None,
        exclude_revision: str | None = None,
        include_staged: bool = False,
    ) -> list[DisplayItem]:
        """List and format revisions; raises :class:`BackendUnavailable`."""
        adapter = log_adapter(vcs, run=self.deps.run, status=self.deps.status)
        records = adapter.list_revisions(
            self.options.limit,
            self.effective_filter(vcs, filter_expr),
            exclude_revision,
            include_staged,
        )
        return format_items(vcs, records)

    def _widget_ready(self) -> bool:
        if isinstance(self.deps.widget, SelectWidget):
            return True
        self.deps.notify("revision picker widget is not available", logging.ERROR)
        return False

    def _preview_for(self, vcs: str, preview_revset: str | None) -> Callable[[DisplayItem, PreviewSurface], None]:
        def _render(item: DisplayItem, surface: PreviewSurface) -> None:
            if vcs == "jj":
                lines = load_jj_preview(self.options.limit, preview_revset, run=self.deps.run)
            else:
                lines = load_git_preview(item.revision_id, self.options.preview_style, run=self.deps.run)
            self.highlighter.show_preview(surface, lines, item.revision_id)

        return _render

    def open_list(
        self,
        vcs: str,
        items: list[DisplayItem],
        title: str,
        on_select: Callable[[str], None],
        preview_revset: str | None = None,
        on_cancel: Callable[[], None] | None = None,
    ) -> None:
        def _on_choice(item: DisplayItem | None) -> None:
            if item is not None and item.revision_id:
                on_select(item.revision_id)
            elif on_cancel is not None:
                on_cancel()

        widget = self.deps.widget
        if isinstance(widget, PickWidget):

            def _on_change(item: DisplayItem | None, surface: PreviewSurface | None) -> None:
                self.highlighter.on_selection_changed(surface, item.revision_id if item else None)

            widget.pick(
                title,
                items,
                item_label,
                self._preview_for(vcs, preview_revset),
                _on_change,
                _on_choice,
            )
            return

        widget.select(items, title, item_label, _on_choice)

    def _load_or_report(
        self,
        vcs: str,
        failure_message: str,
        filter_expr: str | None = None,
        exclude_revision: str | None = None,
        include_staged: bool = False,
    ) -> list[DisplayItem] | None:
        try:
            return self.load_items(vcs, filter_expr, exclude_revision, include_staged)
        except BackendUnavailable as exc:
            logger.debug("listing failed: %s", exc)
            self.deps.notify(failure_message, logging.ERROR)
            return None

    def pick_one(self, vcs: str, on_select: Callable[[str], None]) -> None:
        _check_vcs(vcs)
        if not self._widget_ready():
            return

        items = self._load_or_report(
            vcs,
            f"Failed to load {vcs} history",
            include_staged=self.options.include_staged,
        )
        if items is None:
            return
        if not items:
            self.deps.notify("No revisions found", logging.INFO)
            return

        title = "Select git commit" if vcs == "git" else "Select jj revision"
        self.open_list(vcs, items, title, on_select, self.effective_filter(vcs, None))

    def pick_range(self, vcs: str, on_select: Callable[[str, str], None]) -> RangeSelection | None:
        _check_vcs(vcs)
        if not self._widget_ready():
            return None

        end_items = self._load_or_report(vcs, f"Failed to load {vcs} history")
        if end_items is None:
            return None
        if not end_items:
            self.deps.notify("No revisions found", logging.INFO)
            return None

        flow = RangeSelection()

        def _on_end(end_revision: str) -> None:
            if flow.state is not RangeState.SELECTING_END:
                logger.debug("ignoring end choice in state %s", flow.state.value)
                return
            flow.choose_end(end_revision)
            start_filter = range_start_filter(vcs, end_revision, self.options.trunk)
            start_items = self._load_or_report(
                vcs,
                f"Failed to load parent revisions for {end_revision[:RANGE_TITLE_REV_CHARS]}",
                filter_expr=start_filter,
                exclude_revision=end_revision,
            )
            if start_items is None:
                flow.abort()
                return
            if not start_items:
                self.deps.notify("No parent revisions available for selected end revision", logging.WARNING)
                flow.abort()
                return

            def _on_start(start_revision: str) -> None:
                if flow.state is not RangeState.SELECTING_START:
                    logger.debug("ignoring start choice in state %s", flow.state.value)
                    return
                flow.choose_start(start_revision)
                on_select(start_revision, end_revision)

            self.open_list(
                vcs,
                start_items,
                f"Select range start (end: {end_revision[:RANGE_TITLE_REV_CHARS]})",
                _on_start,
                self.effective_filter(vcs, start_filter),
                on_cancel=flow.abort,
            )

        end_title = "Select range end (git)" if vcs == "git" else "Select range end (jj)"
        self.open_list(vcs, end_items, end_title, _on_end, self.effective_filter(vcs, None), on_cancel=flow.abort)
        return flow


def pick_one(vcs: str, options: PickerOptions | None, on_select: Callable[[str], None], deps: PickerDeps) -> None:
    """Let the user pick one revision; ``on_select`` gets its full id."""
    RevisionPicker(deps, options).pick_one(vcs, on_select)


def pick_range(
    vcs: str,
    options: PickerOptions | None,
    on_select: Callable[[str, str], None],
    deps: PickerDeps,
) -> RangeSelection | None:
    """Let the user pick a range end, then a start; ``on_select(start, end)``."""
    return RevisionPicker(deps, options).pick_range(vcs, on_select)
