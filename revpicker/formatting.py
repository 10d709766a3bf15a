"""Turn revision records into aligned list entries.

git entries are plain text. jj entries get a fixed-width description column,
a change-id column padded to the widest id in the batch, and a parallel
sequence of styled segments for widgets that can render per-segment styles.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .ansi import display_width, pad_right, truncate
from .ui_theme import UITheme
from .vcs.types import RevisionKind, RevisionRecord

JJ_DESCRIPTION_MAX_CHARS = 40
JJ_DESCRIPTION_COLUMN_WIDTH = 43
JJ_EMPTY_DESCRIPTION = "(no description set)"

STYLE_JJ_ICON_CURRENT = "jj_icon_current"
STYLE_JJ_ICON_IMMUTABLE = "jj_icon_immutable"
STYLE_JJ_ICON_NORMAL = "jj_icon_normal"
STYLE_JJ_DESC = "jj_desc"
STYLE_JJ_REVSET = "jj_revset"
STYLE_JJ_AGE = "jj_age"

_ICON_STYLES = {
    RevisionKind.CURRENT: STYLE_JJ_ICON_CURRENT,
    RevisionKind.IMMUTABLE: STYLE_JJ_ICON_IMMUTABLE,
    RevisionKind.NORMAL: STYLE_JJ_ICON_NORMAL,
}

Segment = tuple[str, str]


@dataclass(frozen=True)
class DisplayItem:
    """A single-line list entry.

    When ``segments`` is present, joining the segment texts yields ``text``.
    """

    revision_id: str
    text: str
    segments: tuple[Segment, ...] | None = None


def fit_description(description: str) -> str:
    """Fit a jj description into its fixed-width column."""
    fitted = truncate(description or JJ_EMPTY_DESCRIPTION, JJ_DESCRIPTION_MAX_CHARS)
    return pad_right(fitted, JJ_DESCRIPTION_COLUMN_WIDTH)


def format_git_item(record: RevisionRecord) -> DisplayItem:
    if record.staged:
        return DisplayItem(revision_id=record.revision_id, text=record.description)
    text = f"{record.short_id}  {record.age}  {record.description}"
    return DisplayItem(revision_id=record.revision_id, text=text)


def format_jj_items(records: Sequence[RevisionRecord]) -> list[DisplayItem]:
    revset_width = max((display_width(record.short_id) for record in records), default=0)

    items: list[DisplayItem] = []
    for record in records:
        description = fit_description(record.description)
        revset = pad_right(record.short_id, revset_width)
        segments: tuple[Segment, ...] = (
            (f"{record.icon} ", _ICON_STYLES[record.kind]),
            (description, STYLE_JJ_DESC),
            (f" {revset}", STYLE_JJ_REVSET),
            (f" {record.age}", STYLE_JJ_AGE),
        )
        items.append(
            DisplayItem(
                revision_id=record.revision_id,
                text="".join(text for text, _ in segments),
                segments=segments,
            )
        )
    return items


def format_items(vcs: str, records: Sequence[RevisionRecord]) -> list[DisplayItem]:
    """Format one listing; column widths are shared across the whole batch."""
    if vcs == "git":
        return [format_git_item(record) for record in records]
    if vcs == "jj":
        return format_jj_items(records)
    raise ValueError(f"unsupported vcs: {vcs!r}")


def item_label(item: DisplayItem, supports_segments: bool = False) -> str | tuple[Segment, ...]:
    """Return what a list widget should display for ``item``.

    Widgets without per-segment styling get the plain concatenated text.
    """
    if supports_segments and item.segments:
        return item.segments
    return item.text


def render_segments(item: DisplayItem, theme: UITheme) -> str:
    """Render an item to one ANSI-styled terminal line."""
    if not item.segments:
        return item.text
    out: list[str] = []
    for text, style_tag in item.segments:
        sgr = theme.sgr_for(style_tag)
        if sgr:
            out.append(f"{sgr}{text}{theme.reset}")
        else:
            out.append(text)
    return "".join(out)
