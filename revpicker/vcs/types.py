"""Revision records parsed from VCS log output."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

STAGED_REVISION = "--staged"
STAGED_DESCRIPTION = "(STAGED)"


class RevisionKind(Enum):
    CURRENT = "current"
    IMMUTABLE = "immutable"
    NORMAL = "normal"


JJ_ICON_KINDS: dict[str, RevisionKind] = {
    "@": RevisionKind.CURRENT,
    "◆": RevisionKind.IMMUTABLE,
    "○": RevisionKind.NORMAL,
}


@dataclass(frozen=True)
class RevisionRecord:
    """One parsed log entry.

    ``revision_id`` is the backend-native full identifier handed back to the
    caller on selection. ``age`` holds the git short date or the jj relative
    age. ``icon`` keeps the raw jj marker so the formatter can echo it.
    """

    revision_id: str
    short_id: str
    description: str
    age: str
    kind: RevisionKind = RevisionKind.NORMAL
    icon: str = ""
    staged: bool = False


def staged_record() -> RevisionRecord:
    """Return the pseudo-record standing for the git index."""
    return RevisionRecord(
        revision_id=STAGED_REVISION,
        short_id="",
        description=STAGED_DESCRIPTION,
        age="",
        staged=True,
    )
