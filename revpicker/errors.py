"""Exception types shared by adapters, the picker flow, and preview overlays."""

from __future__ import annotations


class RevPickerError(Exception):
    """Base class for revpicker failures."""


class BackendUnavailable(RevPickerError):
    """A VCS command exited non-zero or the binary could not be started."""

    def __init__(self, vcs: str, argv: list[str]) -> None:
        super().__init__(f"{vcs} command failed: {' '.join(argv)}")
        self.vcs = vcs
        self.argv = list(argv)


class StaleHandle(RevPickerError):
    """A preview buffer or viewport went away while an update was running."""
