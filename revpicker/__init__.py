"""Public package surface for revpicker.

Exposes the two picking flows, their option/dependency types, and ``main``
for programmatic CLI invocation. Most implementation lives in submodules.
"""

from __future__ import annotations

from .errors import BackendUnavailable, RevPickerError, StaleHandle
from .picker import (
    PickerDeps,
    PickerOptions,
    RangeSelection,
    RangeState,
    RevisionPicker,
    pick_one,
    pick_range,
)


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "BackendUnavailable",
    "PickerDeps",
    "PickerOptions",
    "RangeSelection",
    "RangeState",
    "RevPickerError",
    "RevisionPicker",
    "StaleHandle",
    "main",
    "pick_one",
    "pick_range",
]
