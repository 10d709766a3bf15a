"""Persistent JSON defaults for revision picking.

Stores the listing limit, base revsets, trunk expression, and display
preferences. A missing or malformed file, or a key of the wrong type, reads
as the built-in default.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .picker import DEFAULT_LIMIT, PickerOptions
from .preview.source import DEFAULT_PREVIEW_STYLE
from .ui_theme import normalize_theme_name
from .vcs.revsets import DEFAULT_TRUNK

APP_NAME = "revpicker"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


def load_config() -> dict[str, object]:
    """Return the stored settings object, or ``{}`` if there is none usable."""
    try:
        raw = CONFIG_PATH.read_text(encoding="utf-8")
        data = json.loads(raw)
    except (OSError, ValueError):
        return {}
    if not isinstance(data, dict):
        return {}
    return data


def save_config(data: dict[str, object]) -> None:
    """Write ``data`` as indented JSON. An unwritable location is not an error."""
    text = json.dumps(data, indent=2, sort_keys=True) + "\n"
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(text, encoding="utf-8")
    except OSError:
        return


def _positive_int(value: object, default: int) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


def _optional_text(value: object) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _text(value: object, default: str) -> str:
    return _optional_text(value) or default


def load_picker_options(vcs: str, data: dict[str, object] | None = None) -> PickerOptions:
    """Build :class:`PickerOptions` for ``vcs`` from the stored config.

    jj reads ``jj_log_revset`` as its base revset; git reads ``git_revspec``.
    """
    if data is None:
        data = load_config()
    revset_key = "jj_log_revset" if vcs == "jj" else "git_revspec"
    include_staged = data.get("include_staged")
    return PickerOptions(
        limit=_positive_int(data.get("limit"), DEFAULT_LIMIT),
        revset=_optional_text(data.get(revset_key)),
        include_staged=include_staged if isinstance(include_staged, bool) else True,
        trunk=_text(data.get("trunk"), DEFAULT_TRUNK),
        preview_style=_text(data.get("preview_style"), DEFAULT_PREVIEW_STYLE),
    )


def load_theme_name() -> str:
    return normalize_theme_name(_optional_text(load_config().get("theme")))


def save_theme_name(theme_name: str) -> None:
    """Remember ``theme_name`` for later runs; unknown names are not stored."""
    candidate = theme_name.strip().lower()
    if candidate != normalize_theme_name(candidate):
        return
    data = load_config()
    data["theme"] = candidate
    save_config(data)

