"""Palettes for terminal rendering of list entries and preview highlights.

Field names double as the formatter's style tag names, so a segment's tag
looks up its escape prefix directly.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers.

    ``preview_hover`` holds bare SGR parameters (no escape prefix) because it
    is layered under existing line styling as a background.
    """

    name: str
    reset: str
    jj_icon_current: str
    jj_icon_immutable: str
    jj_icon_normal: str
    jj_desc: str
    jj_revset: str
    jj_age: str
    preview_hover: str
    gutter_marker: str

    def sgr_for(self, style_tag: str | None) -> str:
        """Return the escape prefix for a formatter style tag, ``""`` if unknown."""
        if not style_tag or style_tag in {"name", "reset", "preview_hover"}:
            return ""
        value = getattr(self, style_tag, "")
        return value if isinstance(value, str) else ""


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    jj_icon_current="\033[1;38;5;42m",
    jj_icon_immutable="\033[38;5;44m",
    jj_icon_normal="\033[38;5;250m",
    jj_desc="\033[38;5;252m",
    jj_revset="\033[1;38;5;171m",
    jj_age="\033[38;5;109m",
    preview_hover="48;2;58;92;188",
    gutter_marker="\033[38;5;81m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    jj_icon_current="\033[1;38;5;45m",
    jj_icon_immutable="\033[38;5;39m",
    jj_icon_normal="\033[38;5;110m",
    jj_desc="\033[38;5;153m",
    jj_revset="\033[1;38;5;117m",
    jj_age="\033[2;38;5;73m",
    preview_hover="48;2;24;64;96",
    gutter_marker="\033[38;5;45m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    jj_icon_current="",
    jj_icon_immutable="",
    jj_icon_normal="",
    jj_desc="",
    jj_revset="",
    jj_age="",
    preview_hover="",
    gutter_marker="",
)

THEMES_BY_NAME: dict[str, UITheme] = {theme.name: theme for theme in (DEFAULT_THEME, OCEAN_THEME)}


def available_theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme`` and the ``theme`` config key."""
    return tuple(sorted(THEMES_BY_NAME))


def normalize_theme_name(name: str | None) -> str:
    """Case-fold ``name``; anything unknown or empty maps to ``"default"``."""
    candidate = (name or "").strip().lower()
    return candidate if candidate in THEMES_BY_NAME else DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Pick the palette for rendering; ``no_color`` always wins."""
    return PLAIN_THEME if no_color else THEMES_BY_NAME[normalize_theme_name(name)]
