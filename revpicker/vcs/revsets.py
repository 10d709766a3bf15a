"""Composition of backend filter expressions (revsets and revspecs)."""

from __future__ import annotations

DEFAULT_TRUNK = "trunk()"


def is_set(value: str | None) -> bool:
    return value is not None and value != ""


def combine_revsets(filter_expr: str | None, base_revset: str | None) -> str | None:
    """AND a caller filter with the configured base revset when both exist."""
    if is_set(filter_expr) and is_set(base_revset):
        return f"({filter_expr}) & ({base_revset})"
    if is_set(filter_expr):
        return filter_expr
    return base_revset if is_set(base_revset) else None


def jj_range_start_filter(end_revision: str, trunk: str = DEFAULT_TRUNK) -> str:
    """Ancestors of ``end_revision`` that are also descendants of trunk.

    Keeps immutable history from before the trunk point out of the start list.
    """
    return f"(::{end_revision}) & ({trunk}::)"


def range_start_filter(vcs: str, end_revision: str, trunk: str = DEFAULT_TRUNK) -> str | None:
    """Filter expression for start candidates of a range ending at ``end_revision``.

    git lists the same history as the end step and only drops the end itself,
    so no extra expression is needed.
    """
    if vcs == "git":
        return None
    return jj_range_start_filter(end_revision, trunk)
