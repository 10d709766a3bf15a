"""Command-line front door for revpicker.

Prints the formatted revision listing, or with ``--highlight`` renders the
preview pane for a revision with the hover highlight applied, then exits.
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import shutil
import sys

from .config import load_picker_options, load_theme_name, save_theme_name
from .errors import BackendUnavailable
from .formatting import DisplayItem, render_segments
from .picker import PickerDeps, PickerOptions, RevisionPicker
from .preview.overlay import OverlayRenderer
from .preview.source import load_git_preview, load_jj_preview
from .preview.terminal import TerminalPreview
from .ui_theme import UITheme, available_theme_names, resolve_theme
from .vcs import VCS_KINDS
from .vcs.process import CommandStatus, RunCommand, command_status, run_command


def _positive_int(value: str) -> int:
    try:
        count = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected a whole number, got {value!r}") from exc
    if count < 1:
        raise argparse.ArgumentTypeError(f"expected a positive number, got {count}")
    return count


def detect_vcs(status: CommandStatus = command_status) -> str:
    """Prefer jj when the working directory is inside a jj workspace."""
    return "jj" if status(["jj", "root"]) == 0 else "git"


def render_listing(items: list[DisplayItem], theme: UITheme) -> str:
    return "\n".join(render_segments(item, theme) for item in items)


def render_highlighted_preview(
    picker: RevisionPicker,
    vcs: str,
    revision: str,
    theme: UITheme,
    no_color: bool = False,
    max_cols: int | None = None,
    run: RunCommand = run_command,
) -> str:
    """Render the preview a picker would show for ``revision``, highlighted."""
    options = picker.options
    if vcs == "jj":
        lines = load_jj_preview(options.limit, picker.effective_filter(vcs, None), run=run)
    else:
        lines = load_git_preview(revision, options.preview_style, colorize=not no_color, run=run)
    surface = TerminalPreview(lines, height=max(1, len(lines)), theme=theme)
    OverlayRenderer().apply(surface, revision)
    return surface.render(max_cols=max_cols, whole_buffer=True)


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and print a listing or a highlighted preview."""
    parser = argparse.ArgumentParser(description="List VCS revisions and preview hover highlights.")
    parser.add_argument("--vcs", choices=VCS_KINDS, default=None, help="Backend to use (default: auto-detect).")
    parser.add_argument("--limit", type=_positive_int, default=None, help="Maximum number of revisions to list.")
    parser.add_argument("--revset", default=None, help="Base revset (jj) or revspec (git).")
    parser.add_argument("--exclude", default=None, metavar="REV", help="Full revision id to leave out.")
    parser.add_argument(
        "--staged",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Include the staged-changes entry (git; default: include_staged from config).",
    )
    parser.add_argument("--highlight", default=None, metavar="REV", help="Render the preview with REV highlighted.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}); remembered for later runs.",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--max-cols", type=_positive_int, default=None, help="Clip preview output to this width.")
    parser.add_argument("--debug", action="store_true", help="Log debug details to stderr.")
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    vcs = args.vcs or detect_vcs()
    options: PickerOptions = load_picker_options(vcs)
    if args.limit is not None:
        options = dataclasses.replace(options, limit=args.limit)
    if args.revset is not None:
        options = dataclasses.replace(options, revset=args.revset)
    if args.theme is not None:
        save_theme_name(args.theme)
    theme = resolve_theme(args.theme or load_theme_name(), no_color=args.no_color)
    picker = RevisionPicker(PickerDeps(widget=None), options)

    if args.highlight is not None:
        max_cols = args.max_cols
        if max_cols is None and sys.stdout.isatty():
            max_cols = shutil.get_terminal_size((80, 24)).columns
        sys.stdout.write(
            render_highlighted_preview(picker, vcs, args.highlight, theme, args.no_color, max_cols) + "\n"
        )
        return

    include_staged = options.include_staged if args.staged is None else args.staged
    try:
        items = picker.load_items(vcs, exclude_revision=args.exclude, include_staged=include_staged)
    except BackendUnavailable as exc:
        raise SystemExit(f"Failed to load {vcs} history") from exc
    if not items:
        raise SystemExit("No revisions found")
    sys.stdout.write(render_listing(items, theme) + "\n")


if __name__ == "__main__":
    main()
