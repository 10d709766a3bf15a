"""Blocking subprocess primitives used by the VCS adapters.

Commands run synchronously with no timeout; an unresponsive backend blocks
the caller until it exits.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable

logger = logging.getLogger(__name__)

RunCommand = Callable[[list[str]], list[str] | None]
CommandStatus = Callable[[list[str]], int | None]


def _run(argv: list[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        logger.debug("could not start %s: %s", argv[0] if argv else "<empty>", exc)
        return None


def run_command(argv: list[str]) -> list[str] | None:
    """Run ``argv`` and return stdout lines, or ``None`` on a non-zero exit."""
    proc = _run(argv)
    if proc is None:
        return None
    if proc.returncode != 0:
        logger.debug("%s exited with %d", argv, proc.returncode)
        return None
    return proc.stdout.splitlines()


def command_status(argv: list[str]) -> int | None:
    """Run ``argv`` for its exit status only; ``None`` when it cannot start."""
    proc = _run(argv)
    if proc is None:
        return None
    return proc.returncode
