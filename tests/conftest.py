"""Pytest bootstrap for the revpicker test suite.

Puts the repository root on ``sys.path`` so ``import revpicker`` resolves to
the checkout, and keeps every test away from the user's real config file.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

REPO_ROOT = str(Path(__file__).resolve().parent.parent)

if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)


@pytest.fixture(autouse=True)
def isolated_config_path(tmp_path, monkeypatch):
    monkeypatch.setattr("revpicker.config.CONFIG_PATH", tmp_path / "revpicker-config.json")
    return tmp_path / "revpicker-config.json"
