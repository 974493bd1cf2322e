"""Entry-point modules must import cleanly in a fresh interpreter."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[2]


class TestImports:
    @pytest.mark.parametrize(
        "module",
        ["notesync.cli", "notesync.app", "notesync.api.client", "notesync.notes.store", "notesync.tenants.state"],
    )
    def test_module_imports_first(self, module: str) -> None:
        result = subprocess.run(
            [sys.executable, "-c", f"import {module}"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            check=False,
        )
        assert result.returncode == 0, result.stderr
