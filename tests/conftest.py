"""Pytest configuration. Ensures project root is in sys.path for stagegate_cli and the stagegate package."""
import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture
def reporter():
    """Reporter writing plain text into a buffer; read it back with reporter.console.file.getvalue()."""
    from stagegate.reporting.console import Reporter

    console = Console(file=io.StringIO(), width=200, force_terminal=False, color_system=None)
    return Reporter(console, interactive=False)


@pytest.fixture
def stage_calls():
    """Recording stager: list of (paths, cwd) tuples."""
    calls: list = []

    def _stager(paths, cwd=None):
        calls.append((list(paths), cwd))

    _stager.calls = calls
    return _stager
