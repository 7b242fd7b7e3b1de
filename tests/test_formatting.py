"""Tests for diagnostic text formatting."""

from pathlib import Path

from stagegate.diagnostics.formatting import clean_message, format_diagnostic
from stagegate.engine.models import CheckerDiagnostic


def test_format_diagnostic_prefixes_source_file() -> None:
    d = CheckerDiagnostic(severity="error", file="pkg/a.py", line=3, column=5, message="Bad type", code="assignment")
    text = format_diagnostic(d)
    assert text.splitlines()[0] == "pkg/a.py"
    assert "Type error at 3:5: Bad type  [assignment]" in text


def test_format_diagnostic_shows_source_line_with_caret(tmp_path: Path) -> None:
    (tmp_path / "a.py").write_text("x = 1\ny: int = 'no'\n", encoding="utf-8")
    d = CheckerDiagnostic(severity="warning", file="a.py", line=2, column=10, message="m")
    lines = format_diagnostic(d, tmp_path).splitlines()
    assert lines[1] == "Type warning at 2:10: m"
    assert lines[2] == "  2 | y: int = 'no'"
    assert lines[3].endswith("^")
    assert lines[3].index("^") == lines[2].index("|") + 2 + 9


def test_format_diagnostic_missing_file_skips_source(tmp_path: Path) -> None:
    d = CheckerDiagnostic(severity="error", file="gone.py", line=1, message="m")
    assert format_diagnostic(d, tmp_path) == "gone.py\nType error at 1: m"


def test_clean_message_rewrites_syntax_error_label() -> None:
    assert clean_message("\n  File x\nSyntaxError: bad\n\n\n\nmore  \n") == "  File x\nSyntax error: bad\n\nmore"
