"""Human-readable text for diagnostics."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from stagegate.engine.models import CheckerDiagnostic

_SYNTAX_ERROR = re.compile(r"^(\s*)SyntaxError: ", re.MULTILINE)


def _source_line(root: Path | None, file: str, line: int) -> str | None:
    if root is None or line < 1:
        return None
    try:
        lines = (root / file).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError):
        return None
    if line > len(lines):
        return None
    return lines[line - 1]


def format_diagnostic(diag: CheckerDiagnostic, root: Path | None = None) -> str:
    """Source file on its own line, then location, message, code and (when readable) the source line."""
    label = "Type error" if diag.severity == "error" else "Type warning"
    where = f"{diag.line}:{diag.column}" if diag.column is not None else str(diag.line)
    text = f"{diag.file}\n{label} at {where}: {diag.message}"
    if diag.code:
        text += f"  [{diag.code}]"
    src = _source_line(root, diag.file, diag.line)
    if src is not None:
        text += f"\n  {diag.line} | {src}"
        if diag.column is not None:
            gutter = " " * len(str(diag.line))
            text += f"\n  {gutter} | {' ' * (diag.column - 1)}^"
    return text


def clean_message(text: str) -> str:
    """Normalize one build message: trim, collapse blank runs, friendlier syntax-error label."""
    text = text.strip("\n").rstrip()
    text = re.sub(r"\n{3,}", "\n\n", text)
    return _SYNTAX_ERROR.sub(r"\1Syntax error: ", text)


def format_messages(messages: Iterable[str]) -> list[str]:
    return [clean_message(m) for m in messages]
