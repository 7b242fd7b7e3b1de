"""Parse build, type-check and lint command output into error/warning records."""

from __future__ import annotations

import re

from .models import CheckerDiagnostic

# Python warnings module format: "path.py:12: SyntaxWarning: invalid escape sequence"
_WARNING_LINE = re.compile(r"^(?P<file>[^:\n]+):(?P<line>\d+): (?P<kind>\w*Warning): (?P<message>.*)$")

# mypy-style: "pkg/a.py:3:5: error: Incompatible types  [assignment]"
_CHECKER_LINE = re.compile(
    r"^(?P<file>[^:\n]+):(?P<line>\d+):(?:(?P<column>\d+):)? (?P<severity>error|warning|note): "
    r"(?P<message>.*?)(?:\s+\[(?P<code>[\w-]+)\])?$"
)

# ruff concise: "pkg/a.py:1:8: F401 [*] `os` imported but unused"
_LINT_LINE = re.compile(r"^(?P<file>[^:\n]+):(?P<line>\d+):(?P<column>\d+): (?P<code>[A-Z]+\d+) (?P<message>.*)$")


def _collapse_blank_lines(text: str) -> str:
    return re.sub(r"\n{3,}", "\n\n", text.strip())


def parse_build_output(returncode: int, stdout: str, stderr: str) -> tuple[list[str], list[str]]:
    """Split build command output into (errors, warnings).

    Warning lines are collected from both streams. A non-zero exit contributes one error
    made of the remaining output.
    """
    warnings: list[str] = []
    rest: list[str] = []
    for line in (stderr + "\n" + stdout).splitlines():
        m = _WARNING_LINE.match(line.rstrip())
        if m:
            warnings.append(f"{m.group('file')}\nLine {m.group('line')}: {m.group('kind')}: {m.group('message')}")
        else:
            rest.append(line.rstrip())
    errors: list[str] = []
    if returncode != 0:
        body = _collapse_blank_lines("\n".join(rest))
        errors.append(body or f"build command exited with status {returncode}")
    return errors, warnings


def parse_checker_output(text: str) -> list[CheckerDiagnostic]:
    """Parse mypy-style type-check output. Notes and summary lines are ignored."""
    out: list[CheckerDiagnostic] = []
    for line in text.splitlines():
        m = _CHECKER_LINE.match(line.rstrip())
        if not m or m.group("severity") == "note":
            continue
        column = m.group("column")
        out.append(
            CheckerDiagnostic(
                severity="error" if m.group("severity") == "error" else "warning",
                file=m.group("file"),
                line=int(m.group("line")),
                column=int(column) if column else None,
                message=m.group("message"),
                code=m.group("code"),
            )
        )
    return out


def parse_lint_output(text: str) -> list[CheckerDiagnostic]:
    """Parse ruff-style concise lint output; every finding is a warning."""
    out: list[CheckerDiagnostic] = []
    for line in text.splitlines():
        m = _LINT_LINE.match(line.rstrip())
        if not m:
            continue
        out.append(
            CheckerDiagnostic(
                severity="warning",
                file=m.group("file"),
                line=int(m.group("line")),
                column=int(m.group("column")),
                message=m.group("message"),
                code=m.group("code"),
            )
        )
    return out
