"""End-to-end watch runs against real build/check subprocesses in a temp project."""

from __future__ import annotations

import asyncio
import logging
import re
import sys
from pathlib import Path

import pytest

from stagegate.config import GateSettings
from stagegate.orchestration.runner import run_watch

PY_COMPILE = (sys.executable, "-m", "py_compile")


def _settings(root: Path, **kw) -> GateSettings:
    kw.setdefault("build_cmd", PY_COMPILE)
    return GateSettings(root=root, include=re.compile(r"\.py$"), debounce_ms=50, **kw)


def _run(settings: GateSettings, reporter) -> int:
    return asyncio.run(asyncio.wait_for(run_watch(settings, reporter), timeout=30))


@pytest.fixture
def staged(monkeypatch, stage_calls):
    """Fake git: a fixed staged snapshot and a recording stager."""
    snapshot: list[str] = []
    monkeypatch.setattr("stagegate.vcs.staged_filter.list_staged_files", lambda cwd=None: list(snapshot))
    monkeypatch.setattr("stagegate.orchestration.orchestrator.stage_files", stage_calls)
    return snapshot


def test_clean_staged_files_are_restaged(tmp_path: Path, reporter, staged, stage_calls, caplog) -> None:
    caplog.set_level(logging.INFO, logger="stagegate.orchestration.runner")
    (tmp_path / "ok.py").write_text("x = 1\n", encoding="utf-8")
    (tmp_path / "unstaged.py").write_text("def broken(:\n", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("n\n", encoding="utf-8")
    staged.extend(["ok.py", "notes.txt"])

    assert _run(_settings(tmp_path), reporter) == 0
    assert stage_calls.calls == [(["ok.py"], tmp_path.resolve())]
    assert "Successfully!" in reporter.console.file.getvalue()
    assert "stagegate: 1 staged file(s) in scope" in caplog.text


def test_nothing_staged_finishes_clean(tmp_path: Path, reporter, staged, stage_calls) -> None:
    (tmp_path / "bad.py").write_text("def broken(:\n", encoding="utf-8")
    assert _run(_settings(tmp_path), reporter) == 0
    assert stage_calls.calls == [([], tmp_path.resolve())]


def test_smoke_test_fails_on_syntax_error(tmp_path: Path, reporter, staged, stage_calls, caplog) -> None:
    caplog.set_level(logging.INFO, logger="stagegate.orchestration.runner")
    (tmp_path / "bad.py").write_text("def broken(:\n", encoding="utf-8")
    settings = _settings(tmp_path, precommit=False, smoke_test=True)
    assert _run(settings, reporter) == 1
    assert stage_calls.calls == []
    assert "staged file(s) in scope" not in caplog.text
    out = reporter.console.file.getvalue()
    assert "Failed to compile." in out
    assert "bad.py" in out


def test_smoke_test_with_type_errors(tmp_path: Path, reporter, staged) -> None:
    (tmp_path / "a.py").write_text("x: int = 'no'\n", encoding="utf-8")
    checker = (sys.executable, "-c", "print('a.py:1:10: error: Incompatible types  [assignment]')")
    settings = _settings(tmp_path, precommit=False, smoke_test=True, typecheck_cmd=checker)
    assert _run(settings, reporter) == 1
    out = reporter.console.file.getvalue()
    assert "Type error at 1:10: Incompatible types" in out


def test_smoke_test_passes_with_quiet_checker(tmp_path: Path, reporter, staged) -> None:
    (tmp_path / "a.py").write_text("x = 1\n", encoding="utf-8")
    checker = (sys.executable, "-c", "pass")
    settings = _settings(tmp_path, precommit=False, smoke_test=True, typecheck_cmd=checker)
    assert _run(settings, reporter) == 0


def test_missing_build_command_exits_1(tmp_path: Path, reporter, staged) -> None:
    settings = _settings(tmp_path, build_cmd=("no-such-build-tool-xyz",), precommit=False)
    assert _run(settings, reporter) == 1
    assert "build command not found" in reporter.console.file.getvalue()
