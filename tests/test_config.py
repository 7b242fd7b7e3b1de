"""Tests for settings resolution: CLI > STAGEGATE_* env > [tool.stagegate] > default."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from stagegate.config import DEFAULT_TYPECHECK_CMD, env_flag, has_mypy_config, load_settings, read_pyproject
from stagegate.errors import ConfigError

_ENV_VARS = (
    "STAGEGATE_INCLUDE",
    "STAGEGATE_BUILD_CMD",
    "STAGEGATE_TYPECHECK_CMD",
    "STAGEGATE_LINT_CMD",
    "STAGEGATE_DEBOUNCE_MS",
    "STAGEGATE_POLL_MS",
    "STAGEGATE_PRECOMMIT",
    "STAGEGATE_COMPILE_ON_TYPE_ERROR",
    "STAGEGATE_SMOKE_TEST",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _pyproject(root: Path, body: str) -> None:
    (root / "pyproject.toml").write_text(body, encoding="utf-8")


def test_defaults(tmp_path: Path) -> None:
    s = load_settings(tmp_path)
    assert s.root == tmp_path.resolve()
    assert s.include.pattern == r"\.py$"
    assert s.build_cmd == (sys.executable, "-m", "py_compile")
    assert s.typecheck_cmd is None
    assert s.lint_cmd is None
    assert s.debounce_ms == 300
    assert s.poll_interval_ms is None
    assert s.precommit is True
    assert s.compile_on_type_error is False
    assert s.smoke_test is False


def test_pyproject_table(tmp_path: Path) -> None:
    _pyproject(
        tmp_path,
        '[tool.stagegate]\ninclude = "^src/.*\\\\.py$"\nbuild_cmd = ["python", "-m", "compileall", "-q"]\n'
        'lint_cmd = "ruff check --output-format=concise"\ndebounce_ms = 150\nprecommit = false\n',
    )
    s = load_settings(tmp_path)
    assert s.include.pattern == r"^src/.*\.py$"
    assert s.build_cmd == ("python", "-m", "compileall", "-q")
    assert s.lint_cmd == ("ruff", "check", "--output-format=concise")
    assert s.debounce_ms == 150
    assert s.precommit is False


def test_env_beats_pyproject_and_cli_beats_env(tmp_path: Path, monkeypatch) -> None:
    _pyproject(tmp_path, "[tool.stagegate]\ndebounce_ms = 150\n")
    monkeypatch.setenv("STAGEGATE_DEBOUNCE_MS", "50")
    monkeypatch.setenv("STAGEGATE_PRECOMMIT", "off")
    monkeypatch.setenv("STAGEGATE_SMOKE_TEST", "1")
    s = load_settings(tmp_path)
    assert s.debounce_ms == 50
    assert s.precommit is False
    assert s.smoke_test is True

    s = load_settings(tmp_path, {"debounce_ms": 10, "precommit": True, "smoke_test": None})
    assert s.debounce_ms == 10
    assert s.precommit is True
    assert s.smoke_test is True


def test_bad_env_int_falls_through(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("STAGEGATE_DEBOUNCE_MS", "soon")
    assert load_settings(tmp_path).debounce_ms == 300


def test_typecheck_default_follows_mypy_config(tmp_path: Path) -> None:
    assert has_mypy_config(tmp_path) is False
    _pyproject(tmp_path, "[tool.mypy]\nstrict = true\n")
    assert has_mypy_config(tmp_path) is True
    s = load_settings(tmp_path)
    assert s.typecheck_cmd == tuple(DEFAULT_TYPECHECK_CMD.split())


def test_empty_string_disables_typecheck(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "mypy.ini").write_text("[mypy]\n", encoding="utf-8")
    monkeypatch.setenv("STAGEGATE_TYPECHECK_CMD", "")
    assert load_settings(tmp_path).typecheck_cmd is None
    monkeypatch.delenv("STAGEGATE_TYPECHECK_CMD")
    assert load_settings(tmp_path, {"typecheck_cmd": ""}).typecheck_cmd is None


def test_invalid_include_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="invalid include pattern"):
        load_settings(tmp_path, {"include": "(unclosed"})


def test_missing_root_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="not a directory"):
        load_settings(tmp_path / "missing")


def test_unreadable_pyproject_is_ignored(tmp_path: Path) -> None:
    _pyproject(tmp_path, "this is = = not toml")
    assert read_pyproject(tmp_path) == {}
    assert load_settings(tmp_path).debounce_ms == 300


@pytest.mark.parametrize(
    "raw, expected",
    [("1", True), ("yes", True), ("ON", True), ("0", False), ("false", False), ("", None), ("maybe", None)],
)
def test_env_flag(monkeypatch, raw: str, expected) -> None:
    monkeypatch.setenv("STAGEGATE_X", raw)
    assert env_flag("STAGEGATE_X") is expected


@pytest.mark.parametrize("raw, expected", [('"false"', False), ('"off"', False), ('"yes"', True), ('"maybe"', True), ("0", True)])
def test_pyproject_precommit_is_coerced(tmp_path: Path, raw: str, expected: bool) -> None:
    """Quoted booleans are parsed; anything unrecognised falls back to the default (on)."""
    _pyproject(tmp_path, f"[tool.stagegate]\nprecommit = {raw}\n")
    assert load_settings(tmp_path).precommit is expected
