"""Settings resolution: CLI flag > STAGEGATE_* env > pyproject [tool.stagegate] > default."""

from __future__ import annotations

import os
import re
import shlex
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from dotenv import load_dotenv

from .engine.models import DEFAULT_DEBOUNCE_MS
from .errors import ConfigError

DEFAULT_INCLUDE = r"\.py$"
DEFAULT_TYPECHECK_CMD = "mypy --no-error-summary --show-column-numbers --hide-error-context --no-pretty"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(slots=True)
class GateSettings:
    """Everything one watch run needs, resolved once at startup."""

    root: Path
    include: re.Pattern[str]
    build_cmd: tuple[str, ...]
    typecheck_cmd: tuple[str, ...] | None = None
    lint_cmd: tuple[str, ...] | None = None
    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    poll_interval_ms: int | None = None
    precommit: bool = True
    compile_on_type_error: bool = False
    smoke_test: bool = False


def load_environment(env_file: Path | None = None) -> None:
    """Load .env (project root by default). Values in the file override the shell's."""
    path = env_file if env_file is not None else Path.cwd() / ".env"
    if path.is_file():
        load_dotenv(path, override=True)


def env_flag(name: str, default: bool | None = None) -> bool | None:
    raw = os.environ.get(name, "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def _env_int(name: str) -> int | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _as_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        raw = value.strip().lower()
        if raw in _TRUE:
            return True
        if raw in _FALSE:
            return False
    return None


def read_pyproject(root: Path) -> dict[str, Any]:
    """Return the [tool.stagegate] table, or {} when absent or unreadable."""
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return {}
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}
    table = (data.get("tool") or {}).get("stagegate") or {}
    return table if isinstance(table, dict) else {}


def has_mypy_config(root: Path) -> bool:
    """Type checking is on by default when the project carries a mypy configuration."""
    if (root / "mypy.ini").is_file() or (root / ".mypy.ini").is_file():
        return True
    pyproject = root / "pyproject.toml"
    if not pyproject.is_file():
        return False
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return False
    return "mypy" in (data.get("tool") or {})


def _command(value: Any) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        return tuple(str(v) for v in value) or None
    parts = shlex.split(str(value).strip())
    return tuple(parts) or None


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def compile_include(raw: str) -> re.Pattern[str]:
    try:
        return re.compile(raw)
    except re.error as e:
        raise ConfigError(f"invalid include pattern {raw!r}: {e}") from e


def load_settings(root: Path, overrides: Mapping[str, Any] | None = None) -> GateSettings:
    """Resolve settings for `root`. `overrides` holds CLI values; None means "not given"."""
    root = Path(root).resolve()
    if not root.is_dir():
        raise ConfigError(f"not a directory: {root}")
    cli = dict(overrides or {})
    project = read_pyproject(root)
    env = os.environ

    include_raw = _first(cli.get("include"), env.get("STAGEGATE_INCLUDE") or None, project.get("include"), DEFAULT_INCLUDE)
    build_cmd = _command(_first(cli.get("build_cmd"), env.get("STAGEGATE_BUILD_CMD") or None, project.get("build_cmd")))
    typecheck_default = DEFAULT_TYPECHECK_CMD if has_mypy_config(root) else None
    typecheck_raw = _first(cli.get("typecheck_cmd"), env.get("STAGEGATE_TYPECHECK_CMD"), project.get("typecheck_cmd"), typecheck_default)
    lint_raw = _first(cli.get("lint_cmd"), env.get("STAGEGATE_LINT_CMD"), project.get("lint_cmd"))

    return GateSettings(
        root=root,
        include=compile_include(str(include_raw)),
        build_cmd=build_cmd or (sys.executable, "-m", "py_compile"),
        # An empty string anywhere in the chain switches the tool off.
        typecheck_cmd=_command(typecheck_raw),
        lint_cmd=_command(lint_raw),
        debounce_ms=_first(
            cli.get("debounce_ms"), _env_int("STAGEGATE_DEBOUNCE_MS"), _as_int(project.get("debounce_ms")), DEFAULT_DEBOUNCE_MS
        ),
        poll_interval_ms=_first(cli.get("poll_interval_ms"), _env_int("STAGEGATE_POLL_MS"), _as_int(project.get("poll_interval_ms"))),
        precommit=_first(cli.get("precommit"), env_flag("STAGEGATE_PRECOMMIT"), _as_bool(project.get("precommit")), True),
        compile_on_type_error=_first(cli.get("compile_on_type_error"), env_flag("STAGEGATE_COMPILE_ON_TYPE_ERROR"), False),
        smoke_test=_first(cli.get("smoke_test"), env_flag("STAGEGATE_SMOKE_TEST"), False),
    )
