"""Shared helpers for CLI handlers."""

from __future__ import annotations

from pathlib import Path
from typing import Any


def _clog() -> Any:
    from stagegate.orchestration.logging import get_logger

    return get_logger("cli")


def _err(msg: str) -> None:
    """Log unified error message (via logger, respects --quiet)."""
    _clog().error("stagegate: %s", msg)


def _check_path(path: Path, must_be_dir: bool = True) -> int:
    """Return 0 if path is valid, 1 and print error otherwise."""
    if not path.exists():
        _err(f"path does not exist: {path}")
        return 1
    if must_be_dir and (not path.is_dir()):
        _err(f"not a directory: {path}")
        return 1
    return 0


def _overrides_from_args(args: Any) -> dict[str, Any]:
    """CLI values that take precedence over env/pyproject; unset flags map to None."""
    return {
        "include": getattr(args, "include", None),
        "build_cmd": getattr(args, "build_cmd", None),
        "typecheck_cmd": getattr(args, "typecheck_cmd", None),
        "lint_cmd": getattr(args, "lint_cmd", None),
        "debounce_ms": getattr(args, "debounce", None),
        "poll_interval_ms": getattr(args, "poll", None),
        "precommit": getattr(args, "precommit", None),
        "compile_on_type_error": getattr(args, "compile_on_type_error", None),
        "smoke_test": getattr(args, "smoke_test", None),
    }
