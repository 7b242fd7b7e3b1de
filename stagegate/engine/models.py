"""Build-engine boundary models: configuration, watch options, stats payload, checker diagnostics."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

from stagegate.orchestration.models import BuildCycle, Severity

DEFAULT_DEBOUNCE_MS = 300

SKIP_DIRS = frozenset({".git", ".hg", "venv", ".venv", "node_modules", "__pycache__", ".mypy_cache", ".ruff_cache", ".pytest_cache", ".tox"})


@dataclass(frozen=True, slots=True)
class WatchOptions:
    """Change aggregation window and optional polling interval (None = native fs events)."""

    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    poll_interval_ms: int | None = None


@dataclass(slots=True)
class BuildConfig:
    """What the engine builds: project root, in-scope pattern and the build command."""

    root: Path
    include: re.Pattern[str]
    build_cmd: tuple[str, ...]
    skip_dirs: frozenset[str] = SKIP_DIRS

    def in_scope(self, rel_path: str) -> bool:
        return bool(self.include.search(rel_path))


@dataclass(frozen=True, slots=True)
class StatsProjection:
    """Minimal view of a stats payload: only the error and warning texts."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(slots=True)
class BuildStats:
    """Result payload of one completed build cycle."""

    cycle: BuildCycle
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    returncode: int = 0
    duration_ms: int = 0
    stdout: str = ""
    stderr: str = ""

    def to_projection(self, *, errors: bool = True, warnings: bool = True) -> StatsProjection:
        return StatsProjection(
            errors=tuple(self.errors) if errors else (),
            warnings=tuple(self.warnings) if warnings else (),
        )


@dataclass(frozen=True, slots=True)
class CheckerDiagnostic:
    """One diagnostic reported by the type checker or linter."""

    severity: Severity
    file: str
    line: int
    message: str
    column: int | None = None
    code: str | None = None
