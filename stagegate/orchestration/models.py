"""Typed models shared by the watch loop: cycles, diagnostics, outcomes, precommit state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Literal

Severity = Literal["error", "warning"]
Origin = Literal["build", "typecheck"]


class TriggerReason(str, Enum):
    """Why the build engine started a cycle."""

    INITIAL = "initial"
    FILE_CHANGED = "file-changed"


@dataclass(frozen=True, slots=True)
class BuildCycle:
    """One execution unit of the build engine. cycle_id grows monotonically per engine."""

    cycle_id: int
    reason: TriggerReason = TriggerReason.INITIAL
    changed_paths: tuple[str, ...] = ()
    sources: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DiagnosticMessage:
    """Error or warning text produced by the build engine or the type checker."""

    severity: Severity
    origin: Origin
    text: str
    file: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"


@dataclass(frozen=True, slots=True)
class TypeCheckMessages:
    """Formatted type-check batch for one cycle."""

    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


class CycleOutcome(str, Enum):
    """Derived per-cycle verdict; computed from the merged message lists, never stored."""

    CLEAN = "clean"
    WARNINGS_ONLY = "warnings_only"
    HAS_ERRORS = "has_errors"

    @classmethod
    def from_messages(cls, errors: Iterable[str], warnings: Iterable[str]) -> "CycleOutcome":
        if list(errors):
            return cls.HAS_ERRORS
        if list(warnings):
            return cls.WARNINGS_ONLY
        return cls.CLEAN


@dataclass(slots=True)
class PrecommitState:
    """Precommit mode flag plus the staged-file snapshot handed from the filter to the stage action.

    Built once at startup and passed by reference to both the filter step and the
    orchestrator. The snapshot is written exactly once.
    """

    enabled: bool = False
    staged_files: tuple[str, ...] = field(default_factory=tuple)
    _captured: bool = False

    def record_snapshot(self, paths: Iterable[str]) -> None:
        if self._captured:
            raise RuntimeError("staged-file snapshot already captured for this run")
        self.staged_files = tuple(paths)
        self._captured = True

    @property
    def captured(self) -> bool:
        return self._captured
