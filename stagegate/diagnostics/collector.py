"""Pass-through accumulator for build and type-check diagnostics.

No de-duplication and no truncation: those are orchestrator policy.
"""

from __future__ import annotations

from typing import Iterable

from stagegate.engine.models import StatsProjection
from stagegate.orchestration.models import CycleOutcome, DiagnosticMessage, Severity, TypeCheckMessages

from .formatting import format_messages


class DiagnosticCollector:
    """Buffers DiagnosticMessage records for one cycle, in arrival order."""

    def __init__(self) -> None:
        self._messages: list[DiagnosticMessage] = []

    def add(self, message: DiagnosticMessage) -> None:
        self._messages.append(message)

    def add_build(self, projection: StatsProjection) -> None:
        for text in format_messages(projection.errors):
            self.add(DiagnosticMessage("error", "build", text))
        for text in format_messages(projection.warnings):
            self.add(DiagnosticMessage("warning", "build", text))

    def add_typecheck(self, batch: TypeCheckMessages, *, compile_on_type_error: bool = False) -> None:
        """Append a type-check batch. With the override, its errors are demoted to warnings."""
        error_severity: Severity = "warning" if compile_on_type_error else "error"
        for text in batch.errors:
            self.add(DiagnosticMessage(error_severity, "typecheck", text, _file_of(text)))
        for text in batch.warnings:
            self.add(DiagnosticMessage("warning", "typecheck", text, _file_of(text)))

    @property
    def messages(self) -> tuple[DiagnosticMessage, ...]:
        return tuple(self._messages)

    @property
    def errors(self) -> list[str]:
        return [m.text for m in self._messages if m.is_error]

    @property
    def warnings(self) -> list[str]:
        return [m.text for m in self._messages if not m.is_error]

    @property
    def is_successful(self) -> bool:
        return not self.errors and not self.warnings

    @property
    def outcome(self) -> CycleOutcome:
        return CycleOutcome.from_messages(self.errors, self.warnings)


def _file_of(text: str) -> str | None:
    head, sep, _ = text.partition("\n")
    return head if sep else None


def merge_diagnostics(
    projection: StatsProjection,
    batch: TypeCheckMessages | None,
    *,
    compile_on_type_error: bool = False,
) -> DiagnosticCollector:
    """Build-stage messages first, then the type-check batch (if any)."""
    collector = DiagnosticCollector()
    collector.add_build(projection)
    if batch is not None:
        collector.add_typecheck(batch, compile_on_type_error=compile_on_type_error)
    return collector


def summarize(messages: Iterable[DiagnosticMessage]) -> dict[str, int]:
    """Counts by origin and severity, for debug logging."""
    out: dict[str, int] = {}
    for m in messages:
        key = f"{m.origin}_{m.severity}s"
        out[key] = out.get(key, 0) + 1
    return out
