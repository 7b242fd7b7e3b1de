"""Tests for DiagnosticCollector merge semantics."""

from __future__ import annotations

from stagegate.diagnostics.collector import DiagnosticCollector, merge_diagnostics, summarize
from stagegate.engine.models import StatsProjection
from stagegate.orchestration.models import CycleOutcome, TypeCheckMessages


def test_zero_build_errors_with_type_error_is_not_successful() -> None:
    merged = merge_diagnostics(StatsProjection(), TypeCheckMessages(errors=("a.py\nType error at 1: x",)))
    assert merged.is_successful is False
    assert merged.errors == ["a.py\nType error at 1: x"]
    assert merged.outcome == CycleOutcome.HAS_ERRORS


def test_override_demotes_type_errors_to_warnings() -> None:
    batch = TypeCheckMessages(errors=("a.py\nE",), warnings=("b.py\nW",))
    merged = merge_diagnostics(StatsProjection(warnings=("build warning",)), batch, compile_on_type_error=True)
    assert merged.errors == []
    assert merged.warnings == ["build warning", "a.py\nE", "b.py\nW"]
    assert merged.outcome == CycleOutcome.WARNINGS_ONLY
    assert merged.is_successful is False


def test_type_warnings_always_warnings() -> None:
    merged = merge_diagnostics(StatsProjection(), TypeCheckMessages(warnings=("w",)))
    assert merged.errors == []
    assert merged.warnings == ["w"]


def test_clean_merge_is_successful() -> None:
    merged = merge_diagnostics(StatsProjection(), TypeCheckMessages())
    assert merged.is_successful is True
    assert merged.outcome == CycleOutcome.CLEAN


def test_no_batch_uses_build_messages_only() -> None:
    merged = merge_diagnostics(StatsProjection(errors=("e1", "e2")), None)
    assert merged.errors == ["e1", "e2"]


def test_collector_keeps_duplicates_and_order() -> None:
    c = DiagnosticCollector()
    c.add_build(StatsProjection(errors=("same", "same")))
    c.add_typecheck(TypeCheckMessages(errors=("same",)))
    assert c.errors == ["same", "same", "same"]
    assert [m.origin for m in c.messages] == ["build", "build", "typecheck"]


def test_typecheck_messages_record_source_file() -> None:
    c = DiagnosticCollector()
    c.add_typecheck(TypeCheckMessages(errors=("pkg/a.py\nType error at 2: boom",)))
    assert c.messages[0].file == "pkg/a.py"


def test_summarize_counts_by_origin_and_severity() -> None:
    merged = merge_diagnostics(StatsProjection(warnings=("w",)), TypeCheckMessages(errors=("e",), warnings=("w2",)))
    assert summarize(merged.messages) == {"build_warnings": 1, "typecheck_errors": 1, "typecheck_warnings": 1}
