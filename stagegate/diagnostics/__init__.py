"""Diagnostic accumulation and text formatting."""

from .collector import DiagnosticCollector, merge_diagnostics
from .formatting import format_diagnostic, format_messages

__all__ = ["DiagnosticCollector", "format_diagnostic", "format_messages", "merge_diagnostics"]
