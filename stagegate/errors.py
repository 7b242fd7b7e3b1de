"""Fault conditions that abort a run. Cycle diagnostics are data, never exceptions."""

from __future__ import annotations

from typing import Sequence


class StageGateError(Exception):
    """Base class for fatal stagegate errors."""


class ConfigError(StageGateError):
    """Invalid configuration (bad include regex, unusable project root)."""


class EngineInitError(StageGateError):
    """Build engine or type checker could not be constructed."""


class VcsError(StageGateError):
    """A git invocation failed (non-zero exit or git missing)."""

    def __init__(self, command: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or f"exit status {returncode}"
        super().__init__(f"{' '.join(self.command)}: {detail}")
