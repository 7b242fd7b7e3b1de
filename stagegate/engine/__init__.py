"""Build engine and type-checker boundary: hooks, command-driven implementations, output parsing."""

from .command_engine import CommandBuildEngine
from .hooks import EngineHooks, Hook, TypeCheckerHooks
from .models import BuildConfig, BuildStats, CheckerDiagnostic, StatsProjection, WatchOptions
from .typecheck import CommandTypeChecker

__all__ = [
    "BuildConfig",
    "BuildStats",
    "CheckerDiagnostic",
    "CommandBuildEngine",
    "CommandTypeChecker",
    "EngineHooks",
    "Hook",
    "StatsProjection",
    "TypeCheckerHooks",
    "WatchOptions",
]
