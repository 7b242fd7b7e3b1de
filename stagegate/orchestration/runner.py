"""Wire settings, staged-file scoping, engine, type checker and orchestrator into one watch run."""

from __future__ import annotations

import asyncio
import contextlib

from stagegate.config import GateSettings
from stagegate.engine.command_engine import CommandBuildEngine
from stagegate.engine.models import BuildConfig, WatchOptions
from stagegate.engine.typecheck import CommandTypeChecker
from stagegate.errors import EngineInitError
from stagegate.reporting.console import Reporter
from stagegate.vcs.staged_filter import build_inclusion_pattern

from .logging import get_logger
from .models import PrecommitState
from .orchestrator import CycleOrchestrator
from .smoke import SmokeTestGate
from .typecheck_bridge import TypeCheckBridge

_LOG = get_logger("orchestration.runner")


def create_engine(settings: GateSettings, state: PrecommitState) -> tuple[CommandBuildEngine, CommandTypeChecker | None]:
    """Scope the build to the staged snapshot, then construct engine and checker.

    VcsError (listing staged files) and EngineInitError propagate to the caller.
    """
    include = build_inclusion_pattern(settings.include, state, cwd=settings.root)
    engine = CommandBuildEngine(BuildConfig(root=settings.root, include=include, build_cmd=settings.build_cmd))
    checker = None
    if settings.typecheck_cmd:
        checker = CommandTypeChecker(settings.root, settings.typecheck_cmd, settings.lint_cmd)
    return engine, checker


async def run_watch(settings: GateSettings, reporter: Reporter | None = None) -> int:
    """Run the gated watch loop until a cycle requests exit. Returns the exit status."""
    reporter = reporter or Reporter()
    state = PrecommitState(enabled=settings.precommit)
    reporter.clear()
    try:
        engine, checker = create_engine(settings, state)
    except EngineInitError as e:
        reporter.engine_failed(e)
        return 1
    if state.captured:
        _LOG.info("stagegate: %d staged file(s) in scope", len(state.staged_files))

    bridge = TypeCheckBridge(enabled=checker is not None, root=engine.root)
    bridge.apply(engine.hooks, checker.hooks if checker else None)
    if checker is not None:
        checker.apply(engine.hooks)

    orchestrator = CycleOrchestrator(
        state,
        bridge,
        reporter,
        compile_on_type_error=settings.compile_on_type_error,
        cwd=engine.root,
    )
    orchestrator.apply(engine.hooks)
    if settings.smoke_test:
        SmokeTestGate(orchestrator).apply(engine.hooks)

    options = WatchOptions(debounce_ms=settings.debounce_ms, poll_interval_ms=settings.poll_interval_ms)
    watch_task = asyncio.ensure_future(engine.watch(options))
    await asyncio.wait({watch_task, orchestrator.finished}, return_when=asyncio.FIRST_COMPLETED)
    if orchestrator.finished.done():
        watch_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await watch_task
        return orchestrator.finished.result()
    # The watch loop only ends by raising: crash-only, let it propagate.
    watch_task.result()
    return 1
