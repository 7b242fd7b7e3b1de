"""Compile-cycle orchestrator: merge build and type-check diagnostics, then stage or report.

Per cycle: idle -> invalidated -> compiling -> merging -> success | failure -> idle.
The only suspension point is the wait on the cycle's type-check future. Any exception
escaping that wait propagates out of the done hook and ends the run (crash-only).
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Callable, Optional, Sequence

from stagegate.diagnostics.collector import DiagnosticCollector, summarize
from stagegate.engine.hooks import EngineHooks
from stagegate.engine.models import BuildStats
from stagegate.errors import VcsError
from stagegate.reporting.console import Reporter
from stagegate.vcs.git import stage_files

from .cycle_state import CycleState, CycleStateMachine
from .logging import get_logger
from .models import BuildCycle, PrecommitState, TypeCheckMessages
from .typecheck_bridge import TypeCheckBridge

_LOG = get_logger("orchestration.orchestrator")

TYPECHECK_NOTICE_DELAY_S = 0.1

Stager = Callable[[Sequence[str], Optional[Path]], None]


class CycleOrchestrator:
    """Turns each completed build cycle into one pass/fail decision.

    Success (no errors and no warnings after merge) stages exactly the snapshot held
    by `state` and finishes the run with status 0. Failure reports and keeps watching.
    """

    def __init__(
        self,
        state: PrecommitState,
        bridge: TypeCheckBridge,
        reporter: Reporter,
        *,
        compile_on_type_error: bool = False,
        cwd: Path | None = None,
        stager: Stager | None = None,
    ) -> None:
        self.state = state
        self.bridge = bridge
        self.reporter = reporter
        self.compile_on_type_error = compile_on_type_error
        self.cwd = cwd
        self.stager = stager if stager is not None else stage_files
        self.machine = CycleStateMachine()
        self.finished: asyncio.Future[int] = asyncio.get_running_loop().create_future()

    def apply(self, hooks: EngineHooks) -> None:
        hooks.invalid.tap("invalid", self.on_invalid)
        hooks.before_compile.tap("orchestrator", self.on_before_compile)
        hooks.done.tap("done", self.on_done)
        hooks.failed.tap("failed", self.on_failed)

    def terminate(self, code: int) -> None:
        """Request process exit with `code`. The first request wins."""
        if not self.finished.done():
            _LOG.debug("exit requested: %d", code)
            self.finished.set_result(code)

    def on_invalid(self, changed: Sequence[str] = ()) -> None:
        self.machine.transition(CycleState.INVALIDATED)
        self.reporter.compiling()

    def on_before_compile(self, cycle: BuildCycle) -> None:
        self.machine.transition(CycleState.COMPILING)

    async def wait_for_typecheck(self, cycle: BuildCycle) -> TypeCheckMessages:
        """Await the cycle's type-check batch, showing a notice if it takes longer than 100ms."""
        future = self.bridge.result_for(cycle)
        notice = asyncio.get_running_loop().call_later(TYPECHECK_NOTICE_DELAY_S, self.reporter.waiting_for_typecheck)
        try:
            return await future
        finally:
            notice.cancel()

    def _echo_typecheck(self, messages: TypeCheckMessages) -> None:
        if messages.errors:
            channel = "warnings" if self.compile_on_type_error else "errors"
            _LOG.debug("typecheck %s: %d", channel, len(messages.errors))
        elif messages.warnings:
            _LOG.debug("typecheck warnings: %d", len(messages.warnings))

    async def on_done(self, stats: BuildStats) -> None:
        self.machine.transition(CycleState.MERGING)
        self.reporter.clear()
        projection = stats.to_projection(errors=True, warnings=True)
        collector = DiagnosticCollector()
        collector.add_build(projection)

        if self.bridge.enabled and not projection.errors:
            messages = await self.wait_for_typecheck(stats.cycle)
            collector.add_typecheck(messages, compile_on_type_error=self.compile_on_type_error)
            self._echo_typecheck(messages)
            self.reporter.clear()

        _LOG.debug("cycle %d merged: %s", stats.cycle.cycle_id, summarize(collector.messages))
        if collector.is_successful:
            self.machine.transition(CycleState.SUCCESS)
            self._stage_and_finish()
        else:
            self.machine.transition(CycleState.FAILURE)
            self._report_failure(collector.errors, collector.warnings)
        self.machine.settle()

    def _stage_and_finish(self) -> None:
        self.reporter.success()
        if self.state.enabled:
            paths = list(self.state.staged_files)
            try:
                self.stager(paths, self.cwd)
            except VcsError as e:
                _LOG.error("stagegate: build is clean but staging failed: %s", e)
                return
            self.reporter.staged(paths)
        self.terminate(0)

    def _report_failure(self, errors: list[str], warnings: list[str]) -> None:
        if errors:
            # Keep the first error only; the rest usually cascade from it.
            self.reporter.failed(errors[:1])
            return
        self.reporter.warnings(warnings)

    async def on_failed(self, error: BaseException) -> None:
        """Engine failure outside smoke-test mode: report and keep watching."""
        self.machine.transition(CycleState.FAILURE)
        _LOG.error("stagegate: build engine failed: %s", error)
        self.reporter.engine_failed(error)
        self.machine.settle()
