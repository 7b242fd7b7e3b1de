"""Strict exit policy used to self-test the workflow (--smoke-test).

Status 0 only for a fully clean cycle; any error, warning or engine failure exits 1.
The verdict always waits for the cycle's type-check batch so it never judges a partial result.
"""

from __future__ import annotations

from stagegate.diagnostics.collector import merge_diagnostics
from stagegate.engine.hooks import EngineHooks
from stagegate.engine.models import BuildStats

from .logging import get_logger
from .models import BuildCycle, TypeCheckMessages
from .orchestrator import CycleOrchestrator

_LOG = get_logger("orchestration.smoke")


class SmokeTestGate:
    """Taps done/failed after the orchestrator and forces an exit on the first cycle."""

    def __init__(self, orchestrator: CycleOrchestrator) -> None:
        self.orchestrator = orchestrator
        self._cycle: BuildCycle | None = None

    def apply(self, hooks: EngineHooks) -> None:
        hooks.before_compile.tap("smokeTest", self._remember)
        hooks.failed.tap("smokeTest", self.on_failed)
        hooks.done.tap("smokeTest", self.on_done)

    def _remember(self, cycle: BuildCycle) -> None:
        self._cycle = cycle

    async def _pending_typecheck(self, cycle: BuildCycle | None) -> TypeCheckMessages | None:
        bridge = self.orchestrator.bridge
        if not bridge.enabled or cycle is None:
            return None
        return await bridge.result_for(cycle)

    async def on_failed(self, error: BaseException) -> None:
        await self._pending_typecheck(self._cycle)
        _LOG.debug("smoke test: engine failure -> exit 1")
        self.orchestrator.terminate(1)

    async def on_done(self, stats: BuildStats) -> None:
        batch = await self._pending_typecheck(stats.cycle)
        merged = merge_diagnostics(
            stats.to_projection(),
            batch,
            compile_on_type_error=self.orchestrator.compile_on_type_error,
        )
        code = 0 if merged.is_successful else 1
        _LOG.debug("smoke test: cycle %d -> exit %d", stats.cycle.cycle_id, code)
        self.orchestrator.terminate(code)
