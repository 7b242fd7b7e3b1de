"""Single-slot future per build cycle that resolves with that cycle's type-check batch."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Sequence

from stagegate.diagnostics.formatting import format_diagnostic
from stagegate.engine.hooks import EngineHooks, TypeCheckerHooks
from stagegate.engine.models import CheckerDiagnostic

from .logging import get_logger
from .models import BuildCycle, TypeCheckMessages

_LOG = get_logger("orchestration.typecheck_bridge")


class TypeCheckBridge:
    """Owns exactly one outstanding future, keyed by the cycle that created it.

    Every before_compile replaces the slot; the previous future, if unresolved, is
    abandoned (nothing awaits it any more). A batch for any other cycle id is dropped.
    When type checking is not configured the bridge is inert and `enabled` is False.
    """

    def __init__(self, *, enabled: bool = True, root: Path | None = None) -> None:
        self.enabled = enabled
        self.root = root
        self._cycle_id: int | None = None
        self._future: asyncio.Future[TypeCheckMessages] | None = None

    def apply(self, engine_hooks: EngineHooks, checker_hooks: TypeCheckerHooks | None) -> None:
        if not self.enabled or checker_hooks is None:
            self.enabled = False
            return
        engine_hooks.before_compile.tap("typecheck_bridge", self.begin_cycle)
        checker_hooks.receive.tap("typecheck_bridge", self.receive)
        checker_hooks.error.tap("typecheck_bridge", self.fail)

    def begin_cycle(self, cycle: BuildCycle) -> None:
        self._cycle_id = cycle.cycle_id
        self._future = asyncio.get_running_loop().create_future()

    def _slot_for(self, cycle_id: int) -> asyncio.Future[TypeCheckMessages] | None:
        if cycle_id != self._cycle_id or self._future is None or self._future.done():
            _LOG.debug("typecheck: dropping batch for cycle %s (current %s)", cycle_id, self._cycle_id)
            return None
        return self._future

    def receive(
        self,
        cycle_id: int,
        diagnostics: Sequence[CheckerDiagnostic],
        lints: Sequence[CheckerDiagnostic],
    ) -> None:
        """Partition by severity, format with the source file first, resolve the cycle's future."""
        future = self._slot_for(cycle_id)
        if future is None:
            return
        all_msgs = [*diagnostics, *lints]
        future.set_result(
            TypeCheckMessages(
                errors=tuple(format_diagnostic(m, self.root) for m in all_msgs if m.severity == "error"),
                warnings=tuple(format_diagnostic(m, self.root) for m in all_msgs if m.severity == "warning"),
            )
        )

    def fail(self, cycle_id: int, error: BaseException) -> None:
        """The checker itself broke: the waiting orchestrator gets the exception."""
        future = self._slot_for(cycle_id)
        if future is not None:
            future.set_exception(error)

    def result_for(self, cycle: BuildCycle) -> asyncio.Future[TypeCheckMessages]:
        """Future for this cycle. Asking for any other cycle means hook ordering broke."""
        if self._future is None or cycle.cycle_id != self._cycle_id:
            raise RuntimeError(f"no type-check future for cycle {cycle.cycle_id} (current {self._cycle_id})")
        return self._future
