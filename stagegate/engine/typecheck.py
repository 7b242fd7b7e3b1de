"""Asynchronous type checker (plus optional linter) driven by the build engine's cycles."""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Sequence

from stagegate.errors import EngineInitError
from stagegate.orchestration.logging import get_logger
from stagegate.orchestration.models import BuildCycle

from .hooks import EngineHooks, TypeCheckerHooks
from .models import CheckerDiagnostic
from .parsing import parse_checker_output, parse_lint_output

_LOG = get_logger("engine.typecheck")


async def _run_tool(cmd: Sequence[str], sources: Sequence[str], cwd: Path) -> str:
    proc = await asyncio.create_subprocess_exec(
        *cmd,
        *sources,
        cwd=cwd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await proc.communicate()
    except asyncio.CancelledError:
        if proc.returncode is None:
            proc.kill()
        raise
    # mypy and ruff report findings on stdout; stderr carries crashes and usage errors.
    return stdout.decode("utf-8", errors="replace") + "\n" + stderr.decode("utf-8", errors="replace")


class CommandTypeChecker:
    """Starts a check on every before_compile and emits receive(cycle_id, diagnostics, lints).

    A check still running when the next cycle begins is cancelled; its batch is never emitted.
    """

    def __init__(self, root: Path, typecheck_cmd: Sequence[str], lint_cmd: Sequence[str] | None = None) -> None:
        for cmd in (typecheck_cmd, lint_cmd):
            if cmd is not None and (not cmd or shutil.which(cmd[0]) is None):
                raise EngineInitError(f"type checker not found: {' '.join(cmd) or '<empty>'}")
        self.root = Path(root).resolve()
        self.typecheck_cmd = tuple(typecheck_cmd)
        self.lint_cmd = tuple(lint_cmd) if lint_cmd else None
        self.hooks = TypeCheckerHooks()
        self._task: asyncio.Task[None] | None = None

    def apply(self, engine_hooks: EngineHooks) -> None:
        engine_hooks.before_compile.tap("typecheck", self.start)

    def start(self, cycle: BuildCycle) -> None:
        if self._task is not None and not self._task.done():
            _LOG.debug("typecheck: cancelling superseded check")
            self._task.cancel()
        self._task = asyncio.ensure_future(self._check(cycle))

    async def check(self, cycle: BuildCycle) -> tuple[list[CheckerDiagnostic], list[CheckerDiagnostic]]:
        if not cycle.sources:
            return [], []
        jobs = [_run_tool(self.typecheck_cmd, cycle.sources, self.root)]
        if self.lint_cmd:
            jobs.append(_run_tool(self.lint_cmd, cycle.sources, self.root))
        # Every tool runs to completion (or is killed on cancel) before a failure surfaces.
        results = await asyncio.gather(*jobs, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                raise result
        outputs = [str(r) for r in results]
        diagnostics = parse_checker_output(outputs[0])
        lints = parse_lint_output(outputs[1]) if len(outputs) > 1 else []
        return diagnostics, lints

    async def _check(self, cycle: BuildCycle) -> None:
        try:
            diagnostics, lints = await self.check(cycle)
        except Exception as e:
            _LOG.debug("typecheck cycle %d failed: %r", cycle.cycle_id, e)
            self.hooks.error.call(cycle.cycle_id, e)
            return
        _LOG.debug("typecheck cycle %d: %d diagnostic(s), %d lint(s)", cycle.cycle_id, len(diagnostics), len(lints))
        self.hooks.receive.call(cycle.cycle_id, diagnostics, lints)
