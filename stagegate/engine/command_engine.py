"""Command-driven incremental build engine with watchdog change detection.

Each cycle runs the configured build command over the in-scope source files and
reports through EngineHooks: invalid -> before_compile -> done | failed. Handlers of
done/failed are awaited before the next change is taken, so cycles never overlap.
"""

from __future__ import annotations

import asyncio
import shutil
import time
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from stagegate.errors import EngineInitError
from stagegate.orchestration.logging import get_logger
from stagegate.orchestration.models import BuildCycle, TriggerReason

from .hooks import EngineHooks
from .models import BuildConfig, BuildStats, WatchOptions
from .parsing import parse_build_output

_LOG = get_logger("engine.command")


def relative_posix(path: Path, root: Path) -> str | None:
    try:
        return path.resolve().relative_to(root).as_posix()
    except (OSError, ValueError):
        return None


class _ChangeHandler(FileSystemEventHandler):
    """Forwards in-scope file events from the observer thread into the event loop."""

    def __init__(self, engine: "CommandBuildEngine", loop: asyncio.AbstractEventLoop, queue: asyncio.Queue[str]) -> None:
        self._engine = engine
        self._loop = loop
        self._queue = queue

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type in ("opened", "closed_no_write"):
            return
        for raw in (event.src_path, getattr(event, "dest_path", "")):
            if not raw:
                continue
            rel = self._engine.scope_path(Path(str(raw)))
            if rel is not None:
                self._loop.call_soon_threadsafe(self._queue.put_nowait, rel)


class CommandBuildEngine:
    """Runs `build_cmd <sources...>` in the project root once per build cycle."""

    def __init__(self, config: BuildConfig) -> None:
        root = Path(config.root).resolve()
        if not root.is_dir():
            raise EngineInitError(f"not a directory: {config.root}")
        if not config.build_cmd:
            raise EngineInitError("build command is empty")
        if shutil.which(config.build_cmd[0]) is None:
            raise EngineInitError(f"build command not found: {config.build_cmd[0]}")
        config.root = root
        self.config = config
        self.hooks = EngineHooks()
        self._cycle_id = 0

    @property
    def root(self) -> Path:
        return self.config.root

    def scope_path(self, path: Path) -> str | None:
        """Root-relative POSIX path if the file is in scope, else None."""
        rel = relative_posix(path, self.root)
        if rel is None or any(part in self.config.skip_dirs for part in rel.split("/")):
            return None
        return rel if self.config.in_scope(rel) else None

    def collect_sources(self) -> list[str]:
        out: list[str] = []
        for f in self.root.rglob("*"):
            if not f.is_file():
                continue
            rel = self.scope_path(f)
            if rel is not None:
                out.append(rel)
        return sorted(out)

    def _next_cycle(self, reason: TriggerReason, changed: tuple[str, ...]) -> BuildCycle:
        self._cycle_id += 1
        return BuildCycle(
            cycle_id=self._cycle_id,
            reason=reason,
            changed_paths=changed,
            sources=tuple(self.collect_sources()),
        )

    async def _compile(self, cycle: BuildCycle) -> BuildStats:
        if not cycle.sources:
            _LOG.debug("cycle %d: no in-scope sources, skipping build command", cycle.cycle_id)
            return BuildStats(cycle=cycle)
        started = time.monotonic()
        proc = await asyncio.create_subprocess_exec(
            *self.config.build_cmd,
            *cycle.sources,
            cwd=self.root,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout_b, stderr_b = await proc.communicate()
        stdout = stdout_b.decode("utf-8", errors="replace")
        stderr = stderr_b.decode("utf-8", errors="replace")
        returncode = proc.returncode if proc.returncode is not None else -1
        errors, warnings = parse_build_output(returncode, stdout, stderr)
        return BuildStats(
            cycle=cycle,
            errors=errors,
            warnings=warnings,
            returncode=returncode,
            duration_ms=int((time.monotonic() - started) * 1000),
            stdout=stdout,
            stderr=stderr,
        )

    async def run_cycle(self, reason: TriggerReason = TriggerReason.INITIAL, changed: tuple[str, ...] = ()) -> None:
        cycle = self._next_cycle(reason, changed)
        _LOG.debug("cycle %d (%s): %d source(s)", cycle.cycle_id, reason.value, len(cycle.sources))
        self.hooks.before_compile.call(cycle)
        try:
            stats = await self._compile(cycle)
        except OSError as e:
            await self.hooks.failed.call_async(e)
            return
        _LOG.debug("cycle %d built in %d ms (exit %d)", cycle.cycle_id, stats.duration_ms, stats.returncode)
        await self.hooks.done.call_async(stats)

    async def _drain(self, queue: asyncio.Queue[str], first: str, debounce_s: float) -> tuple[str, ...]:
        """Aggregate changes until the queue stays quiet for the debounce window."""
        changed = {first}
        while True:
            try:
                changed.add(await asyncio.wait_for(queue.get(), timeout=debounce_s))
            except asyncio.TimeoutError:
                return tuple(sorted(changed))

    async def watch(self, options: WatchOptions | None = None) -> None:
        """Run the initial cycle, then one cycle per aggregated burst of changes. Runs until cancelled."""
        options = options or WatchOptions()
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[str] = asyncio.Queue()
        observer: Any
        if options.poll_interval_ms:
            observer = PollingObserver(timeout=options.poll_interval_ms / 1000)
        else:
            observer = Observer()
        observer.schedule(_ChangeHandler(self, loop, queue), str(self.root), recursive=True)
        observer.start()
        try:
            await self.run_cycle(TriggerReason.INITIAL)
            while True:
                first = await queue.get()
                self.hooks.invalid.call((first,))
                changed = await self._drain(queue, first, options.debounce_ms / 1000)
                await self.run_cycle(TriggerReason.FILE_CHANGED, changed)
        finally:
            observer.stop()
            observer.join()
