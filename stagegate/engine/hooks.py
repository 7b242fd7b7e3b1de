"""Named-tap notification hooks used by the build engine and the type checker."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Callable


class Hook:
    """Ordered list of named handlers called with the same arguments.

    Handlers may be plain functions or coroutine functions. `call` runs plain handlers
    and schedules coroutines as tasks; `call_async` awaits every handler in tap order.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._taps: list[tuple[str, Callable[..., Any]]] = []

    def tap(self, name: str, fn: Callable[..., Any]) -> None:
        self._taps.append((name, fn))

    @property
    def taps(self) -> list[str]:
        return [name for name, _ in self._taps]

    def call(self, *args: Any) -> list[asyncio.Task[Any]]:
        tasks: list[asyncio.Task[Any]] = []
        for _, fn in self._taps:
            result = fn(*args)
            if inspect.isawaitable(result):
                tasks.append(asyncio.ensure_future(result))
        return tasks

    async def call_async(self, *args: Any) -> None:
        """Start every handler in tap order, then wait for all of them.

        Handlers run concurrently once started; the first exception propagates.
        """
        pending: list[Awaitable[Any]] = []
        for _, fn in self._taps:
            result = fn(*args)
            if inspect.isawaitable(result):
                pending.append(asyncio.ensure_future(result))
        if pending:
            await asyncio.gather(*pending)


class EngineHooks:
    """Notifications emitted by a build engine, in per-cycle order."""

    def __init__(self) -> None:
        self.invalid = Hook("invalid")
        self.before_compile = Hook("before_compile")
        self.done = Hook("done")
        self.failed = Hook("failed")


class TypeCheckerHooks:
    """Notifications emitted by the type checker."""

    def __init__(self) -> None:
        self.receive = Hook("receive")
        self.error = Hook("error")
