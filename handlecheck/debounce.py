"""Debounce rapid input events into a single delayed callback."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable


class Debouncer:
    """Delay a callback until input has been quiet for ``delay_ms``.

    Each :meth:`schedule` cancels the timer armed by the previous call, so
    only the most recent callback ever runs. One instance serves one input
    stream; sharing it between streams makes them cancel each other.

    When the callback returns an awaitable it is run as a task. Superseding
    the timer never cancels such a task once it has started.
    """

    def __init__(self, delay_ms: int = 300) -> None:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be >= 0, got {delay_ms}")
        self.delay_ms = delay_ms
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Future[Any]] = set()

    @property
    def delay(self) -> float:
        """Delay in seconds."""
        return self.delay_ms / 1000

    @property
    def pending(self) -> bool:
        """True while a timer is armed and has not fired yet."""
        return self._handle is not None

    def schedule(self, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, callback, args)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait until no timer is armed and every fired callback finished."""
        while self._handle is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*self._tasks, return_exceptions=True)
            else:
                await asyncio.sleep(self.delay)

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        result = callback(*args)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
