"""
Debounce controller for search inputs.

Every observed value restarts the quiet window; when the window elapses
without new input the last value is passed to the callback. Runs on the
current asyncio loop; the callback may be a plain function or a coroutine
function.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from shopdesk.config import settings
from shopdesk.utils import Logger

T = TypeVar("T")

logger = Logger("debounce")


class Debouncer(Generic[T]):
    def __init__(
        self,
        callback: Callable[[T], Union[Any, Awaitable[Any]]],
        delay: Optional[float] = None,
    ):
        self._callback = callback
        self.delay = settings.search_debounce_ms / 1000 if delay is None else delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._value: Optional[T] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def observe(self, value: T) -> None:
        """Record `value` and restart the quiet window."""
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._value = value
        self._handle = loop.call_later(self.delay, self._fire)

    def flush(self) -> None:
        """Emit a pending value now instead of waiting out the window."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        """Drop a pending value without emitting it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait for coroutine callbacks already started by emissions."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _fire(self) -> None:
        self._handle = None
        result = self._callback(self._value)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_done)

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Debounced callback failed: {task.exception()}")
