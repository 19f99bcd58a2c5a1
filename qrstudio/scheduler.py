"""Single-threaded timer scheduling and debouncing for live re-render."""

import asyncio
from typing import Callable, Protocol

from qrstudio.logging import get_logger

log = get_logger("scheduler")


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback once after a delay on the owning thread."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


class Debouncer:
    """Coalesces rapid triggers into one callback after a quiet period.

    At most one timer is outstanding: trigger() cancels the previous timer
    before scheduling a new one, so only the last trigger fires.
    """

    def __init__(self, scheduler: Scheduler, delay: float, callback: Callable[[], None]):
        self._scheduler = scheduler
        self.delay = delay
        self._callback = callback
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def trigger(self):
        if self._handle is not None:
            log.debug("debounce restarted (%.0fms)", self.delay * 1000)
        self.cancel()
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def cancel(self):
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self):
        self._handle = None
        self._callback()
