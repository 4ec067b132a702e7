from __future__ import annotations
import asyncio
from typing import Any, Callable, Optional, Protocol

Tick = Callable[[], None]


class Scheduler(Protocol):
    """One-shot frame ticker: request() schedules the next call, cancel() drops it."""
    def request(self, callback: Tick) -> Any: ...
    def cancel(self, handle: Any) -> None: ...


class ManualScheduler:
    """
    Deterministic ticker for tests and offline replay. Holds at most one
    pending callback; each tick() runs it once.
    """
    def __init__(self):
        self._pending: Optional[Tick] = None
        self._token = 0

    def request(self, callback: Tick) -> int:
        self._token += 1
        self._pending = callback
        return self._token

    def cancel(self, handle: Any) -> None:
        if handle == self._token:
            self._pending = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def tick(self) -> bool:
        cb, self._pending = self._pending, None
        if cb is None: return False
        cb()
        return True

    def run(self, max_ticks: Optional[int] = None) -> int:
        n = 0
        while (max_ticks is None or n < max_ticks) and self.tick():
            n += 1
        return n


class AsyncioScheduler:
    """Ticks on the running asyncio loop at roughly `fps` calls per second."""
    def __init__(self, fps: float = 30.0, loop: Optional[asyncio.AbstractEventLoop] = None):
        self.interval = 1.0 / fps
        self.loop = loop

    def request(self, callback: Tick) -> asyncio.TimerHandle:
        loop = self.loop or asyncio.get_running_loop()
        return loop.call_later(self.interval, callback)

    def cancel(self, handle: Any) -> None:
        if handle is not None:
            handle.cancel()
