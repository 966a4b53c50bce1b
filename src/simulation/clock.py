"""Timer scheduling for car state machines.

Cars only need ``now`` and ``call_later``. ``SimpyClock`` runs in virtual time
for tests and offline scenarios; ``AsyncioClock`` uses the running event loop.
"""
from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol

import simpy


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Clock(Protocol):
    @property
    def now(self) -> float:
        ...

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class SimpyTimer:
    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def _fire(self, _event: simpy.Event) -> None:
        if not self.cancelled:
            self._callback()


class SimpyClock:
    """Discrete-event clock backed by a ``simpy.Environment``."""

    def __init__(self, env: Optional[simpy.Environment] = None) -> None:
        self.env = env or simpy.Environment()

    @property
    def now(self) -> float:
        return float(self.env.now)

    def call_later(self, delay: float, callback: Callable[[], None]) -> SimpyTimer:
        timer = SimpyTimer(callback)
        event = self.env.timeout(max(0.0, delay))
        event.callbacks.append(timer._fire)
        return timer

    def run(self, until: Optional[float] = None) -> None:
        """Advance virtual time; without ``until`` run until no timer is left."""

        if until is None:
            self.env.run()
        elif until > self.env.now:
            self.env.run(until=until)

    def advance(self, seconds: float) -> None:
        self.run(until=self.env.now + seconds)


class AsyncioClock:
    """Wall-clock timers on an asyncio event loop."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._started_at: Optional[float] = None

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    @property
    def now(self) -> float:
        current = self.loop.time()
        if self._started_at is None:
            self._started_at = current
        return current - self._started_at

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay), callback)
