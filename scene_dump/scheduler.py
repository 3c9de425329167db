"""Tick-driven suspension points: per-tick polling, fixed delays and timeouts."""

from __future__ import annotations

import time
from threading import Event
from typing import Callable

from .host import AsyncOperation


class TickScheduler:
    """Cooperative scheduler for a scan running beside the host's frame loop.

    Fixed delays wait on an Event so interrupt() cuts them short. Ticks keep
    their pace after an interrupt, so polling loops never spin.
    Host bindings with a real frame signal can subclass and override next_tick().
    """

    def __init__(self, tick_interval: float, clock: Callable[[], float] = time.monotonic):
        self.tick_interval = tick_interval
        self._clock = clock
        self._wake_event = Event()

    def now(self) -> float:
        """Monotonic seconds used for timeout measurement."""
        return self._clock()

    def next_tick(self) -> None:
        """Suspend until the next host tick."""
        time.sleep(self.tick_interval)

    def delay(self, seconds: float) -> None:
        """Suspend for a fixed delay."""
        if seconds > 0:
            self._wake_event.wait(seconds)

    def interrupt(self) -> None:
        """Wake a pending delay and skip fixed delays from now on."""
        self._wake_event.set()

    def resume(self) -> None:
        """Re-arm waits after an interrupt."""
        self._wake_event.clear()


def wait_for_operation(operation: AsyncOperation, scheduler, timeout: float) -> bool:
    """Poll an operation once per tick until done or the timeout elapses.

    Returns False on timeout. The operation is abandoned, not cancelled.
    """
    start = scheduler.now()
    while not operation.is_done:
        if scheduler.now() - start > timeout:
            return False
        scheduler.next_tick()
    return True


SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600


def format_duration(seconds: float) -> str:
    """Format seconds to human readable duration"""
    if seconds < SECONDS_PER_MINUTE:
        return f"{seconds:.1f}s"
    if seconds < SECONDS_PER_HOUR:
        minutes = int(seconds / SECONDS_PER_MINUTE)
        secs = int(seconds % SECONDS_PER_MINUTE)
        return f"{minutes}m {secs}s"
    hours = int(seconds / SECONDS_PER_HOUR)
    minutes = int((seconds % SECONDS_PER_HOUR) / SECONDS_PER_MINUTE)
    return f"{hours}h {minutes}m"
