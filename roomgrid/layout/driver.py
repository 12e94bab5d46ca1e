"""Fixed-cadence tick driver.

Replaces a coroutine loop: the driver calls ``target.step()``, sleeps for
``interval`` seconds, and repeats until the target reports completion or the
driver is cancelled. The sleep function is injected so the websocket layer can
pass ``socketio.sleep`` and tests can pass a no-op.
"""
from __future__ import annotations

import threading
import time
from contextlib import nullcontext
from typing import Callable, Optional

from ..logging_utils import get_logger

log = get_logger("driver")


class TickDriver:
    def __init__(
        self,
        target,
        interval: float = 0.1,
        sleep: Callable[[float], None] = time.sleep,
        lock=None,
        on_tick: Optional[Callable[[bool], None]] = None,
    ):
        self.target = target
        self.interval = interval
        self._sleep = sleep
        # held around the cancel check + step so a cancel cannot interleave with a tick
        self._lock = lock
        self._on_tick = on_tick
        self._cancelled = threading.Event()
        self._running = False
        self.ticks = 0

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def running(self) -> bool:
        return self._running

    def cancel(self) -> None:
        self._cancelled.set()

    def run(self) -> int:
        """Drive the target to completion; returns the number of ticks driven."""
        self._running = True
        try:
            while True:
                with self._lock if self._lock is not None else nullcontext():
                    if self.cancelled:
                        break
                    in_progress = self.target.step()
                    self.ticks += 1
                if self._on_tick is not None:
                    self._on_tick(in_progress)
                if not in_progress:
                    break
                self._sleep(self.interval)
        finally:
            self._running = False
        log.debug(event="driver_stopped", ticks=self.ticks, cancelled=self.cancelled)
        return self.ticks
