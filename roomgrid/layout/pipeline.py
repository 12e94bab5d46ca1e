"""Regeneration controller.

Wraps a ``GenerationScheduler`` with its configuration, random source and
listeners, and provides the restart path: cancel any driver, tell
collaborators to drop their room visuals, reseed, and place the seed room
again. A regenerated layout is a cold start except for the RNG state; the same
``rng_seed`` always reproduces the same layout.

``min_rooms`` is advisory. With ``min_rooms_retries`` > 0 a run that completes
short of ``min_rooms`` is regenerated with a fresh seed, at most that many
times, after which the short layout is kept and a warning is logged.
"""
from __future__ import annotations

import random
import threading
import time
from typing import Callable, Optional

from ..logging_utils import get_logger
from .config import LayoutConfig
from .driver import TickDriver
from .generator import GenerationScheduler
from .listeners import CompositeListener, LayoutListener
from .seeds import draw_seed

log = get_logger("layout")


class RegenerationController:
    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        listener: Optional[LayoutListener] = None,
        rng_factory: Callable[[int], object] = random.Random,
        seed_source: Callable[[], int] = draw_seed,
    ):
        self.config = (config or LayoutConfig()).validate()
        self.listener = CompositeListener([listener] if listener else [])
        self._rng_factory = rng_factory
        self._seed_source = seed_source
        self.scheduler = GenerationScheduler(
            skip_chance=self.config.skip_chance,
            listener=self.listener,
            room_width=self.config.room_width,
            room_height=self.config.room_height,
        )
        self.lock = threading.RLock()
        self.rng_seed: Optional[int] = None
        self.regenerations = 0
        self.retries_used = 0
        self._shortfall_logged = False
        self._driver: Optional[TickDriver] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, rng_seed: Optional[int] = None) -> int:
        """Initialize the first run. Returns the RNG seed used."""
        with self.lock:
            self.retries_used = 0
            self._discard()
            return self._initialize(rng_seed if rng_seed is not None else self.config.rng_seed)

    def regenerate(self, rng_seed: Optional[int] = None) -> int:
        """Discard the current layout and start over with a fresh (or given) RNG seed."""
        with self.lock:
            self.cancel()
            self.regenerations += 1
            self.retries_used = 0
            self._discard()
            seed = self._initialize(rng_seed)
            log.info(event="layout_regenerated", rng_seed=seed, regenerations=self.regenerations)
            return seed

    def step(self) -> bool:
        with self.lock:
            if self.scheduler.state is None:
                self.start()
            in_progress = self.scheduler.step()
            if in_progress:
                return True
            state = self.scheduler.state
            if state.below_minimum and self.retries_used < self.config.min_rooms_retries:
                self.retries_used += 1
                log.warn(
                    event="min_rooms_retry",
                    rooms=state.room_count,
                    min_rooms=state.min_rooms,
                    attempt=self.retries_used,
                    of=self.config.min_rooms_retries,
                )
                self._discard()
                self._initialize(None)
                return True
            if state.below_minimum and not self._shortfall_logged:
                self._shortfall_logged = True
                log.warn(event="min_rooms_unmet", rooms=state.room_count, min_rooms=state.min_rooms)
            return False

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Step until complete; returns the number of step() calls made."""
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            ticks += 1
            if not self.step():
                break
        return ticks

    # ------------------------------------------------------------------
    # Driver handling
    # ------------------------------------------------------------------
    def make_driver(
        self,
        interval: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
        on_tick: Optional[Callable[[bool], None]] = None,
    ) -> TickDriver:
        """Create a driver for this layout, cancelling any previous one."""
        with self.lock:
            self.cancel()
            self._driver = TickDriver(
                self,
                self.config.tick_interval if interval is None else interval,
                sleep=sleep,
                lock=self.lock,
                on_tick=on_tick,
            )
            return self._driver

    @property
    def driver(self) -> Optional[TickDriver]:
        return self._driver

    def cancel(self) -> None:
        with self.lock:
            if self._driver is not None:
                self._driver.cancel()
                self._driver = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _initialize(self, rng_seed: Optional[int]) -> int:
        self.rng_seed = self._seed_source() if rng_seed is None else rng_seed
        self.scheduler.rng = self._rng_factory(self.rng_seed)
        self._shortfall_logged = False
        cfg = self.config
        self.scheduler.initialize(cfg.width, cfg.height, cfg.seed_coordinate, cfg.max_rooms, cfg.min_rooms)
        self._sync_metrics()
        return self.rng_seed

    def _discard(self) -> None:
        records = self.scheduler.rooms()
        if records:
            self.listener.rooms_cleared(records)
        self.scheduler.reset()

    def _sync_metrics(self) -> None:
        self.scheduler.metrics["regenerations"] = self.regenerations
        self.scheduler.metrics["retries"] = self.retries_used

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def metrics(self):
        self._sync_metrics()
        return self.scheduler.metrics

    @property
    def state(self):
        return self.scheduler.state

    def is_complete(self) -> bool:
        return self.scheduler.is_complete()

    def occupied_coordinates(self):
        return self.scheduler.occupied_coordinates()

    def doors_for(self, coord):
        return self.scheduler.doors_for(coord)

    def rooms(self):
        return self.scheduler.rooms()


__all__ = ["RegenerationController"]
