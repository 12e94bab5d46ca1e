"""Stepwise breadth-first room expansion.

The scheduler owns every piece of mutable generation state: the occupancy
grid, the room registry, the frontier queue and the ``GenerationState``
counters. It never sleeps; an external driver calls ``step()`` once per tick.

States::

    IDLE --initialize()--> GENERATING --step()*--> COMPLETE

One tick dequeues a single frontier coordinate and evaluates its four
neighbors (left, right, down, up). ``min_rooms`` is recorded but not enforced
here; see ``RegenerationController`` for the optional retry policy.
"""
from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Set

from ..logging_utils import get_logger
from .config import LayoutConfig
from .coords import Direction, GridCoordinate
from .doors import link_doors
from .errors import ConfigurationError
from .grid import OccupancyGrid
from .listeners import LayoutListener, room_position
from .metrics import init_metrics
from .placement import DEFAULT_SKIP_CHANCE, PlacementPolicy
from .rooms import RoomRecord, RoomRegistry

log = get_logger("layout")


class Phase(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    COMPLETE = "complete"


@dataclass
class GenerationState:
    seed_coordinate: GridCoordinate
    max_rooms: int
    min_rooms: int
    room_count: int = 0
    complete: bool = False
    ticks: int = 0

    @property
    def below_minimum(self) -> bool:
        return self.room_count < self.min_rooms


class GenerationScheduler:
    def __init__(
        self,
        rng=None,
        skip_chance: float = DEFAULT_SKIP_CHANCE,
        listener: Optional[LayoutListener] = None,
        room_width: int = 20,
        room_height: int = 12,
    ):
        self.policy = PlacementPolicy(rng, skip_chance)
        self.listener = listener or LayoutListener()
        self.room_width = room_width
        self.room_height = room_height
        self.grid = OccupancyGrid()
        self.registry = RoomRegistry()
        self.frontier: Deque[GridCoordinate] = deque()
        self.state: Optional[GenerationState] = None
        self.phase = Phase.IDLE
        self.metrics: Dict[str, Any] = init_metrics()

    @property
    def rng(self):
        return self.policy.rng

    @rng.setter
    def rng(self, value):
        self.policy.rng = value

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def reset(self) -> None:
        self.grid.reset(self.grid.width, self.grid.height)
        self.registry.clear()
        self.frontier.clear()
        self.state = None
        self.phase = Phase.IDLE
        self.metrics = init_metrics()

    def initialize(self, width: int, height: int, seed_coordinate, max_rooms: int, min_rooms: int = 0) -> RoomRecord:
        """Reset all state and place the seed room.

        The seed bypasses the placement policy. Raises ConfigurationError for
        non-positive dimensions, an out-of-bounds seed or max_rooms < 1.
        """
        sx, sy = seed_coordinate
        LayoutConfig(
            width=width,
            height=height,
            seed_x=sx,
            seed_y=sy,
            max_rooms=max_rooms,
            min_rooms=min_rooms,
            skip_chance=self.policy.skip_chance,
        ).validate(enforce_limits=False)  # service ceilings belong to the controller's config
        self.reset()
        self.grid.reset(width, height)
        seed = GridCoordinate(sx, sy)
        self.state = GenerationState(seed_coordinate=seed, max_rooms=max_rooms, min_rooms=min_rooms)
        self.phase = Phase.GENERATING
        record = self._accept(seed, parent=None)
        log.info(
            event="layout_initialized",
            width=width,
            height=height,
            seed=f"{sx},{sy}",
            max_rooms=max_rooms,
            min_rooms=min_rooms,
        )
        return record

    def step(self) -> bool:
        """Advance one tick. Returns True while generation is still in progress."""
        if self.state is None:
            raise ConfigurationError("layout not initialized; call initialize() first", "state")
        if self._should_stop():
            self._finish()
            return False
        started = time.perf_counter()
        parent = self.frontier.popleft()
        placed = 0
        for _direction, candidate in parent.neighbors():
            reason = self.policy.evaluate(candidate, self.grid, self.state)
            if reason is not None:
                self.metrics[f"rejected_{reason}"] += 1
                continue
            self._accept(candidate, parent=parent)
            placed += 1
        self.state.ticks += 1
        self.metrics["ticks"] = self.state.ticks
        self.metrics["runtime_ms"] += (time.perf_counter() - started) * 1000
        if log.enabled("debug"):
            log.debug(
                event="layout_tick",
                tick=self.state.ticks,
                parent=f"{parent.x},{parent.y}",
                placed=placed,
                rooms=self.state.room_count,
                frontier=len(self.frontier),
            )
        if self._should_stop():
            self._finish()
            return False
        return True

    def run(self, max_ticks: Optional[int] = None) -> int:
        """Step until complete (or ``max_ticks`` ticks). Returns ticks executed."""
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            before = self.state.ticks if self.state else 0
            in_progress = self.step()
            ticks += self.state.ticks - before
            if not in_progress:
                break
        return ticks

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _accept(self, coord: GridCoordinate, parent: Optional[GridCoordinate]) -> RoomRecord:
        record = self.registry.register(coord, parent=parent)
        self.grid.occupy(coord)
        self.state.room_count += 1
        self.frontier.append(coord)
        self.metrics["rooms_placed"] += 1
        self.listener.room_placed(record, self.position_of(coord))
        events = link_doors(coord, self.grid, self.registry, self.listener)
        self.metrics["doors_opened"] += len(events)
        return record

    def _should_stop(self) -> bool:
        return self.state.complete or not self.frontier or self.state.room_count >= self.state.max_rooms

    def _finish(self) -> None:
        if self.state.complete:
            return
        self.state.complete = True
        self.phase = Phase.COMPLETE
        log.info(
            event="layout_complete",
            rooms=self.state.room_count,
            ticks=self.state.ticks,
            max_rooms=self.state.max_rooms,
            below_min=self.state.below_minimum,
            runtime_ms=round(self.metrics["runtime_ms"], 3),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def position_of(self, coord) -> tuple:
        return room_position(coord, self.grid.width, self.grid.height, self.room_width, self.room_height)

    def is_complete(self) -> bool:
        return bool(self.state and self.state.complete)

    def occupied_coordinates(self) -> List[GridCoordinate]:
        return self.registry.coordinates()

    def doors_for(self, coord) -> Set[Direction]:
        record = self.registry.lookup(coord)
        return set(record.doors) if record else set()

    def rooms(self) -> List[RoomRecord]:
        return self.registry.all()

    @property
    def room_count(self) -> int:
        return self.state.room_count if self.state else 0


__all__ = ["GenerationScheduler", "GenerationState", "Phase"]
