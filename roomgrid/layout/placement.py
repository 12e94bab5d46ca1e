"""Candidate acceptance rules.

A candidate neighbor is accepted iff, checked in order:

1. it lies inside the grid,
2. it is not occupied,
3. the room budget is not exhausted,
4. a uniform draw is >= ``skip_chance`` (the seed coordinate is exempt),
5. at most one of its four neighbors is already occupied.

Rule 5 keeps the layout a tree: a new room can only ever attach to a single
existing room, so no acceptance closes a cycle. The draw in rule 4 is only
consumed when rules 1-3 pass, which keeps fixed-seed runs reproducible.
"""
from __future__ import annotations

import random
from typing import Optional

from .coords import GridCoordinate

DEFAULT_SKIP_CHANCE = 0.3
MAX_ATTACHED_NEIGHBORS = 1


class PlacementPolicy:
    def __init__(self, rng=None, skip_chance: float = DEFAULT_SKIP_CHANCE):
        # rng: anything exposing random() -> float in [0, 1)
        self.rng = rng if rng is not None else random.Random()
        self.skip_chance = skip_chance

    def should_skip(self, coord: GridCoordinate, state) -> bool:
        if coord == state.seed_coordinate:
            return False
        return self.rng.random() < self.skip_chance

    def evaluate(self, coord, grid, state) -> Optional[str]:
        """Return the rejection reason for ``coord`` or None when it is accepted."""
        coord = GridCoordinate(*coord)
        if not grid.in_bounds(coord):
            return "bounds"
        if grid.is_occupied(coord):
            return "occupied"
        if state.room_count >= state.max_rooms:
            return "capacity"
        if self.should_skip(coord, state):
            return "skipped"
        if grid.occupied_neighbor_count(coord) > MAX_ATTACHED_NEIGHBORS:
            return "crowded"
        return None

    def accept(self, coord, grid, state) -> bool:
        return self.evaluate(coord, grid, state) is None


__all__ = ["PlacementPolicy", "DEFAULT_SKIP_CHANCE"]
