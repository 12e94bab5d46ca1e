from __future__ import annotations

from typing import List

from .coords import Direction, GridCoordinate
from .errors import ConsistencyViolation


class OccupancyGrid:
    """Fixed W x H occupancy bits, column-major (cells[x][y])."""

    __slots__ = ("width", "height", "cells")

    def __init__(self, width: int = 0, height: int = 0):
        self.width = 0
        self.height = 0
        self.cells: List[List[bool]] = []
        self.reset(width, height)

    def reset(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.cells = [[False for _ in range(height)] for _ in range(width)]

    def in_bounds(self, coord: GridCoordinate) -> bool:
        x, y = coord
        return 0 <= x < self.width and 0 <= y < self.height

    def is_occupied(self, coord: GridCoordinate) -> bool:
        self._require_in_bounds(coord)
        return self.cells[coord[0]][coord[1]]

    def occupy(self, coord: GridCoordinate) -> None:
        self._require_in_bounds(coord)
        self.cells[coord[0]][coord[1]] = True

    def _require_in_bounds(self, coord) -> None:
        # negative indices would silently wrap to the opposite edge
        if not self.in_bounds(coord):
            raise ConsistencyViolation(f"cell {tuple(coord)} outside {self.width}x{self.height} grid")

    def occupied_neighbor_count(self, coord: GridCoordinate) -> int:
        count = 0
        for d in Direction:
            n = coord.neighbor(d)
            if self.in_bounds(n) and self.is_occupied(n):
                count += 1
        return count

    def occupied_count(self) -> int:
        return sum(1 for column in self.cells for cell in column if cell)

    def __repr__(self):
        return f"OccupancyGrid({self.width}x{self.height}, occupied={self.occupied_count()})"
