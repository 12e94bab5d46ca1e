"""Grid coordinates and compass directions."""
from __future__ import annotations

from enum import Enum
from typing import NamedTuple, Tuple


class Direction(Enum):
    # value = (dx, dy); up is +y
    NORTH = (0, 1)
    SOUTH = (0, -1)
    EAST = (1, 0)
    WEST = (-1, 0)

    @property
    def dx(self) -> int:
        return self.value[0]

    @property
    def dy(self) -> int:
        return self.value[1]

    @property
    def opposite(self) -> "Direction":
        return _OPPOSITES[self]

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "Direction":
        return cls[label.strip().upper()]


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

# Neighbor evaluation order during expansion: left, right, down, up
EXPANSION_ORDER: Tuple[Direction, ...] = (
    Direction.WEST,
    Direction.EAST,
    Direction.SOUTH,
    Direction.NORTH,
)


class GridCoordinate(NamedTuple):
    x: int
    y: int

    def neighbor(self, direction: Direction) -> "GridCoordinate":
        return GridCoordinate(self.x + direction.dx, self.y + direction.dy)

    def neighbors(self):
        for d in EXPANSION_ORDER:
            yield d, self.neighbor(d)

    def direction_to(self, other: "GridCoordinate") -> Direction | None:
        """Return the direction leading to an orthogonally adjacent coordinate, else None."""
        for d in Direction:
            if (self.x + d.dx, self.y + d.dy) == (other.x, other.y):
                return d
        return None


__all__ = ["Direction", "GridCoordinate", "EXPANSION_ORDER"]
