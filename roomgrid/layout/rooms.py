from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .coords import Direction, GridCoordinate
from .errors import ConsistencyViolation


@dataclass
class RoomRecord:
    coordinate: GridCoordinate
    index: int
    doors: Set[Direction] = field(default_factory=set)
    # room this one attached to when accepted; None for the seed
    parent: Optional[GridCoordinate] = None

    @property
    def name(self) -> str:
        return f"Room {self.index}"

    def open_door(self, direction: Direction) -> bool:
        """Open a door; returns False when it was already open."""
        if direction in self.doors:
            return False
        self.doors.add(direction)
        return True

    def is_open(self, direction: Direction) -> bool:
        return direction in self.doors

    def door_labels(self) -> List[str]:
        # stable order for JSON output
        return [d.label for d in Direction if d in self.doors]


class RoomRegistry:
    """Coordinate-keyed room records in insertion order."""

    def __init__(self):
        self._rooms: Dict[GridCoordinate, RoomRecord] = {}

    def register(self, coord: GridCoordinate, parent: Optional[GridCoordinate] = None) -> RoomRecord:
        coord = GridCoordinate(*coord)
        if coord in self._rooms:
            raise ConsistencyViolation(f"room already registered at {tuple(coord)}")
        record = RoomRecord(coord, len(self._rooms) + 1, parent=parent)
        self._rooms[coord] = record
        return record

    def lookup(self, coord) -> Optional[RoomRecord]:
        return self._rooms.get(GridCoordinate(*coord))

    def all(self) -> List[RoomRecord]:
        return list(self._rooms.values())

    def coordinates(self) -> List[GridCoordinate]:
        return list(self._rooms.keys())

    def clear(self) -> None:
        self._rooms.clear()

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, coord):
        return GridCoordinate(*coord) in self._rooms

    def __iter__(self):
        return iter(self._rooms.values())
