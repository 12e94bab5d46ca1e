"""Notification hooks for rendering collaborators.

The core never draws anything. A collaborator subclasses ``LayoutListener``
and reacts to rooms being placed, doors being opened and the layout being
cleared on regeneration.
"""
from __future__ import annotations

from typing import Iterable, List, Sequence, Tuple

from .coords import Direction, GridCoordinate


def room_position(
    coord, width: int, height: int, room_width: int = 20, room_height: int = 12
) -> Tuple[int, int]:
    """World-space position of a room, centred on the middle of the grid."""
    x, y = coord
    return (room_width * (x - width // 2), room_height * (y - height // 2))


class LayoutListener:
    def room_placed(self, record, position: Tuple[int, int]) -> None:
        pass

    def door_opened(self, coord: GridCoordinate, direction: Direction) -> None:
        pass

    def rooms_cleared(self, records: Sequence) -> None:
        pass


class CompositeListener(LayoutListener):
    def __init__(self, listeners: Iterable[LayoutListener] = ()):
        self.listeners: List[LayoutListener] = list(listeners)

    def add(self, listener: LayoutListener) -> None:
        if listener not in self.listeners:
            self.listeners.append(listener)

    def remove(self, listener: LayoutListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def room_placed(self, record, position):
        for listener in list(self.listeners):
            listener.room_placed(record, position)

    def door_opened(self, coord, direction):
        for listener in list(self.listeners):
            listener.door_opened(coord, direction)

    def rooms_cleared(self, records):
        for listener in list(self.listeners):
            listener.rooms_cleared(records)


__all__ = ["LayoutListener", "CompositeListener", "room_position"]
