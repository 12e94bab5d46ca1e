"""Door linking between a newly accepted room and its placed neighbors."""
from __future__ import annotations

from typing import List, Tuple

from .coords import Direction, GridCoordinate
from .errors import ConsistencyViolation

DoorEvent = Tuple[GridCoordinate, Direction]


def link_doors(new_coord, grid, registry, listener=None) -> List[DoorEvent]:
    """Open doors between ``new_coord`` and every occupied neighbor.

    For each direction D with an occupied neighbor, D is opened on the new room
    and the opposite of D on the neighbor. Already open doors are left alone and
    produce no event. Returns the door openings actually applied, in order.
    """
    new_coord = GridCoordinate(*new_coord)
    room = registry.lookup(new_coord)
    if room is None:
        raise ConsistencyViolation(f"no room registered at {tuple(new_coord)}")
    events: List[DoorEvent] = []
    for direction in Direction:
        neighbor = new_coord.neighbor(direction)
        if not grid.in_bounds(neighbor) or not grid.is_occupied(neighbor):
            continue
        other = registry.lookup(neighbor)
        if other is None:
            raise ConsistencyViolation(f"cell {tuple(neighbor)} is occupied but has no room record")
        if room.open_door(direction):
            events.append((new_coord, direction))
        if other.open_door(direction.opposite):
            events.append((neighbor, direction.opposite))
    if listener is not None:
        for coord, direction in events:
            listener.door_opened(coord, direction)
    return events


__all__ = ["link_doors", "DoorEvent"]
