"""Text and JSON views of a layout.

ASCII map legend (north is up):
    @  seed room
    #  room
    -  open door between horizontally adjacent rooms
    |  open door between vertically adjacent rooms
    .  empty grid cell
"""
from __future__ import annotations

from typing import Any, Dict, List

from .coords import Direction, GridCoordinate

SEED = "@"
ROOM = "#"
EMPTY = "."
DOOR_H = "-"
DOOR_V = "|"


def render_ascii(scheduler) -> str:
    """Render the occupied grid of ``scheduler`` (or a controller) as text."""
    scheduler = getattr(scheduler, "scheduler", scheduler)
    grid = scheduler.grid
    w, h = grid.width, grid.height
    seed = scheduler.state.seed_coordinate if scheduler.state else None
    # (2w-1) x (2h-1) canvas: cells at even positions, doors in between
    canvas: List[List[str]] = [[" " for _ in range(2 * w - 1)] for _ in range(2 * h - 1)]
    for x in range(w):
        for y in range(h):
            canvas[2 * y][2 * x] = EMPTY
    for record in scheduler.rooms():
        x, y = record.coordinate
        canvas[2 * y][2 * x] = SEED if record.coordinate == seed else ROOM
        # east / north only; the neighbor holds the matching opposite door
        if Direction.EAST in record.doors:
            canvas[2 * y][2 * x + 1] = DOOR_H
        if Direction.NORTH in record.doors:
            canvas[2 * y + 1][2 * x] = DOOR_V
    rows = ["".join(row).rstrip() for row in reversed(canvas)]
    return "\n".join(rows)


def room_to_dict(record, position) -> Dict[str, Any]:
    x, y = record.coordinate
    parent = record.parent
    return {
        "x": x,
        "y": y,
        "index": record.index,
        "name": record.name,
        "doors": record.door_labels(),
        "parent": [parent.x, parent.y] if parent is not None else None,
        "position": list(position),
    }


def layout_snapshot(controller) -> Dict[str, Any]:
    """JSON-ready snapshot of a RegenerationController."""
    scheduler = controller.scheduler
    cfg = controller.config
    state = scheduler.state
    seed = state.seed_coordinate if state else GridCoordinate(*cfg.seed_coordinate)
    return {
        "width": cfg.width,
        "height": cfg.height,
        "seed_coordinate": [seed.x, seed.y],
        "rng_seed": controller.rng_seed,
        "room_count": scheduler.room_count,
        "max_rooms": cfg.max_rooms,
        "min_rooms": cfg.min_rooms,
        "complete": scheduler.is_complete(),
        "phase": scheduler.phase.value,
        "rooms": [room_to_dict(r, scheduler.position_of(r.coordinate)) for r in scheduler.rooms()],
        "metrics": dict(controller.metrics),
    }


__all__ = ["render_ascii", "layout_snapshot", "room_to_dict"]
