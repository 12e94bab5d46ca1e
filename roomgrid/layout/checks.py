"""Structural checks over a generated layout.

Used by scripts/diagnose_seeds.py and the test-suite. ``analyze`` never
raises on a bad layout; it reports what it found.
"""
from __future__ import annotations

from collections import deque
from typing import Any, Dict, List, Set, Tuple

from .coords import Direction, GridCoordinate

Edge = Tuple[GridCoordinate, GridCoordinate]


def door_edges(rooms) -> Set[Edge]:
    """Undirected edges implied by open doors (each pair once, sorted)."""
    edges: Set[Edge] = set()
    for record in rooms:
        for d in record.doors:
            other = record.coordinate.neighbor(d)
            edges.add(tuple(sorted((record.coordinate, other))))
    return edges


def asymmetric_doors(rooms) -> List[Tuple[GridCoordinate, Direction]]:
    by_coord = {r.coordinate: r for r in rooms}
    bad = []
    for record in rooms:
        for d in record.doors:
            other = by_coord.get(record.coordinate.neighbor(d))
            if other is None or d.opposite not in other.doors:
                bad.append((record.coordinate, d))
    return bad


def missing_doors(rooms) -> List[Edge]:
    """Adjacent placed rooms with no door between them."""
    by_coord = {r.coordinate: r for r in rooms}
    missing = []
    for record in rooms:
        for d in (Direction.EAST, Direction.NORTH):
            other = record.coordinate.neighbor(d)
            if other in by_coord and d not in record.doors:
                missing.append((record.coordinate, other))
    return missing


def reachable_from(start: GridCoordinate, rooms) -> Set[GridCoordinate]:
    by_coord = {r.coordinate: r for r in rooms}
    if start not in by_coord:
        return set()
    seen = {start}
    q = deque([start])
    while q:
        c = q.popleft()
        for d in by_coord[c].doors:
            n = c.neighbor(d)
            if n in by_coord and n not in seen:
                seen.add(n)
                q.append(n)
    return seen


def crowded_acceptances(rooms) -> List[GridCoordinate]:
    """Replay acceptance order; return rooms that had != 1 placed neighbor when accepted."""
    placed: Set[GridCoordinate] = set()
    bad = []
    for i, record in enumerate(rooms):
        c = record.coordinate
        if i > 0:
            count = sum(1 for d in Direction if c.neighbor(d) in placed)
            if count != 1:
                bad.append(c)
        placed.add(c)
    return bad


def analyze(scheduler) -> Dict[str, Any]:
    scheduler = getattr(scheduler, "scheduler", scheduler)
    rooms = scheduler.rooms()
    edges = door_edges(rooms)
    seed = scheduler.state.seed_coordinate if scheduler.state else None
    reach = reachable_from(seed, rooms) if seed is not None else set()
    unreachable = [r.coordinate for r in rooms if r.coordinate not in reach]
    return {
        "rooms": len(rooms),
        "edges": len(edges),
        "is_tree": bool(rooms) and len(edges) == len(rooms) - 1 and not unreachable,
        "unreachable": unreachable,
        "asymmetric_doors": asymmetric_doors(rooms),
        "missing_doors": missing_doors(rooms),
        "crowded_acceptances": crowded_acceptances(rooms),
    }


__all__ = [
    "analyze",
    "door_edges",
    "asymmetric_doors",
    "missing_doors",
    "reachable_from",
    "crowded_acceptances",
]
