from collections import deque

from roomgrid.layout import LayoutListener

# Cardinal offsets duplicated lightly for test independence.
OFFSETS = ((1, 0), (-1, 0), (0, 1), (0, -1))


class FixedSource:
    """Random source that always returns the same value."""

    def __init__(self, value):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value


class ScriptedSource:
    """Random source that replays ``values`` and then repeats ``default``."""

    def __init__(self, values, default=0.99):
        self.values = deque(values)
        self.default = default
        self.calls = 0

    def random(self):
        self.calls += 1
        if self.values:
            return self.values.popleft()
        return self.default


class RecordingListener(LayoutListener):
    def __init__(self):
        self.placed = []
        self.doors = []
        self.cleared = []

    def room_placed(self, record, position):
        self.placed.append((record.coordinate, position))

    def door_opened(self, coord, direction):
        self.doors.append((coord, direction))

    def rooms_cleared(self, records):
        self.cleared.append(len(records))


def door_graph(rooms):
    """Adjacency dict {(x,y): set((x,y))} built from open doors."""
    graph = {tuple(r.coordinate): set() for r in rooms}
    for r in rooms:
        x, y = r.coordinate
        for d in r.doors:
            graph[(x, y)].add((x + d.dx, y + d.dy))
    return graph


def edge_count(rooms):
    graph = door_graph(rooms)
    return sum(len(v) for v in graph.values()) // 2


def bfs_reachable(graph, start):
    """Return set of (x,y) reachable from start over door edges."""
    if start not in graph:
        return set()
    seen = {start}
    q = deque([start])
    while q:
        c = q.popleft()
        for n in graph.get(c, ()):
            if n not in seen:
                seen.add(n)
                q.append(n)
    return seen


def asymmetric_doors(rooms):
    by_coord = {tuple(r.coordinate): r for r in rooms}
    bad = []
    for r in rooms:
        x, y = r.coordinate
        for d in r.doors:
            other = by_coord.get((x + d.dx, y + d.dy))
            if other is None or d.opposite not in other.doors:
                bad.append(((x, y), d))
    return bad


def placed_neighbors(coord, placed):
    x, y = coord
    return sum(1 for dx, dy in OFFSETS if (x + dx, y + dy) in placed)


def labels(directions):
    return sorted(d.label for d in directions)
