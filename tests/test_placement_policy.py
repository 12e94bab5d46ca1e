import pytest

from roomgrid.layout import GenerationState, GridCoordinate, OccupancyGrid, PlacementPolicy
from tests.layout_test_utils import FixedSource, ScriptedSource


@pytest.fixture()
def grid():
    g = OccupancyGrid(5, 5)
    g.occupy(GridCoordinate(2, 2))
    return g


@pytest.fixture()
def state():
    return GenerationState(seed_coordinate=GridCoordinate(2, 2), max_rooms=10, min_rooms=0, room_count=1)


def test_out_of_bounds_rejected_without_draw(grid, state):
    src = FixedSource(0.99)
    policy = PlacementPolicy(src)
    assert policy.evaluate(GridCoordinate(-1, 2), grid, state) == "bounds"
    assert policy.evaluate(GridCoordinate(5, 0), grid, state) == "bounds"
    assert src.calls == 0


def test_occupied_rejected_without_draw(grid, state):
    src = FixedSource(0.99)
    policy = PlacementPolicy(src)
    assert policy.evaluate(GridCoordinate(2, 2), grid, state) == "occupied"
    assert src.calls == 0


def test_capacity_rejected_without_draw(grid, state):
    state.room_count = state.max_rooms
    src = FixedSource(0.99)
    policy = PlacementPolicy(src)
    assert policy.evaluate(GridCoordinate(1, 2), grid, state) == "capacity"
    assert src.calls == 0


def test_skip_draw_below_threshold(grid, state):
    policy = PlacementPolicy(ScriptedSource([0.29, 0.3]), skip_chance=0.3)
    assert policy.evaluate(GridCoordinate(1, 2), grid, state) == "skipped"
    # exactly skip_chance is not a skip
    assert policy.evaluate(GridCoordinate(1, 2), grid, state) is None


def test_crowded_candidate_rejected_after_draw(grid, state):
    grid.occupy(GridCoordinate(1, 1))
    src = FixedSource(0.99)
    policy = PlacementPolicy(src)
    # (1,2) touches (2,2) and (1,1)
    assert policy.evaluate(GridCoordinate(1, 2), grid, state) == "crowded"
    assert src.calls == 1
    assert not policy.accept(GridCoordinate(1, 2), grid, state)


def test_single_attachment_accepted(grid, state):
    policy = PlacementPolicy(FixedSource(0.5))
    assert policy.accept((3, 2), grid, state)


def test_seed_exempt_from_skip(state):
    src = FixedSource(0.0)
    policy = PlacementPolicy(src, skip_chance=1.0)
    assert policy.should_skip(state.seed_coordinate, state) is False
    assert src.calls == 0
    assert policy.should_skip(GridCoordinate(0, 0), state) is True


@pytest.mark.parametrize("chance,value,expected", [(0.0, 0.0, False), (1.0, 0.999, True), (0.5, 0.5, False)])
def test_skip_chance_bounds(state, chance, value, expected):
    policy = PlacementPolicy(FixedSource(value), skip_chance=chance)
    assert policy.should_skip(GridCoordinate(0, 0), state) is expected
