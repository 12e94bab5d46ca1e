import time

import pytest

from roomgrid.routes.layout_api import create_layout
from roomgrid.websockets.growth import active_growth, layout_room
from roomgrid.websockets.validation import REGENERATE_LAYOUT, START_GROWTH, validate


def _extract(event_name, received):
    return [p["args"][0] for p in received if p["name"] == event_name]


@pytest.fixture()
def layout():
    return create_layout({"width": 5, "height": 5, "max_rooms": 6, "min_rooms": 0, "rng_seed": 7})


def test_layout_room_name():
    assert layout_room("abc") == "layout:abc"


def test_watch_layout_sends_snapshot(ws_client, layout):
    lid, _ = layout
    ws_client.emit("watch_layout", {"layout_id": lid})
    states = _extract("layout_state", ws_client.get_received())
    assert states and states[0]["layout_id"] == lid
    assert states[0]["room_count"] == 1


def test_step_layout_streams_rooms_and_doors(ws_client, layout):
    lid, controller = layout
    ws_client.emit("step_layout", {"layout_id": lid})
    rec = ws_client.get_received()
    ticks = _extract("growth_tick", rec)
    assert ticks == [{"layout_id": lid, "in_progress": ticks[0]["in_progress"], "room_count": controller.state.room_count}]
    placed = _extract("room_placed", rec)
    doors = _extract("door_opened", rec)
    assert len(placed) == controller.state.room_count - 1
    assert len(doors) == 2 * len(placed)
    assert all(p["layout_id"] == lid for p in placed)
    assert {d["direction"] for d in doors} <= {"north", "south", "east", "west"}


def test_stepping_to_completion_emits_growth_complete(ws_client, layout):
    lid, controller = layout
    for _ in range(50):
        ws_client.emit("step_layout", {"layout_id": lid})
        if controller.is_complete():
            break
    completes = _extract("growth_complete", ws_client.get_received())
    assert len(completes) == 1
    assert completes[0]["complete"] is True


def test_regenerate_layout_clears_and_broadcasts(ws_client, layout):
    lid, controller = layout
    controller.run()
    n = controller.state.room_count
    ws_client.emit("regenerate_layout", {"layout_id": lid, "rng_seed": 99})
    rec = ws_client.get_received()
    cleared = _extract("rooms_cleared", rec)
    assert cleared == [{"layout_id": lid, "count": n}]
    states = _extract("layout_state", rec)
    assert states[-1]["rng_seed"] == 99
    assert states[-1]["room_count"] == 1


def test_unwatch_layout(ws_client, layout):
    lid, controller = layout
    ws_client.emit("watch_layout", {"layout_id": lid})
    ws_client.emit("unwatch_layout", {"layout_id": lid})
    ws_client.get_received()
    controller.step()
    assert _extract("room_placed", ws_client.get_received()) == []


def test_missing_layout_id_is_rejected(ws_client):
    ws_client.emit("watch_layout", {})
    errs = _extract("error", ws_client.get_received())
    assert errs and errs[0]["code"] == "required"
    assert errs[0]["field"] == "layout_id"


def test_unknown_layout_reports_not_found(ws_client):
    for event in ("watch_layout", "step_layout", "start_growth", "stop_growth", "regenerate_layout"):
        ws_client.emit(event, {"layout_id": "missing"})
        errs = _extract("error", ws_client.get_received())
        assert errs and errs[0]["code"] == "not_found", event


def test_invalid_seed_type(ws_client, layout):
    lid, _ = layout
    ws_client.emit("regenerate_layout", {"layout_id": lid, "rng_seed": True})
    errs = _extract("error", ws_client.get_received())
    assert errs[0]["code"] == "type"
    assert errs[0]["field"] == "rng_seed"


def test_start_growth_interval_bounds(ws_client, layout):
    lid, _ = layout
    ws_client.emit("start_growth", {"layout_id": lid, "interval": 60})
    errs = _extract("error", ws_client.get_received())
    assert errs[0]["code"] == "max"
    assert lid not in active_growth


def test_start_growth_drives_to_completion(ws_client, layout):
    lid, controller = layout
    ws_client.emit("start_growth", {"layout_id": lid, "interval": 0})
    started = _extract("growth_started", ws_client.get_received())
    assert started == [{"layout_id": lid, "interval": 0.0}]
    deadline = time.time() + 5
    while not controller.is_complete() and time.time() < deadline:
        time.sleep(0.01)
    assert controller.is_complete()


def test_stop_growth_cancels_driver(ws_client, layout):
    lid, controller = layout
    driver = controller.make_driver(0, sleep=lambda s: None)
    ws_client.emit("stop_growth", {"layout_id": lid})
    stopped = _extract("growth_stopped", ws_client.get_received())
    assert stopped[0]["layout_id"] == lid
    assert driver.cancelled
    assert driver.run() == 0


def test_validation_schemas():
    ok, out = validate({"layout_id": " abc ", "interval": 0.5}, START_GROWTH)
    assert ok and out == {"layout_id": "abc", "interval": 0.5}
    ok, err = validate({"layout_id": "abc", "interval": "fast"}, START_GROWTH)
    assert not ok and err["code"] == "type"
    ok, err = validate({"layout_id": "x" * 65}, START_GROWTH)
    assert not ok and err["code"] == "max_len"
    ok, out = validate({"layout_id": "abc", "rng_seed": "dragon"}, REGENERATE_LAYOUT)
    assert ok and out["rng_seed"] == "dragon"
    ok, err = validate({"layout_id": "abc", "rng_seed": "  "}, REGENERATE_LAYOUT)
    assert not ok and err["code"] == "empty"
    ok, err = validate("nope", START_GROWTH)
    assert not ok and err["field"] == "__root__"
