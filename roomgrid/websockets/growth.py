"""Socket.IO layout growth handlers.

Clients join ``layout:<id>`` and watch the layout grow. This channel is the
timer for generation: ``start_growth`` runs a TickDriver in a background task
that sleeps with ``socketio.sleep`` between ticks.

Events:
    - watch_layout: Join a layout room; payload { layout_id }
    - unwatch_layout: Leave a layout room; payload { layout_id }
    - step_layout: Advance one tick now; payload { layout_id }
    - start_growth: Start timed growth; payload { layout_id, interval? }
    - stop_growth: Cancel timed growth; payload { layout_id }
    - regenerate_layout: Start over; payload { layout_id, rng_seed? }

Emits (to the layout room unless noted):
    - layout_state: full snapshot
    - room_placed { layout_id, x, y, index, name, position }
    - door_opened { layout_id, x, y, direction }
    - rooms_cleared { layout_id, count }
    - growth_tick { layout_id, in_progress, room_count }
    - growth_complete: snapshot
    - growth_started / growth_stopped (to the caller)
    - error { message, field, code } (to the caller)
"""

import time

from flask_socketio import emit, join_room, leave_room

from roomgrid import app, socketio
from roomgrid.layout import ConfigurationError, LayoutListener
from roomgrid.logging_utils import get_logger
from roomgrid.routes.layout_api import get_layout, parse_rng_seed, snapshot_for

from .validation import (
    REGENERATE_LAYOUT,
    START_GROWTH,
    STEP_LAYOUT,
    STOP_GROWTH,
    WATCH_LAYOUT,
    validate,
)

_log = get_logger("growth")

# layout_id -> { 'started': timestamp, 'interval': seconds } for running drivers
active_growth = {}


def layout_room(layout_id: str) -> str:
    return f"layout:{layout_id}"


class RoomBroadcaster(LayoutListener):
    """Forwards layout notifications to every client watching the layout."""

    def __init__(self, layout_id: str):
        self.layout_id = layout_id
        self.room = layout_room(layout_id)

    def room_placed(self, record, position):
        x, y = record.coordinate
        socketio.emit(
            "room_placed",
            {
                "layout_id": self.layout_id,
                "x": x,
                "y": y,
                "index": record.index,
                "name": record.name,
                "position": list(position),
            },
            to=self.room,
        )

    def door_opened(self, coord, direction):
        socketio.emit(
            "door_opened",
            {"layout_id": self.layout_id, "x": coord[0], "y": coord[1], "direction": direction.label},
            to=self.room,
        )

    def rooms_cleared(self, records):
        socketio.emit("rooms_cleared", {"layout_id": self.layout_id, "count": len(records)}, to=self.room)


def _invalid(event: str, result: dict):
    emit(
        "error",
        {"message": f"Invalid {event}: {result['error']}", "field": result["field"], "code": result["code"]},
    )


def _lookup(event: str, data, schema):
    """Validate the payload and resolve the layout; emits an error and returns None on failure."""
    ok, result = validate(data or {}, schema)
    if not ok:
        _invalid(event, result)
        return None, None
    controller = get_layout(result["layout_id"])
    if controller is None:
        emit("error", {"message": "layout not found", "field": "layout_id", "code": "not_found"})
        return None, None
    return result, controller


def _emit_tick(layout_id: str, controller, in_progress: bool):
    room = layout_room(layout_id)
    socketio.emit(
        "growth_tick",
        {"layout_id": layout_id, "in_progress": in_progress, "room_count": controller.scheduler.room_count},
        to=room,
    )
    if not in_progress:
        socketio.emit("growth_complete", snapshot_for(layout_id, controller), to=room)


@socketio.on("watch_layout")
def handle_watch_layout(data):
    result, controller = _lookup("watch_layout", data, WATCH_LAYOUT)
    if controller is None:
        return
    layout_id = result["layout_id"]
    join_room(layout_room(layout_id))
    emit("layout_state", snapshot_for(layout_id, controller))
    _log.info(event="watch_layout", layout_id=layout_id)


@socketio.on("unwatch_layout")
def handle_unwatch_layout(data):
    ok, result = validate(data or {}, WATCH_LAYOUT)
    if not ok:
        _invalid("unwatch_layout", result)
        return
    leave_room(layout_room(result["layout_id"]))


@socketio.on("step_layout")
def handle_step_layout(data):
    result, controller = _lookup("step_layout", data, STEP_LAYOUT)
    if controller is None:
        return
    layout_id = result["layout_id"]
    join_room(layout_room(layout_id))
    with controller.lock:
        in_progress = controller.step()
    _emit_tick(layout_id, controller, in_progress)


def _drive(layout_id: str, driver):
    try:
        ticks = driver.run()
    finally:
        meta = active_growth.get(layout_id)
        if meta is not None and meta.get("driver") is driver:
            active_growth.pop(layout_id, None)
    _log.info(event="growth_finished", layout_id=layout_id, ticks=ticks, cancelled=driver.cancelled)


@socketio.on("start_growth")
def handle_start_growth(data):
    result, controller = _lookup("start_growth", data, START_GROWTH)
    if controller is None:
        return
    layout_id = result["layout_id"]
    interval = result.get("interval", controller.config.tick_interval)
    interval = max(float(interval), float(app.config.get("ROOMGRID_MIN_TICK_INTERVAL", 0.0)))
    join_room(layout_room(layout_id))
    driver = controller.make_driver(
        interval,
        sleep=socketio.sleep,
        on_tick=lambda in_progress: _emit_tick(layout_id, controller, in_progress),
    )
    active_growth[layout_id] = {"driver": driver, "started": time.time(), "interval": interval}
    socketio.start_background_task(_drive, layout_id, driver)
    emit("growth_started", {"layout_id": layout_id, "interval": interval})
    _log.info(event="growth_started", layout_id=layout_id, interval=interval)


@socketio.on("stop_growth")
def handle_stop_growth(data):
    result, controller = _lookup("stop_growth", data, STOP_GROWTH)
    if controller is None:
        return
    layout_id = result["layout_id"]
    controller.cancel()
    active_growth.pop(layout_id, None)
    emit("growth_stopped", {"layout_id": layout_id, "room_count": controller.scheduler.room_count})
    _log.info(event="growth_stopped", layout_id=layout_id)


@socketio.on("regenerate_layout")
def handle_regenerate_layout(data):
    result, controller = _lookup("regenerate_layout", data, REGENERATE_LAYOUT)
    if controller is None:
        return
    layout_id = result["layout_id"]
    try:
        rng_seed = parse_rng_seed(result["rng_seed"]) if "rng_seed" in result else None
    except ConfigurationError as e:
        emit("error", {"message": e.message, "field": e.field, "code": "type"})
        return
    join_room(layout_room(layout_id))
    active_growth.pop(layout_id, None)
    controller.regenerate(rng_seed)
    socketio.emit("layout_state", snapshot_for(layout_id, controller), to=layout_room(layout_id))
