"""
project: Roomgrid
module: layout_api.py
License: MIT

Layout HTTP API.

Layouts live in a small in-process cache keyed by a generated layout id; they
are not persisted. Every controller created here gets a Socket.IO broadcaster
attached, so clients watching ``layout:<id>`` see rooms and doors appear
whether the layout is advanced over HTTP or by a websocket driver.
"""

import threading
import uuid

from flask import Blueprint, Response, current_app, jsonify, request

from roomgrid.layout import ConfigurationError, LayoutConfig, RegenerationController
from roomgrid.layout.render import layout_snapshot, render_ascii
from roomgrid.layout.seeds import coerce_seed
from roomgrid.logging_utils import get_logger

log = get_logger("layout_api")

bp_layout = Blueprint("layout", __name__)

# layout_id -> RegenerationController; insertion ordered so the oldest is evicted first.
# The lock guards the dict only; each controller serializes its own ticks.
_layouts = {}
_layouts_lock = threading.Lock()
_DEFAULT_CACHE_MAX = 16

INT_OPTIONS = ("width", "height", "seed_x", "seed_y", "max_rooms", "min_rooms", "min_rooms_retries")
FLOAT_OPTIONS = ("skip_chance", "tick_interval")


def _cache_max() -> int:
    try:
        return int(current_app.config.get("ROOMGRID_LAYOUT_CACHE_MAX", _DEFAULT_CACHE_MAX))
    except RuntimeError:  # outside an app context
        return _DEFAULT_CACHE_MAX


def parse_layout_options(data: dict) -> dict:
    """Validate a JSON body into LayoutConfig keyword arguments.

    Raises ConfigurationError naming the offending field.
    """
    if not isinstance(data, dict):
        raise ConfigurationError("body must be a JSON object", "__root__")
    options = {}
    for name in INT_OPTIONS:
        value = data.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{name} must be an integer", name)
        options[name] = value
    for name in FLOAT_OPTIONS:
        value = data.get(name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigurationError(f"{name} must be a number", name)
        options[name] = float(value)
    if data.get("rng_seed") is not None:
        options["rng_seed"] = parse_rng_seed(data["rng_seed"])
    return options


def parse_rng_seed(raw):
    try:
        return coerce_seed(raw)
    except TypeError:
        raise ConfigurationError("rng_seed must be an integer or a string", "rng_seed")


def create_layout(options: dict):
    """Build, start and cache a controller. Returns (layout_id, controller)."""
    from roomgrid.websockets.growth import RoomBroadcaster

    config = LayoutConfig.from_env(**options).validate()
    layout_id = uuid.uuid4().hex[:12]
    controller = RegenerationController(config, listener=RoomBroadcaster(layout_id))
    controller.start()
    evicted = []
    with _layouts_lock:
        _layouts[layout_id] = controller
        while len(_layouts) > max(1, _cache_max()):
            oldest = next(iter(_layouts))
            evicted.append((oldest, _layouts.pop(oldest)))
    for old_id, old in evicted:
        old.cancel()
        log.info(event="layout_evicted", layout_id=old_id)
    log.info(
        event="layout_created",
        layout_id=layout_id,
        width=config.width,
        height=config.height,
        max_rooms=config.max_rooms,
        rng_seed=controller.rng_seed,
    )
    return layout_id, controller


def get_layout(layout_id: str):
    with _layouts_lock:
        return _layouts.get(layout_id)


def drop_layout(layout_id: str):
    with _layouts_lock:
        controller = _layouts.pop(layout_id, None)
    if controller is not None:
        controller.cancel()
    return controller


def clear_layouts():
    with _layouts_lock:
        controllers = list(_layouts.values())
        _layouts.clear()
    for controller in controllers:
        controller.cancel()


def snapshot_for(layout_id: str, controller) -> dict:
    with controller.lock:
        data = layout_snapshot(controller)
    data["layout_id"] = layout_id
    return data


def _not_found():
    return jsonify({"error": "layout not found"}), 404


@bp_layout.route("/api/layout", methods=["POST"])
def create():
    """Create a layout and place its seed room.

    Body JSON (all optional):
      { "width", "height", "seed_x", "seed_y", "max_rooms", "min_rooms",
        "skip_chance", "tick_interval", "rng_seed", "min_rooms_retries" }
    Response 201: layout snapshot including "layout_id".
    """
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        layout_id, controller = create_layout(parse_layout_options(data))
    except ConfigurationError as e:
        return jsonify(e.to_dict()), 400
    return jsonify(snapshot_for(layout_id, controller)), 201


@bp_layout.route("/api/layout/<layout_id>", methods=["GET"])
def state(layout_id):
    controller = get_layout(layout_id)
    if controller is None:
        return _not_found()
    return jsonify(snapshot_for(layout_id, controller))


@bp_layout.route("/api/layout/<layout_id>/step", methods=["POST"])
def step(layout_id):
    """Advance one tick. Response: { in_progress, room_count, complete }."""
    controller = get_layout(layout_id)
    if controller is None:
        return _not_found()
    with controller.lock:
        in_progress = controller.step()
        return jsonify(
            {
                "in_progress": in_progress,
                "room_count": controller.scheduler.room_count,
                "complete": controller.is_complete(),
            }
        )


@bp_layout.route("/api/layout/<layout_id>/run", methods=["POST"])
def run(layout_id):
    controller = get_layout(layout_id)
    if controller is None:
        return _not_found()
    with controller.lock:
        controller.cancel()
        controller.run()
    return jsonify(snapshot_for(layout_id, controller))


@bp_layout.route("/api/layout/<layout_id>/regenerate", methods=["POST"])
def regenerate(layout_id):
    """Discard the layout and start over. Body JSON (optional): { "rng_seed": <int|str> }."""
    controller = get_layout(layout_id)
    if controller is None:
        return _not_found()
    data = request.get_json(silent=True) or {}
    try:
        rng_seed = parse_rng_seed(data["rng_seed"]) if data.get("rng_seed") is not None else None
    except ConfigurationError as e:
        return jsonify(e.to_dict()), 400
    controller.regenerate(rng_seed)
    return jsonify(snapshot_for(layout_id, controller))


@bp_layout.route("/api/layout/<layout_id>/ascii", methods=["GET"])
def ascii_map(layout_id):
    controller = get_layout(layout_id)
    if controller is None:
        return _not_found()
    with controller.lock:
        text = render_ascii(controller)
    return Response(text + "\n", mimetype="text/plain")


@bp_layout.route("/api/layout/<layout_id>", methods=["DELETE"])
def delete(layout_id):
    if drop_layout(layout_id) is None:
        return _not_found()
    log.info(event="layout_deleted", layout_id=layout_id)
    return jsonify({"deleted": True})
