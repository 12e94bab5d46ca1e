"""
project: Roomgrid
module: __init__.py
License: MIT

Flask application factory and core extensions setup.

This module wires together the Flask app and Flask-SocketIO around the
``roomgrid.layout`` generator. Configuration is sourced from environment
variables (optionally loaded from a .env file) with reasonable defaults for
development. A local `instance/` directory is used for the rotating log file.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_socketio import SocketIO

__version__ = "0.1.0"

# Load .env if present so ROOMGRID_* and SECRET_KEY can be supplied without
# exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only installs still work; only file logging needs the folder
    pass

app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    # In-process layout cache bound (oldest layout evicted first)
    ROOMGRID_LAYOUT_CACHE_MAX=int(os.getenv("ROOMGRID_LAYOUT_CACHE_MAX", "16")),
    # Lower bound for Socket.IO driven tick intervals (seconds)
    ROOMGRID_MIN_TICK_INTERVAL=float(os.getenv("ROOMGRID_MIN_TICK_INTERVAL", "0.0")),
)

# Let Flask-SocketIO select best async_mode based on installed deps (eventlet/gevent/threading)
socketio = SocketIO(
    app,
    async_mode=os.getenv("SOCKETIO_ASYNC_MODE") or None,
    cors_allowed_origins=os.getenv("CORS_ALLOWED_ORIGINS", "*"),
    engineio_logger=bool(os.getenv("ENGINEIO_LOGGER", "0") == "1"),
    ping_interval=20,
    ping_timeout=10,
)

# Register HTTP blueprints
from roomgrid.routes import main  # noqa: E402
from roomgrid.routes.layout_api import bp_layout  # noqa: E402

app.register_blueprint(main.bp)
app.register_blueprint(bp_layout)

# Import websocket handlers so their event decorators register with Socket.IO (side-effect)
from roomgrid.websockets import growth as _ws_growth  # noqa: F401,E402


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal error", "error_id": error_id}), 500
