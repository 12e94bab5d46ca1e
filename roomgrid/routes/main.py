"""
project: Roomgrid
module: main.py
License: MIT

Core application routes: service index and health check.
"""

from flask import Blueprint, jsonify

bp = Blueprint("main", __name__)


@bp.route("/")
def index():
    from roomgrid import __version__

    return jsonify(
        {
            "service": "roomgrid",
            "version": __version__,
            "endpoints": {
                "create": "POST /api/layout",
                "state": "GET /api/layout/<layout_id>",
                "step": "POST /api/layout/<layout_id>/step",
                "run": "POST /api/layout/<layout_id>/run",
                "regenerate": "POST /api/layout/<layout_id>/regenerate",
                "ascii": "GET /api/layout/<layout_id>/ascii",
            },
        }
    )


@bp.route("/api/health")
def health():
    from roomgrid import __version__

    return jsonify({"status": "ok", "version": __version__})
