import os
import sys

import pytest

# Ensure repository root importable early
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from roomgrid import create_app, socketio  # noqa: E402
from roomgrid.routes.layout_api import clear_layouts  # noqa: E402
from roomgrid.websockets.growth import active_growth  # noqa: E402


@pytest.fixture(scope="session")
def test_app():
    app = create_app()
    app.config.update({"TESTING": True})
    return app


@pytest.fixture()
def client(test_app):
    return test_app.test_client()


@pytest.fixture()
def ws_client(test_app):
    # Flask-SocketIO provides a test client we can use against the global socketio instance
    test_client = socketio.test_client(test_app, flask_test_client=test_app.test_client())
    yield test_client
    test_client.disconnect()


@pytest.fixture(autouse=True)
def _clean_layout_env(monkeypatch):
    """Keep ROOMGRID_* overrides from the developer shell out of the tests."""
    for key in list(os.environ):
        if key.startswith("ROOMGRID_"):
            monkeypatch.delenv(key, raising=False)
    yield


# ---------------- Additional autouse cleanup ----------------
@pytest.fixture(autouse=True)
def _clear_layout_cache():
    """Cached layouts (and their drivers) must not leak between tests."""
    clear_layouts()
    yield
    clear_layouts()
    active_growth.clear()
