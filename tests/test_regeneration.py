import itertools

import pytest

from roomgrid.layout import ConfigurationError, LayoutConfig, RegenerationController, TickDriver
from tests.layout_test_utils import FixedSource, RecordingListener


def _coords(controller):
    return [tuple(r.coordinate) for r in controller.rooms()]


def test_start_places_seed_and_records_rng_seed():
    c = RegenerationController(LayoutConfig(), seed_source=lambda: 1234)
    assert c.start() == 1234
    assert c.rng_seed == 1234
    assert _coords(c) == [(5, 5)]
    assert c.start(77) == 77


def test_config_rng_seed_used_when_start_has_none():
    c = RegenerationController(LayoutConfig(rng_seed=99))
    assert c.start() == 99


def test_step_auto_starts():
    c = RegenerationController(LayoutConfig(), seed_source=lambda: 5)
    assert c.state is None
    c.step()
    assert c.rng_seed == 5
    assert c.state is not None


def test_regenerate_with_same_seed_reproduces_layout():
    c = RegenerationController(LayoutConfig())
    c.start(4242)
    c.run()
    first = _coords(c)
    c.regenerate(4242)
    assert _coords(c) == first[:1]
    c.run()
    assert _coords(c) == first
    assert c.regenerations == 1
    assert c.metrics["regenerations"] == 1


def test_regenerate_notifies_and_cold_starts():
    listener = RecordingListener()
    seeds = itertools.count(10)
    c = RegenerationController(LayoutConfig(), listener=listener, seed_source=lambda: next(seeds))
    c.start()
    c.run()
    n = c.state.room_count
    listener.placed.clear()
    assert c.regenerate() == 11
    assert listener.cleared == [n]
    assert c.state.room_count == 1
    assert c.state.ticks == 0
    assert not c.is_complete()
    assert listener.placed == [((5, 5), (0, 0))]
    assert c.metrics["rooms_placed"] == 1


def test_invalid_config_rejected_up_front():
    with pytest.raises(ConfigurationError) as exc:
        RegenerationController(LayoutConfig(width=0))
    assert exc.value.field == "width"
    assert exc.value.to_dict() == {"error": exc.value.message, "field": "width"}


def test_min_rooms_is_advisory_by_default(capsys, monkeypatch):
    monkeypatch.setenv("ROOMGRID_LOG_LEVEL", "warn")
    c = RegenerationController(LayoutConfig(min_rooms=5), rng_factory=lambda s: FixedSource(0.0))
    c.start(1)
    assert c.step() is False
    assert c.state.room_count == 1
    assert c.state.below_minimum
    assert c.retries_used == 0
    # warned once only
    c.step()
    out = capsys.readouterr().out
    assert out.count("event=min_rooms_unmet") == 1


def test_min_rooms_retries_regenerate_until_exhausted():
    listener = RecordingListener()
    seeds = itertools.count(100)
    c = RegenerationController(
        LayoutConfig(min_rooms=5, min_rooms_retries=2),
        listener=listener,
        rng_factory=lambda s: FixedSource(0.0),
        seed_source=lambda: next(seeds),
    )
    c.start()
    assert c.step() is True  # retry 1
    assert c.step() is True  # retry 2
    assert c.step() is False
    assert c.retries_used == 2
    assert c.rng_seed == 102
    assert listener.cleared == [1, 1]
    assert c.metrics["retries"] == 2
    assert c.regenerations == 0


def test_min_rooms_retry_stops_once_minimum_met():
    sources = iter([FixedSource(0.0), FixedSource(0.99)])
    c = RegenerationController(
        LayoutConfig(min_rooms=5, min_rooms_retries=3),
        rng_factory=lambda s: next(sources),
    )
    c.start(1)
    c.run()
    assert c.retries_used == 1
    assert c.state.room_count == 15


def test_make_driver_cancels_previous_driver():
    c = RegenerationController(LayoutConfig())
    c.start(3)
    d1 = c.make_driver(0)
    d2 = c.make_driver(0)
    assert d1.cancelled
    assert not d2.cancelled
    assert c.driver is d2
    c.regenerate(3)
    assert d2.cancelled
    assert c.driver is None


def test_cancelled_driver_does_not_step():
    c = RegenerationController(LayoutConfig())
    c.start(3)
    d = c.make_driver(0, sleep=lambda s: None)
    c.cancel()
    assert d.run() == 0
    assert c.state.ticks == 0


def test_driver_runs_to_completion():
    c = RegenerationController(LayoutConfig(tick_interval=0.25))
    c.start(8)
    sleeps = []
    ticks = []
    d = c.make_driver(sleep=sleeps.append, on_tick=ticks.append)
    assert isinstance(d, TickDriver)
    n = d.run()
    assert c.is_complete()
    assert n == len(ticks)
    assert ticks[-1] is False and all(ticks[:-1])
    assert sleeps == [0.25] * (n - 1)
    assert not d.running


def test_driver_cancel_from_tick_callback_stops_after_current_tick():
    c = RegenerationController(LayoutConfig(), rng_factory=lambda s: FixedSource(0.99))
    c.start(1)
    holder = {}

    def on_tick(in_progress):
        holder["driver"].cancel()

    holder["driver"] = d = c.make_driver(0, sleep=lambda s: None, on_tick=on_tick)
    assert d.run() == 1
    assert c.state.ticks == 1
    assert not c.is_complete()
