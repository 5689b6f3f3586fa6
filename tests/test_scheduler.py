import pytest

from universe.data_models import SimulationConfig
from universe.errors import ConfigurationError
from universe.scheduler import TickScheduler


@pytest.fixture
def scheduler():
    return TickScheduler(SimulationConfig(tick_interval_ms=34))


def test_no_tick_before_interval(scheduler):
    assert scheduler.advance(0.02) is None
    assert scheduler.accumulated == pytest.approx(0.02)


def test_tick_carries_nominal_dt(scheduler):
    scheduler.advance(0.02)
    event = scheduler.advance(0.02)
    assert event is not None
    assert event.dt == pytest.approx(1 / 34)
    assert event.forced is False
    assert scheduler.accumulated == 0.0


def test_slow_frame_yields_one_tick_and_drops_remainder(scheduler):
    event = scheduler.advance(0.5)
    assert event is not None
    assert event.dt == pytest.approx(1 / 34)
    assert scheduler.accumulated == 0.0
    assert scheduler.advance(0.001) is None


def test_force_tick_ignores_accumulator(scheduler):
    scheduler.advance(0.01)
    event = scheduler.force_tick()
    assert event.forced is True
    assert event.dt == pytest.approx(1 / 34)
    assert scheduler.accumulated == pytest.approx(0.01)


def test_negative_elapsed_is_rejected(scheduler):
    with pytest.raises(ConfigurationError):
        scheduler.advance(-0.1)


def test_configure_resets_interval_and_accumulator(scheduler):
    scheduler.advance(0.03)
    scheduler.configure(SimulationConfig(tick_interval_ms=100))
    assert scheduler.accumulated == 0.0
    assert scheduler.dt == pytest.approx(0.01)
    assert scheduler.advance(0.05) is None
    assert scheduler.advance(0.06) is not None
