import pytest

from universe.activation import ActivationController
from universe.body_store import BodyStore
from universe.data_models import Body, TickEvent
from universe.errors import ConfigurationError

from conftest import two_bodies


def make_controller(active=False):
    store = BodyStore()
    controller = ActivationController(store, two_bodies, active)
    controller.reset()
    return store, controller


def test_starts_paused_and_toggles():
    _, controller = make_controller()
    assert controller.active is False
    assert controller.toggle() is True
    assert controller.toggle() is False


def test_paused_gate_drops_scheduled_but_not_forced_ticks():
    _, controller = make_controller()
    assert not controller.admits(TickEvent(0.1))
    assert controller.admits(TickEvent(0.1, forced=True))


def test_active_gate_passes_everything():
    _, controller = make_controller(active=True)
    assert controller.admits(TickEvent(0.1))
    assert controller.admits(TickEvent(0.1, forced=True))


def test_reset_restores_startup_set_and_keeps_flag():
    store, controller = make_controller(active=True)
    store.add(Body("extra", 1.0))
    store.set_velocity("a", (9.0, 9.0, 9.0))
    controller.reset()
    assert store.ids() == ["a", "b"]
    assert store.get("a").velocity == (0.0, 0.0, 0.0)
    assert controller.active is True


def test_failed_reset_keeps_current_bodies():
    store, controller = make_controller()

    def broken_startup():
        raise ConfigurationError("startup template missing")

    controller.startup_bodies = broken_startup
    with pytest.raises(ConfigurationError):
        controller.reset()
    assert store.ids() == ["a", "b"]
