import pytest

from universe.data_models import Body, SimulationConfig
from universe.simulation import Universe


def two_bodies():
    return [
        Body("a", 100.0, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0), name="A"),
        Body("b", 1.0, (10.0, 0.0, 0.0), (0.0, 0.0, 100.0), name="B"),
    ]


@pytest.fixture
def config():
    return SimulationConfig(gravitational_constant=0.05, tick_interval_ms=34, forecast_steps=50)


@pytest.fixture
def universe(config):
    return Universe(config, two_bodies)
