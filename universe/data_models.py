#!/usr/bin/env python3
"""
Data models for the Universe simulator.

This module defines the records shared between the store, the integrator, the
forecaster and the presentation layer.

Units and usage
- Scene units throughout; there is no real-world calibration.
- Body is the only mutable record and is owned by BodyStore.
- BodySnapshot, SimulationConfig, TickEvent and ForecastResult are value objects;
  copies are handed out freely and never written back.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .constants import (
    DEFAULT_ACTIVE,
    DEFAULT_BODY_COLOR,
    DEFAULT_FORECAST_STEPS,
    DEFAULT_GRAVITATIONAL_CONSTANT,
    DEFAULT_TICK_INTERVAL_MS,
)
from .errors import ConfigurationError
from .vector_utils import ZERO, Vec3, is_finite, vec3


def _check_mass(body_id: str, mass: float) -> float:
    mass = float(mass)
    if not math.isfinite(mass) or mass <= 0:
        raise ConfigurationError(f"Body {body_id!r} must have a positive mass, got {mass}")
    return mass


def _check_vector(body_id: str, label: str, value) -> Vec3:
    try:
        v = vec3(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Body {body_id!r} {label} must be a 3-vector, got {value!r}") from exc
    if not is_finite(v):
        raise ConfigurationError(f"Body {body_id!r} {label} must be finite, got {v}")
    return v


@dataclass
class Body:
    """
    A massive point body living in the BodyStore.

    Fields:
    - id: Unique identifier within a store
    - mass: Strictly positive mass
    - position: (x, y, z) position
    - velocity: (vx, vy, vz) velocity
    - name: Display name for the inspector (defaults to the id)
    - color: RGB tuple used for rendering the body and its forecast markers
    """
    id: str
    mass: float
    position: Vec3 = ZERO
    velocity: Vec3 = ZERO
    name: str = ""
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR

    def __post_init__(self):
        if not self.id:
            raise ConfigurationError("Body id must be a non-empty string")
        self.id = str(self.id)
        self.mass = _check_mass(self.id, self.mass)
        self.position = _check_vector(self.id, "position", self.position)
        self.velocity = _check_vector(self.id, "velocity", self.velocity)
        if not self.name:
            self.name = self.id

    def snapshot(self) -> "BodySnapshot":
        """Return an immutable copy of the physical state."""
        return BodySnapshot(self.id, self.mass, self.position, self.velocity)


@dataclass(frozen=True)
class BodySnapshot:
    """Read-only copy of one body's physical state at a point in time."""
    id: str
    mass: float
    position: Vec3
    velocity: Vec3


Snapshot = Tuple[BodySnapshot, ...]


@dataclass(frozen=True)
class SimulationConfig:
    """
    Universe-wide settings.

    The config is frozen; commands that change a setting build a new instance with
    dataclasses.replace so that validation runs again.
    """
    gravitational_constant: float = DEFAULT_GRAVITATIONAL_CONSTANT
    tick_interval_ms: float = DEFAULT_TICK_INTERVAL_MS
    forecast_steps: int = DEFAULT_FORECAST_STEPS
    active: bool = DEFAULT_ACTIVE

    def __post_init__(self):
        g = self.gravitational_constant
        if isinstance(g, bool) or not isinstance(g, (int, float)) or not math.isfinite(g) or g <= 0:
            raise ConfigurationError(f"gravitational_constant must be positive, got {g!r}")
        interval = self.tick_interval_ms
        if isinstance(interval, bool) or not isinstance(interval, (int, float)) \
                or not math.isfinite(interval) or interval <= 0:
            raise ConfigurationError(f"tick_interval_ms must be positive, got {interval!r}")
        steps = self.forecast_steps
        if isinstance(steps, bool) or not isinstance(steps, int) or steps < 0:
            raise ConfigurationError(f"forecast_steps must be a non-negative integer, got {steps!r}")
        if not isinstance(self.active, bool):
            raise ConfigurationError(f"active must be a bool, got {self.active!r}")

    @property
    def tick_interval_seconds(self) -> float:
        return self.tick_interval_ms / 1000.0

    @property
    def nominal_dt(self) -> float:
        """Simulation step carried by every tick, independent of wall-clock jitter."""
        return 1.0 / self.tick_interval_ms


@dataclass(frozen=True)
class TickEvent:
    """One fixed-size simulation step, either scheduled or forced by the operator."""
    dt: float
    forced: bool = False


@dataclass
class ForecastResult:
    """
    Predicted future positions per body id, in store order.

    Each trajectory holds exactly `steps` positions; index k is the position after
    k + 1 integration steps.
    """
    steps: int
    dt: float
    trajectories: Dict[str, List[Vec3]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.trajectories)

    def positions(self, body_id: str) -> List[Vec3]:
        return self.trajectories[body_id]

    def points(self) -> List[Tuple[str, Vec3]]:
        """Flatten into (body_id, position) pairs, step-major, for marker placement."""
        flat: List[Tuple[str, Vec3]] = []
        for step in range(self.steps):
            for body_id, trajectory in self.trajectories.items():
                flat.append((body_id, trajectory[step]))
        return flat
