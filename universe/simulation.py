#!/usr/bin/env python3
"""
Universe: the simulation context.

What this module does
- Owns the one BodyStore, the current SimulationConfig and the components that act
  on them (scheduler, activation gate, integrator, forecaster).
- Exposes the command surface used by the presentation layer: toggle, force tick,
  reset, forecast, body edits and configuration changes.

Ownership
- The integrator, acting through this object, is the only writer of the store's
  physics. The forecaster reads snapshots. Presentation code receives copies.

Cycle model
- The driver loop calls update(real_dt) once per frame. At most one scheduled
  tick is applied per call; force_tick() applies one more, separately.
"""
import dataclasses
import logging
from typing import Callable, List, Optional

from .activation import ActivationController
from .body_store import BodyStore
from .data_models import Body, ForecastResult, SimulationConfig, Snapshot, TickEvent
from .errors import ConfigurationError
from .forecast import TrajectoryForecaster
from .physics import ForceIntegrator
from .presets_loader import default_bodies, load_template
from .scheduler import TickScheduler
from .vector_utils import Vec3

logger = logging.getLogger(__name__)


class Universe:
    """Explicit simulation context passed to every core operation."""

    def __init__(self, config: Optional[SimulationConfig] = None,
                 startup_bodies: Optional[Callable[[], List[Body]]] = None):
        self._config = config or SimulationConfig()
        self.startup_bodies = startup_bodies or default_bodies
        self.store = BodyStore()
        self.integrator = ForceIntegrator(self._config.gravitational_constant)
        self.forecaster = TrajectoryForecaster(self.integrator)
        self.scheduler = TickScheduler(self._config)
        self.activation = ActivationController(self.store, self.startup_bodies, self._config.active)
        self.activation.reset()

    @classmethod
    def from_template(cls, file_name: str) -> "Universe":
        """Build a universe whose startup set and settings come from a template."""
        bodies, overrides, display_name = load_template(file_name)
        logger.info("Starting universe from template %s", display_name)
        return cls(SimulationConfig(**overrides), lambda: list(bodies))

    # -----------------------
    # State
    # -----------------------

    @property
    def config(self) -> SimulationConfig:
        return self._config

    @property
    def active(self) -> bool:
        return self.activation.active

    def body_states(self) -> List[Body]:
        """Per-body output for rendering and inspection (detached copies)."""
        return self.store.bodies()

    def get_body(self, body_id: str) -> Body:
        return self.store.get(body_id)

    def snapshot(self) -> Snapshot:
        return self.store.snapshot()

    # -----------------------
    # Ticking
    # -----------------------

    def update(self, elapsed_seconds: float) -> Optional[TickEvent]:
        """
        Feed one frame's worth of wall-clock time.

        Returns the tick that was applied to the store, or None when no tick fired
        or the gate dropped it.
        """
        event = self.scheduler.advance(elapsed_seconds)
        if event is None:
            return None
        return self._apply(event)

    def force_tick(self) -> TickEvent:
        """Apply exactly one step now, whether or not the universe is active."""
        event = self.scheduler.force_tick()
        applied = self._apply(event)
        logger.info("Forced tick (dt=%.6f)", event.dt)
        return applied

    def _apply(self, event: TickEvent) -> Optional[TickEvent]:
        if not self.activation.admits(event):
            logger.debug("Dropped scheduled tick while paused")
            return None
        self.integrator.step(self.store, event.dt)
        logger.debug("Applied %s tick (dt=%.6f) to %d bodies",
                     "forced" if event.forced else "scheduled", event.dt, len(self.store))
        return event

    # -----------------------
    # Commands
    # -----------------------

    def toggle_active(self) -> bool:
        active = self.activation.toggle()
        self._config = dataclasses.replace(self._config, active=active)
        return active

    def reset(self) -> None:
        self.activation.reset()

    def despawn_all(self) -> None:
        self.store.clear()
        logger.info("Despawned all bodies")

    def request_forecast(self, steps: Optional[int] = None) -> ForecastResult:
        if steps is None:
            steps = self._config.forecast_steps
        result = self.forecaster.forecast_store(self.store, steps, self._config.nominal_dt)
        logger.info("Forecast %d steps for %d bodies", result.steps, len(result))
        return result

    def clear_forecast(self) -> None:
        """Forecasts are not retained by the core; markers are cleared by the presenter."""
        logger.info("Forecast cleared")

    def add_body(self, body: Body) -> None:
        self.store.add(body)

    def remove_body(self, body_id: str) -> None:
        self.store.remove(body_id)

    def set_body_position(self, body_id: str, position: Vec3) -> None:
        self.store.set_position(body_id, position)

    def set_body_velocity(self, body_id: str, velocity: Vec3) -> None:
        self.store.set_velocity(body_id, velocity)

    def configure(self, **changes) -> SimulationConfig:
        """
        Change universe settings. The new config is validated as a whole before any
        component sees it; on error nothing changes.
        """
        unknown = sorted(set(changes) - {f.name for f in dataclasses.fields(SimulationConfig)})
        if unknown:
            raise ConfigurationError(f"Unknown universe settings: {', '.join(unknown)}")
        config = dataclasses.replace(self._config, **changes)
        self._config = config
        self.integrator.set_gravitational_constant(config.gravitational_constant)
        if "tick_interval_ms" in changes:
            self.scheduler.configure(config)
        self.activation.active = config.active
        logger.info("Universe configured: %s", changes)
        return config
