#!/usr/bin/env python3
"""
Trajectory forecasting.

The forecaster runs the same integrator as the live simulation against a private
copy of a snapshot and records where every body goes. The live BodyStore is only
ever read, through BodyStore.snapshot(), which hands out frozen copies.
"""
import logging
from typing import Dict, List

from .body_store import BodyStore
from .constants import FORECAST_COST_WARNING
from .data_models import ForecastResult, Snapshot
from .errors import ConfigurationError, IntegrityError
from .physics import ForceIntegrator
from .vector_utils import Vec3, is_finite

logger = logging.getLogger(__name__)


class TrajectoryForecaster:
    """
    Speculative forward simulation.

    Cost is O(N^2 * steps) and runs synchronously on the caller's cycle; deep
    forecasts of many bodies are logged so the spike is visible.
    """

    def __init__(self, integrator: ForceIntegrator, cost_warning: int = FORECAST_COST_WARNING):
        self.integrator = integrator
        self.cost_warning = cost_warning

    def forecast(self, snapshot: Snapshot, steps: int, dt: float) -> ForecastResult:
        if isinstance(steps, bool) or not isinstance(steps, int) or steps < 0:
            raise ConfigurationError(f"Forecast steps must be a non-negative integer, got {steps!r}")

        cost = len(snapshot) * len(snapshot) * steps
        if cost > self.cost_warning:
            logger.warning("Expensive forecast: %d bodies x %d steps (%d pair evaluations)",
                           len(snapshot), steps, cost)

        trajectories: Dict[str, List[Vec3]] = {body.id: [] for body in snapshot}
        working = tuple(snapshot)
        for _ in range(steps):
            working = self.integrator.advance(working, dt)
            for body in working:
                if not (is_finite(body.position) and is_finite(body.velocity)):
                    raise IntegrityError(f"Forecast of body {body.id!r} reached a non-finite state: "
                                         f"position={body.position} velocity={body.velocity}")
                trajectories[body.id].append(body.position)

        logger.debug("Forecast %d steps for %d bodies", steps, len(snapshot))
        return ForecastResult(steps=steps, dt=dt, trajectories=trajectories)

    def forecast_store(self, store: BodyStore, steps: int, dt: float) -> ForecastResult:
        return self.forecast(store.snapshot(), steps, dt)
