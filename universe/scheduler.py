#!/usr/bin/env python3
"""
Fixed-interval tick scheduling.

TickScheduler turns irregular frame times into discrete simulation ticks. The
step size carried by a tick is always the configured nominal dt, never the
measured frame time, so simulation results do not depend on frame jitter.
"""
import logging
from typing import Optional

from .data_models import SimulationConfig, TickEvent
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


class TickScheduler:
    """
    Accumulates wall-clock time and fires at most one tick per update.

    When the accumulated time reaches the interval the accumulator goes back to
    zero, not to the remainder; a slow frame therefore never produces a burst of
    catch-up ticks.
    """

    def __init__(self, config: SimulationConfig):
        self.interval = config.tick_interval_seconds
        self.dt = config.nominal_dt
        self.accumulated = 0.0

    def configure(self, config: SimulationConfig) -> None:
        """Adopt a new interval; pending time is discarded."""
        self.interval = config.tick_interval_seconds
        self.dt = config.nominal_dt
        self.accumulated = 0.0

    def advance(self, elapsed_seconds: float) -> Optional[TickEvent]:
        if elapsed_seconds < 0:
            raise ConfigurationError(f"Elapsed time cannot be negative, got {elapsed_seconds}")
        self.accumulated += elapsed_seconds
        if self.accumulated >= self.interval:
            self.accumulated = 0.0
            return TickEvent(self.dt)
        return None

    def force_tick(self) -> TickEvent:
        """Emit one tick now, leaving the accumulator alone."""
        return TickEvent(self.dt, forced=True)
