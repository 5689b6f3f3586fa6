#!/usr/bin/env python3
"""
Running/paused state and the reset command.
"""
import logging
from typing import Callable, List

from .body_store import BodyStore
from .data_models import Body, TickEvent

logger = logging.getLogger(__name__)


class ActivationController:
    """
    Gates ticks on their way to the integrator.

    Scheduled ticks pass only while active. Forced ticks always pass, which is
    what makes single-stepping a paused universe possible.
    """

    def __init__(self, store: BodyStore, startup_bodies: Callable[[], List[Body]], active: bool = False):
        self.store = store
        self.startup_bodies = startup_bodies
        self.active = active

    def toggle(self) -> bool:
        self.active = not self.active
        logger.info("Universe %s", "active" if self.active else "paused")
        return self.active

    def admits(self, event: TickEvent) -> bool:
        return event.forced or self.active

    def reset(self) -> None:
        """Replace the store's contents with a fresh copy of the startup set."""
        self.store.replace(self.startup_bodies())
        logger.info("Universe reset to %d startup bodies", len(self.store))
