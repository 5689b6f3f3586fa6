#!/usr/bin/env python3
"""
Exception types raised by the Universe simulator core.

ConfigurationError marks bad input rejected at a boundary (config, bodies,
templates). IntegrityError marks an internal bookkeeping fault detected while
stepping; it is not meant to be caught and retried.
"""


class UniverseError(Exception):
    """Base class for all simulator errors."""


class ConfigurationError(UniverseError, ValueError):
    """Invalid configuration or body data supplied to the simulator."""


class IntegrityError(UniverseError, RuntimeError):
    """The live body state no longer matches what the integrator produced."""
