#!/usr/bin/env python3
"""
Shared constants for the Universe simulator.

The simulation is unitless: distances, masses and times are arbitrary scene
units tuned for a pleasant on-screen orbit, not a physical calibration.
"""

# Universe defaults
DEFAULT_GRAVITATIONAL_CONSTANT = 0.05
DEFAULT_TICK_INTERVAL_MS = 34.0  # wall-clock milliseconds between scheduled ticks
DEFAULT_FORECAST_STEPS = 1000
DEFAULT_ACTIVE = False

# Forecasts costing more pairwise evaluations than this are logged as expensive
FORECAST_COST_WARNING = 5_000_000

# Rendering (viewport)
VIEW_WIDTH = 1100
VIEW_HEIGHT = 800
BACKGROUND_COLOR = (10, 12, 18)
GRID_COLOR = (40, 45, 60)
SELECTION_COLOR = (255, 255, 0)
HUD_TEXT_COLOR = (200, 200, 200)
DEFAULT_BODY_COLOR = (200, 200, 255)
BODY_RADIUS_PX = 6
MARKER_RADIUS_PX = 1
PICK_RADIUS_PX = 12
TARGET_FPS = 60

# Camera zoom bounds (scene units per pixel)
DEFAULT_UNITS_PER_PIXEL = 0.05
MIN_UNITS_PER_PIXEL = 1e-4
MAX_UNITS_PER_PIXEL = 1e3

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
