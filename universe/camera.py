#!/usr/bin/env python3
"""
Camera utilities for a top-down view of the universe.

The camera looks straight down the y axis, so world x maps to screen x and world z
maps to screen y. Height (y) is dropped from the projection.
"""
from typing import Iterable, Optional, Tuple
from .constants import (
    DEFAULT_UNITS_PER_PIXEL,
    MIN_UNITS_PER_PIXEL,
    MAX_UNITS_PER_PIXEL,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import Vec3, clamp


class Camera:
    """
    Simple top-down camera that maps world coordinates to screen pixels.
    """

    def __init__(self, center=(0.0, 0.0), units_per_pixel=DEFAULT_UNITS_PER_PIXEL):
        self.center = [center[0], center[1]]
        self.upp = units_per_pixel
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Vec3) -> Tuple[int, int]:
        cx, cz = self.center
        upp = self.upp
        px = (pos[0] - cx) / upp + self.viewport_size[0] / 2
        py = (pos[2] - cz) / upp + self.viewport_size[1] / 2
        return (int(round(px)), int(round(py)))

    def screen_to_world(self, screen: Tuple[int, int]) -> Vec3:
        """Inverse projection onto the y = 0 plane."""
        cx, cz = self.center
        upp = self.upp
        wx = (screen[0] - self.viewport_size[0] / 2) * upp + cx
        wz = (screen[1] - self.viewport_size[1] / 2) * upp + cz
        return (wx, 0.0, wz)

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_world(pivot_screen)
        self.upp = clamp(self.upp * (1.0 / factor), MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_world(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[2] - after[2])

    def pan_pixels(self, dx_pixels, dy_pixels):
        self.center[0] -= dx_pixels * self.upp
        self.center[1] -= dy_pixels * self.upp

    def fit(self, points: Iterable[Vec3], margin: float = 1.3) -> None:
        """Center on the given points and zoom so they all fit with a margin."""
        points = list(points)
        if not points:
            self.center = [0.0, 0.0]
            self.upp = DEFAULT_UNITS_PER_PIXEL
            return
        xs = [p[0] for p in points]
        zs = [p[2] for p in points]
        minx, maxx = min(xs), max(xs)
        minz, maxz = min(zs), max(zs)
        width = (maxx - minx) * margin + 1.0
        height = (maxz - minz) * margin + 1.0
        upp_x = width / max(self.viewport_size[0], 1)
        upp_z = height / max(self.viewport_size[1], 1)
        self.center = [(minx + maxx) / 2, (minz + maxz) / 2]
        self.upp = clamp(max(upp_x, upp_z), MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)
