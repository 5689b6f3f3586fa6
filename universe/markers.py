#!/usr/bin/env python3
"""
Forecast marker bookkeeping for the presentation layer.

Forecast markers are purely visual and never enter the BodyStore. A new forecast
can be longer or shorter than the previous one, so markers are reconciled:
existing ones are moved to the new points, missing ones are created and surplus
ones destroyed.
"""
from typing import Callable, Generic, List, Tuple, TypeVar

from .data_models import ForecastResult
from .vector_utils import Vec3

M = TypeVar("M")


class MarkerPool(Generic[M]):
    """
    Owns the markers currently on screen.

    The concrete marker type belongs to the renderer; the pool only calls back:
    - create(body_id, position) -> marker
    - move(marker, body_id, position)
    - destroy(marker)
    """

    def __init__(self, create: Callable[[str, Vec3], M],
                 move: Callable[[M, str, Vec3], None],
                 destroy: Callable[[M], None]):
        self._create = create
        self._move = move
        self._destroy = destroy
        self.markers: List[M] = []

    def __len__(self) -> int:
        return len(self.markers)

    def reconcile(self, forecast: ForecastResult) -> Tuple[int, int, int]:
        """
        Show a new forecast. Returns (reused, created, destroyed) counts.
        """
        points = forecast.points()
        reused = min(len(points), len(self.markers))
        for marker, (body_id, position) in zip(self.markers, points):
            self._move(marker, body_id, position)

        surplus = self.markers[len(points):]
        for marker in surplus:
            self._destroy(marker)
        del self.markers[len(points):]

        created = 0
        for body_id, position in points[reused:]:
            self.markers.append(self._create(body_id, position))
            created += 1
        return reused, created, len(surplus)

    def clear(self) -> int:
        count = len(self.markers)
        for marker in self.markers:
            self._destroy(marker)
        self.markers = []
        return count
