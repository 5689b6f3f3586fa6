#!/usr/bin/env python3
"""
Authoritative body storage for the Universe simulator.

BodyStore is the single owner of live Body instances. Readers get snapshots
(tuples of frozen BodySnapshot records), never references to the live bodies,
so nothing outside the store can change simulation state behind its back.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .data_models import Body, BodySnapshot, Snapshot
from .errors import ConfigurationError, IntegrityError
from .vector_utils import Vec3, is_finite, vec3

logger = logging.getLogger(__name__)


class BodyStore:
    """Ordered collection of bodies keyed by id."""

    def __init__(self, bodies: Optional[Iterable[Body]] = None):
        self._bodies: Dict[str, Body] = {}
        if bodies is not None:
            self.replace(bodies)

    def __len__(self) -> int:
        return len(self._bodies)

    def __contains__(self, body_id: str) -> bool:
        return body_id in self._bodies

    def __iter__(self) -> Iterator[BodySnapshot]:
        return iter(self.snapshot())

    def ids(self) -> List[str]:
        return list(self._bodies)

    def get(self, body_id: str) -> Body:
        """Return a detached copy of a body, including its presentation fields."""
        body = self._require(body_id)
        return Body(body.id, body.mass, body.position, body.velocity, body.name, body.color)

    def bodies(self) -> List[Body]:
        return [self.get(body_id) for body_id in self._bodies]

    def snapshot(self) -> Snapshot:
        return tuple(body.snapshot() for body in self._bodies.values())

    def add(self, body: Body) -> None:
        if body.id in self._bodies:
            raise ConfigurationError(f"Duplicate body id {body.id!r}")
        self._bodies[body.id] = Body(body.id, body.mass, body.position, body.velocity, body.name, body.color)
        logger.debug("Added body %s (mass=%s)", body.id, body.mass)

    def remove(self, body_id: str) -> None:
        self._require(body_id)
        del self._bodies[body_id]
        logger.debug("Removed body %s", body_id)

    def clear(self) -> None:
        self._bodies.clear()

    def replace(self, bodies: Iterable[Body]) -> None:
        """Bulk reset: swap the whole body set, rejecting duplicate ids up front."""
        staged: Dict[str, Body] = {}
        for body in bodies:
            if body.id in staged:
                raise ConfigurationError(f"Duplicate body id {body.id!r}")
            staged[body.id] = Body(body.id, body.mass, body.position, body.velocity, body.name, body.color)
        self._bodies = staged

    def set_position(self, body_id: str, position: Vec3) -> None:
        self._require(body_id).position = self._finite(body_id, "position", position)

    def set_velocity(self, body_id: str, velocity: Vec3) -> None:
        self._require(body_id).velocity = self._finite(body_id, "velocity", velocity)

    def apply(self, states: Snapshot) -> None:
        """
        Write integrated states back into the live bodies.

        Every state must name a live body and carry finite vectors; anything else is a
        bookkeeping fault in the caller and is raised as IntegrityError.
        """
        for state in states:
            body = self._bodies.get(state.id)
            if body is None:
                raise IntegrityError(f"Could not find body {state.id!r} while applying integration results")
            if not (is_finite(state.position) and is_finite(state.velocity)):
                raise IntegrityError(f"Body {state.id!r} reached a non-finite state: "
                                     f"position={state.position} velocity={state.velocity}")
            body.velocity = state.velocity
            body.position = state.position

    def _require(self, body_id: str) -> Body:
        body = self._bodies.get(body_id)
        if body is None:
            raise IntegrityError(f"Unknown body id {body_id!r}")
        return body

    @staticmethod
    def _finite(body_id: str, label: str, value) -> Vec3:
        try:
            v = vec3(value)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"Body {body_id!r} {label} must be a 3-vector, got {value!r}") from exc
        if not is_finite(v):
            raise ConfigurationError(f"Body {body_id!r} {label} must be finite, got {v}")
        return v
