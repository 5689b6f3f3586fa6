#!/usr/bin/env python3
"""
Core Physics Engine for the Universe simulator

Responsibilities
- Compute pairwise inverse-square gravitational velocity changes between point bodies.
- Advance body states with a semi-implicit (symplectic) Euler step.
- Apply a step to the live BodyStore, checking that the results line up with it.

Numerical notes
- Semi-implicit Euler: every body's new velocity is computed from the pre-step
  snapshot first; positions then move with the new velocities. No body's motion
  influences another's force within the same step. Swapping the order (moving
  positions first, or using updated positions mid-step) is a different scheme.
- Coincident bodies: when two positions are exactly equal the direction between
  them is undefined, so that pair contributes nothing. The check is in the
  kernel and always on.
- Complexity: naive all-pairs, O(N^2) per step, with no symmetry shortcut.

Threading
- This module is pure compute. The only state is the gravitational constant.
"""

from typing import Dict, Optional

from .body_store import BodyStore
from .data_models import BodySnapshot, Snapshot
from .errors import IntegrityError
from .vector_utils import Vec3, distance_squared, vec_add, vec_norm, vec_scale, vec_sub


def pairwise_acceleration(gravitational_constant: float, this_position: Vec3,
                          that_position: Vec3, that_mass: float) -> Optional[Vec3]:
    """
    Acceleration pulling a body at this_position towards a mass at that_position.

        a = normalize(p_that - p_this) * G * m_that / |p_that - p_this|^2

    Returns None for coincident positions, where the direction is undefined.
    """
    square_distance = distance_squared(this_position, that_position)
    if square_distance == 0.0:
        return None
    direction = vec_norm(vec_sub(that_position, this_position))
    return vec_scale(direction, gravitational_constant * that_mass / square_distance)


class ForceIntegrator:
    """
    Fixed-step N-body integrator.

    The integrator never holds body state between calls: it takes a snapshot and a
    timestep and returns new values, which makes it safe to reuse for speculative
    runs such as trajectory forecasts.
    """

    def __init__(self, gravitational_constant: float):
        """
        Args:
            gravitational_constant: Validated, strictly positive G
        """
        self.gravitational_constant = float(gravitational_constant)

    def set_gravitational_constant(self, gravitational_constant: float) -> None:
        self.gravitational_constant = float(gravitational_constant)

    def compute_velocities(self, snapshot: Snapshot, dt: float) -> Dict[str, Vec3]:
        """
        Compute every body's velocity after one step of size dt.

        For each body i the contributions of all other bodies j are summed:

            v_i' = v_i + sum_j a_ij * dt

        Args:
            snapshot: Pre-step state of all bodies.
            dt: Step size.

        Returns:
            Mapping of body id to its new velocity, for every body in the snapshot.
        """
        g = self.gravitational_constant
        velocities: Dict[str, Vec3] = {}
        for this in snapshot:
            current_velocity = this.velocity
            for that in snapshot:
                if that.id == this.id:
                    continue
                acceleration = pairwise_acceleration(g, this.position, that.position, that.mass)
                if acceleration is None:
                    continue
                current_velocity = vec_add(current_velocity, vec_scale(acceleration, dt))
            velocities[this.id] = current_velocity
        return velocities

    def advance(self, snapshot: Snapshot, dt: float) -> Snapshot:
        """Return the snapshot one step later; the input is left untouched."""
        velocities = self.compute_velocities(snapshot, dt)
        advanced = []
        for body in snapshot:
            velocity = velocities[body.id]
            position = vec_add(body.position, vec_scale(velocity, dt))
            advanced.append(BodySnapshot(body.id, body.mass, position, velocity))
        return tuple(advanced)

    def step(self, store: BodyStore, dt: float) -> Snapshot:
        """
        Advance the live store by one step and return the applied states.

        Raises:
            IntegrityError: if the store's membership changed between snapshot and
                apply, or a body ended up with non-finite state.
        """
        before = store.snapshot()
        after = self.advance(before, dt)
        if len(after) != len(store):
            raise IntegrityError(f"Integrated {len(after)} bodies but the store holds {len(store)}")
        store.apply(after)
        return after
