import math

import pytest

from universe.body_store import BodyStore
from universe.data_models import Body, BodySnapshot
from universe.errors import IntegrityError
from universe.physics import ForceIntegrator, pairwise_acceleration

from conftest import two_bodies

G = 0.05
DT = 1 / 34


def snapshot_of(bodies):
    return tuple(b.snapshot() for b in bodies)


def test_two_body_example():
    velocities = ForceIntegrator(G).compute_velocities(snapshot_of(two_bodies()), DT)

    ax, ay, az = velocities["a"]
    assert ax == pytest.approx(0.05 * 1 / 100 * DT)
    assert ax == pytest.approx(1.47e-5, rel=1e-2)
    assert ay == 0.0 and az == 0.0

    bx, by, bz = velocities["b"]
    assert bx == pytest.approx(-0.05 * 100 / 100 * DT)
    assert bx == pytest.approx(-1.47e-3, rel=1e-2)
    assert by == 0.0
    assert bz == pytest.approx(100.0)


def test_positions_move_with_the_new_velocity():
    advanced = {s.id: s for s in ForceIntegrator(G).advance(snapshot_of(two_bodies()), DT)}
    b = advanced["b"]
    assert b.position[0] == pytest.approx(10.0 - 0.05 * DT * DT)
    assert b.position[2] == pytest.approx(100.0 * DT)
    a = advanced["a"]
    assert a.position[0] == pytest.approx(0.05 / 100 * DT * DT)


def test_advance_does_not_touch_input():
    snapshot = snapshot_of(two_bodies())
    copy = tuple(snapshot)
    ForceIntegrator(G).advance(snapshot, DT)
    assert snapshot == copy


def test_results_are_deterministic():
    integrator = ForceIntegrator(G)
    snapshot = snapshot_of(two_bodies() + [Body("c", 3.0, (0.0, 4.0, -2.0), (1.0, 0.0, 0.0))])
    assert integrator.advance(snapshot, DT) == integrator.advance(snapshot, DT)


def test_single_body_has_no_self_interaction():
    integrator = ForceIntegrator(G)
    resting = (BodySnapshot("solo", 10.0, (1.0, 2.0, 3.0), (0.0, 0.0, 0.0)),)
    assert integrator.advance(resting, DT) == resting

    moving = (BodySnapshot("solo", 10.0, (0.0, 0.0, 0.0), (3.4, 0.0, 0.0)),)
    (after,) = integrator.advance(moving, DT)
    assert after.velocity == (3.4, 0.0, 0.0)
    assert after.position[0] == pytest.approx(0.1)


def test_coincident_bodies_contribute_nothing():
    assert pairwise_acceleration(G, (1.0, 1.0, 1.0), (1.0, 1.0, 1.0), 5.0) is None
    snapshot = (
        BodySnapshot("p", 1.0, (2.0, 0.0, 0.0), (0.0, 1.0, 0.0)),
        BodySnapshot("q", 1.0, (2.0, 0.0, 0.0), (0.0, -1.0, 0.0)),
    )
    velocities = ForceIntegrator(G).compute_velocities(snapshot, DT)
    assert velocities == {"p": (0.0, 1.0, 0.0), "q": (0.0, -1.0, 0.0)}


def test_coincident_pair_still_feels_third_body():
    snapshot = (
        BodySnapshot("p", 1.0, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        BodySnapshot("q", 1.0, (0.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
        BodySnapshot("r", 50.0, (5.0, 0.0, 0.0), (0.0, 0.0, 0.0)),
    )
    velocities = ForceIntegrator(G).compute_velocities(snapshot, DT)
    expected = G * 50.0 / 25.0 * DT
    assert velocities["p"][0] == pytest.approx(expected)
    assert velocities["q"][0] == pytest.approx(expected)
    assert all(math.isfinite(c) for v in velocities.values() for c in v)


def test_momentum_is_conserved():
    integrator = ForceIntegrator(G)
    snapshot = snapshot_of(two_bodies() + [Body("c", 7.0, (-3.0, 2.0, 5.0), (0.0, 1.0, 0.0))])

    def momentum(snap):
        return tuple(sum(s.mass * s.velocity[k] for s in snap) for k in range(3))

    before = momentum(snapshot)
    for _ in range(100):
        snapshot = integrator.advance(snapshot, DT)
    after = momentum(snapshot)
    for k in range(3):
        assert after[k] == pytest.approx(before[k], abs=1e-6)


def test_gravitational_constant_scales_the_pull():
    snapshot = snapshot_of(two_bodies())
    weak = ForceIntegrator(G).compute_velocities(snapshot, DT)["a"][0]
    integrator = ForceIntegrator(G)
    integrator.set_gravitational_constant(2 * G)
    strong = integrator.compute_velocities(snapshot, DT)["a"][0]
    assert strong == pytest.approx(2 * weak)


def test_step_writes_back_to_store():
    store = BodyStore(two_bodies())
    applied = ForceIntegrator(G).step(store, DT)
    assert store.snapshot() == applied
    assert store.get("b").velocity[0] < 0


def test_step_detects_membership_mismatch():
    class ShrinkingStore(BodyStore):
        def snapshot(self):
            snap = super().snapshot()
            self.remove(snap[-1].id)
            return snap

    with pytest.raises(IntegrityError):
        ForceIntegrator(G).step(ShrinkingStore(two_bodies()), DT)
