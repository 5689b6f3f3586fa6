#!/usr/bin/env python3
"""
Vector helper functions for 3D operations.

Vectors are plain (x, y, z) tuples so they can be shared between snapshots
without any risk of aliasing mutable state.
"""
import math
from typing import Iterable, Tuple

Vec3 = Tuple[float, float, float]

ZERO: Vec3 = (0.0, 0.0, 0.0)


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec3(values: Iterable[float]) -> Vec3:
    """Coerce any 3-item iterable of numbers into a float tuple."""
    x, y, z = values
    return (float(x), float(y), float(z))


def vec_add(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def vec_sub(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def vec_scale(a: Vec3, s: float) -> Vec3:
    return (a[0] * s, a[1] * s, a[2] * s)


def vec_dot(a: Vec3, b: Vec3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def vec_len_sq(a: Vec3) -> float:
    return vec_dot(a, a)


def vec_len(a: Vec3) -> float:
    return math.sqrt(vec_len_sq(a))


def vec_norm(a: Vec3) -> Vec3:
    l = vec_len(a)
    if l == 0:
        return ZERO
    return (a[0] / l, a[1] / l, a[2] / l)


def distance_squared(a: Vec3, b: Vec3) -> float:
    return vec_len_sq(vec_sub(b, a))


def is_finite(a: Vec3) -> bool:
    return all(math.isfinite(c) for c in a)
