#!/usr/bin/env python3
"""
vehicle_ai/physics.py
=====================
Low-level kinematics and vector helpers used by :mod:`vehicle_ai.controller`,
:mod:`vehicle_ai.perception` and :mod:`vehicle_ai.steering`.

Keeping these in a separate module avoids circular imports and makes unit
testing straightforward.  Vectors are 2-D ``numpy`` arrays in world units.
"""

from __future__ import annotations

import math
from typing import Sequence, Union

import numpy as np

VectorLike = Union[Sequence[float], np.ndarray]

# Values with a magnitude at or below this are treated as zero.
NEARLY_ZERO: float = 1e-8

DEFAULT_TRANSITION_RATE: float = 5.0


def is_nearly_zero(value: float, tolerance: float = NEARLY_ZERO) -> bool:
    return abs(value) <= tolerance


def as_vec(value: VectorLike) -> np.ndarray:
    """Return *value* as a float ``(2,)`` array (copying)."""
    return np.array(value, dtype=float).reshape(2)


def safe_normal(vec: VectorLike) -> np.ndarray:
    """Unit vector along *vec*, or the zero vector when *vec* is degenerate."""
    v = as_vec(vec)
    norm = float(np.hypot(v[0], v[1]))
    if norm <= NEARLY_ZERO:
        return np.zeros(2)
    return v / norm


def heading_vector(yaw_deg: float) -> np.ndarray:
    """Forward unit vector for a heading (0° = +x, counter-clockwise)."""
    rad = math.radians(yaw_deg)
    return np.array([math.cos(rad), math.sin(rad)])


def right_of(forward: VectorLike) -> np.ndarray:
    """Right-hand perpendicular of *forward* in a y-up world."""
    f = as_vec(forward)
    return np.array([f[1], -f[0]])


def distance(a: VectorLike, b: VectorLike) -> float:
    d = as_vec(b) - as_vec(a)
    return float(np.hypot(d[0], d[1]))


def braking_distance(speed: float, max_braking_deceleration: float) -> float:
    """Stopping distance assuming constant deceleration.

    Solves ``0 = v² + 2·a·s`` for ``s``.

    Parameters
    ----------
    speed : float
        Current speed in world units per second.
    max_braking_deceleration : float
        Braking acceleration, stored as a negative value.

    Returns
    -------
    float
        Distance needed to reach zero speed, never negative.  Zero when either
        input is nearly zero.
    """
    if is_nearly_zero(max_braking_deceleration) or is_nearly_zero(speed):
        return 0.0
    return max(0.0, -(speed * speed) / (2.0 * max_braking_deceleration))


def smooth_speed(
    current: float,
    target: float,
    dt: float,
    transition_rate: float = DEFAULT_TRANSITION_RATE,
) -> float:
    """Move *current* toward *target* by ``clamp(rate · dt, 0, 1)`` of the gap.

    The clamp on alpha guarantees monotone convergence without overshoot.
    """
    alpha = min(1.0, max(0.0, transition_rate * dt))
    return current + (target - current) * alpha
