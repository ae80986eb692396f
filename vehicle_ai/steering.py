#!/usr/bin/env python3
"""
vehicle_ai/steering.py
======================
Look-ahead path following.

The steering target is the path point ``look_ahead_distance`` past the
closest point, shifted sideways by the lane offset.  The steer value is
the dot product of the direction to that target with the vehicle's right
vector, so a lane change needs nothing beyond a different offset.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from vehicle_ai.path import PathOracle
from vehicle_ai.physics import VectorLike, as_vec, safe_normal


def look_ahead_target(
    path: PathOracle,
    position: VectorLike,
    lane_offset: float,
    look_ahead_distance: float,
) -> np.ndarray:
    """World-space steering target; the look-ahead never runs past the path end."""
    param = path.closest_parameter(position)
    target_distance = min(
        path.distance_at_parameter(param) + look_ahead_distance,
        path.total_length(),
    )
    point = as_vec(path.point_at_distance(target_distance))
    lateral = as_vec(path.lateral_direction_at_distance(target_distance))
    return point + lateral * lane_offset


def compute_steering(
    path: Optional[PathOracle],
    position: Optional[VectorLike],
    right_vector: VectorLike,
    lane_offset: float,
    look_ahead_distance: float,
) -> float:
    """Steer value in ``[-1, 1]`` (negative = left).  0 without a usable path."""
    if path is None or position is None:
        return 0.0
    if path.total_length() <= 0.0:
        return 0.0
    target = look_ahead_target(path, position, lane_offset, look_ahead_distance)
    direction = safe_normal(target - as_vec(position))
    steer = float(np.dot(direction, safe_normal(right_vector)))
    return max(-1.0, min(1.0, steer))
