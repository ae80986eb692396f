#!/usr/bin/env python3
"""
vehicle_ai/vehicle.py
=====================
Kinematic vehicle body — the actuation side of a controller.

Each body:
  - owns its position / heading / collider radius
  - reads ``current_speed`` and ``current_steer`` from its controller
  - exposes a vehicle dict for the viewer and V2X payloads
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

import numpy as np

from vehicle_ai.physics import heading_vector, is_nearly_zero, right_of

if TYPE_CHECKING:
    from vehicle_ai.controller import VehicleController

log = logging.getLogger("vehicle")

# Viewer colour palette, indexed by spawn order
VEHICLE_COLORS: Tuple[Tuple[int, int, int], ...] = (
    ( 86, 168, 255),
    (255,  88,  88),
    (100, 226, 170),
    (246, 191,  90),
    (180, 120, 255),
    (255, 160, 100),
)


class Vehicle:
    """
    One simulated vehicle body.

    Parameters
    ----------
    agent_id : str
        Unique identifier, e.g. "CAR_0".
    x, y : float
        Starting world-space position.
    yaw_deg : float
        Heading in degrees, 0 = +x, counter-clockwise.
    radius : float
        Collider radius seen by ray casts.
    max_movement_speed : float
        Speed reached at a normalised movement input of 1.
    max_steering_angle : float
        Steering angle (degrees) at a steer input of ±1.
    steering_rate : float
        Yaw change per second per degree of steering angle.
    color_index : int
        Index into VEHICLE_COLORS palette.
    """

    def __init__(
        self,
        agent_id: str,
        x: float,
        y: float,
        yaw_deg: float = 0.0,
        radius: float = 120.0,
        max_movement_speed: float = 1000.0,
        max_steering_angle: float = 45.0,
        steering_rate: float = 10.0,
        color_index: int = 0,
    ) -> None:
        self.agent_id  = agent_id.upper()
        self.x         = float(x)
        self.y         = float(y)
        self.yaw_deg   = float(yaw_deg)
        self.radius    = float(radius)
        self.max_movement_speed = max_movement_speed
        self.max_steering_angle = max_steering_angle
        self.steering_rate = steering_rate
        self.color     = VEHICLE_COLORS[color_index % len(VEHICLE_COLORS)]
        self.controller: Optional["VehicleController"] = None

    # ── Pose ──────────────────────────────────────────────────────────────────

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])

    @property
    def forward_vector(self) -> np.ndarray:
        return heading_vector(self.yaw_deg)

    @property
    def right_vector(self) -> np.ndarray:
        return right_of(self.forward_vector)

    def teleport(self, x: float, y: float, yaw_deg: float) -> None:
        self.x, self.y, self.yaw_deg = float(x), float(y), float(yaw_deg)

    # ── Actuation ─────────────────────────────────────────────────────────────

    def apply_movement(self, speed: float, dt: float) -> None:
        """Advance along the heading; *speed* is normalised to [0, 1]."""
        speed = min(1.0, max(0.0, speed))
        if is_nearly_zero(speed):
            return
        step = self.forward_vector * speed * self.max_movement_speed * dt
        self.x += float(step[0])
        self.y += float(step[1])

    def apply_steering(self, steer: float, dt: float) -> None:
        """Turn by the steer input; positive steers right (clockwise)."""
        steer = min(1.0, max(-1.0, steer))
        if is_nearly_zero(steer):
            return
        angle = steer * self.max_steering_angle
        self.yaw_deg = (self.yaw_deg - angle * self.steering_rate * dt) % 360.0

    def tick(self, dt: float) -> None:
        """Apply the controller's latest speed and steer outputs."""
        if self.controller is None:
            return
        normalized = self.controller.current_speed / self.max_movement_speed
        self.apply_movement(normalized, dt)
        self.apply_steering(self.controller.current_steer, dt)

    # ── Serialisation ─────────────────────────────────────────────────────────

    def as_dict(self) -> Dict[str, Any]:
        """Rich vehicle dict for the viewer."""
        data: Dict[str, Any] = {
            "id":      self.agent_id,
            "x":       self.x,
            "y":       self.y,
            "yaw_deg": self.yaw_deg,
            "radius":  self.radius,
            "color":   self.color,
        }
        if self.controller is not None:
            data.update(self.controller.status_dict())
        return data
