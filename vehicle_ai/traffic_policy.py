#!/usr/bin/env python3
"""
vehicle_ai/traffic_policy.py
============================
Tunable perception, kinematics, steering and lane-change parameters for a
vehicle controller, plus traffic-light phase timing.  Every constant lives
in a frozen dataclass so that experiments can swap policies without
touching code.

Distances are world units, speeds world units per second.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DrivingPolicy:
    """Immutable bag of every tunable controller parameter.

    Groups: perception, kinematics, steering, lane changing, panic,
    adaptive following.
    """

    # ── Perception ────────────────────────────────────────────────────────
    detection_distance: float = 1000.0
    """Length of the forward sensing ray."""

    angular_threshold: float = 0.7
    """Dot product above which a hit counts as *ahead* (1 = dead ahead)."""

    # ── Kinematics ────────────────────────────────────────────────────────
    max_speed: float = 1000.0
    """Free-flow target speed."""

    max_braking_deceleration: float = -500.0
    """Braking acceleration, stored negative."""

    transition_rate: float = 5.0
    """Speed smoothing rate; alpha per tick is ``rate · dt``."""

    # ── Steering ──────────────────────────────────────────────────────────
    look_ahead_distance: float = 500.0
    """How far along the path past the closest point the steering target sits."""

    # ── Lane changing ─────────────────────────────────────────────────────
    lane_change_speed: float = 200.0
    """Lateral offset change rate."""

    side_probe_distance: float = 300.0
    """Length of the side-clearance ray (about one lane width)."""

    side_probe_forward_offset: float = 100.0
    """The side-clearance ray starts this far ahead of the vehicle."""

    # ── Panic ─────────────────────────────────────────────────────────────
    panic_duration_s: float = 10.0
    """Time after the latest trigger until the vehicle calms down."""

    # ── Adaptive following ────────────────────────────────────────────────
    safe_following_distance: float = 500.0
    """Below this gap the vehicle matches its leader's speed."""

    follow_fallback_factor: float = 0.8
    """Speed multiplier used when the leader's speed is unknown."""

    def __post_init__(self) -> None:
        if self.max_speed <= 0.0:
            raise ValueError(f"max_speed must be > 0, got {self.max_speed}")
        if self.max_braking_deceleration > 0.0:
            raise ValueError(
                "max_braking_deceleration must be <= 0, "
                f"got {self.max_braking_deceleration}"
            )
        if not -1.0 <= self.angular_threshold <= 1.0:
            raise ValueError(
                f"angular_threshold must be in [-1, 1], got {self.angular_threshold}"
            )
        for name in (
            "detection_distance",
            "transition_rate",
            "look_ahead_distance",
            "lane_change_speed",
            "side_probe_distance",
            "panic_duration_s",
            "safe_following_distance",
            "follow_fallback_factor",
        ):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")


@dataclass(frozen=True)
class SignalTiming:
    """Per-phase durations (seconds) of a traffic light cycle."""

    go_s: float = 10.0
    caution_s: float = 3.0
    stop_s: float = 8.0

    def __post_init__(self) -> None:
        for name in ("go_s", "caution_s", "stop_s"):
            if getattr(self, name) <= 0.0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
