#!/usr/bin/env python3
"""
vehicle_ai/controller.py
========================
Per-vehicle perception → decision → control loop.

A :class:`VehicleController` owns every piece of agent state (speed,
steering, lane offset, panic) and runs one tick in a fixed order::

    check_forward_path       perception + target speed
    smooth_speed_transition  current speed toward target
    advance_lane_offset      lateral offset + behaviour mode
    update_steering          look-ahead steering with the new offset

The possessed :class:`~vehicle_ai.vehicle.Vehicle` reads
``current_speed`` and ``current_steer`` afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from vehicle_ai.decision import Decision, decide_target_speed
from vehicle_ai.lane_change import BehaviorMode, LaneState, is_side_clear
from vehicle_ai.panic import PanicState
from vehicle_ai.path import PathOracle
from vehicle_ai.perception import CLEAR, PerceptionResult, SpatialQuery, sense
from vehicle_ai.physics import braking_distance, smooth_speed
from vehicle_ai.steering import compute_steering
from vehicle_ai.timers import TimerManager
from vehicle_ai.traffic_light import SignalPhase
from vehicle_ai.traffic_policy import DrivingPolicy
from vehicle_ai.vehicle import Vehicle

log = logging.getLogger("controller")


@dataclass(frozen=True)
class PeerSnapshot:
    """Read-only view of a vehicle published once per tick."""

    agent_id: str
    speed: float
    x: float
    y: float

    def as_payload(self) -> Dict[str, Any]:
        return {"agent_id": self.agent_id, "speed": self.speed, "x": self.x, "y": self.y}


class VehicleController:
    """
    Decision-and-control core for one vehicle.

    Parameters
    ----------
    policy : DrivingPolicy or None
        Tunable constants; uses defaults when *None*.
    timers : TimerManager or None
        Scheduler for the panic expiry.  A private one is created when
        *None* (then the caller must advance it).
    query : SpatialQuery or None
        Ray-cast provider.  Without it the road always reads as clear.
    path : PathOracle or None
        Reference path.  Without it steering stays at 0.
    """

    def __init__(
        self,
        policy: Optional[DrivingPolicy] = None,
        timers: Optional[TimerManager] = None,
        query: Optional[SpatialQuery] = None,
        path: Optional[PathOracle] = None,
    ) -> None:
        self.policy = policy or DrivingPolicy()
        self.timers = timers or TimerManager()
        self.query = query
        self.path = path
        self.vehicle: Optional[Vehicle] = None

        # Kinematics
        self.current_speed: float = 0.0
        self.target_speed: float = 0.0
        self.max_speed: float = self.policy.max_speed
        self.max_braking_deceleration: float = self.policy.max_braking_deceleration

        # Steering
        self.current_steer: float = 0.0

        # Lane changing
        self.lane = LaneState(change_speed=self.policy.lane_change_speed)

        # Panic
        self.panic = PanicState(self.timers, self.policy.panic_duration_s)

        # Latest per-tick results
        self.last_signal_phase: SignalPhase = SignalPhase.GO
        self.last_perception: PerceptionResult = CLEAR
        self.last_decision: Optional[Decision] = None

    # ── Possession ────────────────────────────────────────────────────────────

    def possess(self, vehicle: Vehicle) -> None:
        self.vehicle = vehicle
        vehicle.controller = self
        self.panic.owner = vehicle.agent_id

    def unpossess(self) -> None:
        if self.vehicle is not None:
            self.vehicle.controller = None
        self.vehicle = None

    @property
    def agent_id(self) -> str:
        return self.vehicle.agent_id if self.vehicle is not None else ""

    # ── Exposed to actuation / front ends ─────────────────────────────────────

    @property
    def is_panicking(self) -> bool:
        return self.panic.is_panicking

    @property
    def behavior_mode(self) -> BehaviorMode:
        return self.lane.mode

    @property
    def current_lane_offset(self) -> float:
        return self.lane.current_offset

    @property
    def target_lane_offset(self) -> float:
        return self.lane.target_offset

    def trigger_panic(self) -> None:
        """Enter panic (e.g. shots fired nearby); calm returns 10 s after the latest call."""
        self.panic.trigger()

    on_weapon_fire_detected = trigger_panic

    def set_target_lane_offset(self, value: float) -> None:
        """Request a lateral offset.  Side clearance is the caller's check."""
        self.lane.set_target(value)
        log.debug("%s lane target -> %.1f", self.agent_id, value)

    def is_side_clear(self, check_right: bool) -> bool:
        if self.vehicle is None:
            return False
        return is_side_clear(
            self.query,
            self.vehicle.position,
            self.vehicle.forward_vector,
            self.vehicle.right_vector,
            check_right,
            probe_distance=self.policy.side_probe_distance,
            forward_offset=self.policy.side_probe_forward_offset,
            ignore=self.vehicle,
        )

    def calculate_braking_distance(self) -> float:
        """Advisory stopping distance at the current speed."""
        return braking_distance(self.current_speed, self.max_braking_deceleration)

    # ── Tick ──────────────────────────────────────────────────────────────────

    def tick(self, dt: float, peer_speeds: Optional[Mapping[str, float]] = None) -> None:
        self.check_forward_path(peer_speeds)
        self.smooth_speed_transition(dt)
        self.advance_lane_offset(dt)
        self.update_steering()

    def check_forward_path(
        self, peer_speeds: Optional[Mapping[str, float]] = None,
    ) -> PerceptionResult:
        """Sense the road ahead and update ``target_speed``."""
        if self.vehicle is None:
            perception = CLEAR
        else:
            perception = sense(
                self.query,
                self.vehicle.position,
                self.vehicle.forward_vector,
                self.policy.detection_distance,
                self.policy.angular_threshold,
                ignore=self.vehicle,
            )
        decision = decide_target_speed(
            perception,
            current_speed=self.current_speed,
            max_speed=self.max_speed,
            safe_following_distance=self.policy.safe_following_distance,
            is_panicking=self.is_panicking,
            peer_speeds=peer_speeds,
            follow_fallback_factor=self.policy.follow_fallback_factor,
        )
        previous = self.last_decision
        if previous is None or previous.reason != decision.reason:
            log.debug(
                "%s %s -> %s  target=%.1f  speed=%.1f  brake_dist=%.1f",
                self.agent_id,
                previous.reason if previous else "none",
                decision.reason,
                decision.target_speed,
                self.current_speed,
                self.calculate_braking_distance(),
            )

        self.target_speed = decision.target_speed
        if decision.signal_phase is not None:
            self.last_signal_phase = decision.signal_phase
        self.last_perception = perception
        self.last_decision = decision
        return perception

    def smooth_speed_transition(self, dt: float, transition_rate: Optional[float] = None) -> float:
        rate = self.policy.transition_rate if transition_rate is None else transition_rate
        self.current_speed = smooth_speed(self.current_speed, self.target_speed, dt, rate)
        return self.current_speed

    def advance_lane_offset(self, dt: float) -> Tuple[float, BehaviorMode]:
        return self.lane.advance(dt)

    def update_steering(self) -> float:
        if self.vehicle is None:
            self.current_steer = 0.0
            return 0.0
        self.current_steer = compute_steering(
            self.path,
            self.vehicle.position,
            self.vehicle.right_vector,
            self.lane.current_offset,
            self.policy.look_ahead_distance,
        )
        return self.current_steer

    # ── Snapshots ─────────────────────────────────────────────────────────────

    def snapshot(self) -> PeerSnapshot:
        x, y = (self.vehicle.x, self.vehicle.y) if self.vehicle is not None else (0.0, 0.0)
        return PeerSnapshot(agent_id=self.agent_id, speed=self.current_speed, x=x, y=y)

    def status_dict(self) -> Dict[str, Any]:
        """Controller fields merged into :meth:`Vehicle.as_dict`."""
        return {
            "speed":          self.current_speed,
            "target_speed":   self.target_speed,
            "steer":          self.current_steer,
            "lane_offset":    self.lane.current_offset,
            "target_offset":  self.lane.target_offset,
            "mode":           self.lane.mode.value,
            "panicking":      self.is_panicking,
            "panic_left":     round(self.panic.remaining(), 1),
            "signal":         self.last_signal_phase.value,
            "reason":         self.last_decision.reason if self.last_decision else "none",
            "braking_dist":   self.calculate_braking_distance(),
        }
