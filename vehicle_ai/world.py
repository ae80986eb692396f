#!/usr/bin/env python3
"""
vehicle_ai/world.py
===================
Entity-based road world.

This module owns every vehicle, traffic light and static obstacle on one
reference path, the simulation clock (:class:`~vehicle_ai.timers.TimerManager`)
and the V2X bus used for peer-state snapshots.  It is also the spatial
query collaborator: :meth:`World.cast_ray` intersects rays with circular
colliders.

Per tick, in order:

1. due timers fire (panic expiry, light switches)
2. every controller publishes its :class:`PeerSnapshot` on ``v2v.state``
3. the bus is polled into a read-only ``{agent_id: speed}`` mapping
4. every controller ticks, then every vehicle body moves
5. vehicles past the end of the path are recycled to the start
"""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from bus.v2x_bus import V2XBus
from vehicle_ai.controller import PeerSnapshot, VehicleController
from vehicle_ai.lane_change import BehaviorMode
from vehicle_ai.path import PathOracle, PolylinePath, lane_centre
from vehicle_ai.perception import HitResult
from vehicle_ai.physics import NEARLY_ZERO, VectorLike, as_vec, distance
from vehicle_ai.timers import TimerManager
from vehicle_ai.traffic_light import SignalPhase, TrafficLight
from vehicle_ai.traffic_policy import DrivingPolicy, SignalTiming
from vehicle_ai.vehicle import Vehicle

log = logging.getLogger("world")

V2V_STATE_TOPIC = "v2v.state"

# ── Demo road layout (world units) ────────────────────────────────────────────
_ROAD_LENGTH: float = 20000.0
_LANE_OFFSETS: Tuple[float, ...] = (0.0, 350.0)
_LIGHT_DISTANCE: float = 9000.0
_STALL_DISTANCE: float = 15000.0
_SPAWN_MAX_DISTANCE: float = 6000.0
_SPAWN_MIN_GAP: float = 600.0
_SPAWN_MAX_ATTEMPTS: int = 300
_FINISH_MARGIN: float = 200.0


@dataclass
class Obstacle:
    """Static blocker with a circular collider (e.g. a stalled car)."""

    obstacle_id: str
    x: float
    y: float
    radius: float = 150.0

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.obstacle_id, "x": self.x, "y": self.y, "radius": self.radius}


def _ray_circle(origin: np.ndarray, unit: np.ndarray, length: float,
                centre: np.ndarray, radius: float) -> Optional[float]:
    """Distance along the ray to the first crossing of the circle, if within *length*.

    A ray that starts inside the circle does not hit it.
    """
    f = origin - centre
    c = float(np.dot(f, f)) - radius * radius
    if c <= 0.0:
        return None
    b = float(np.dot(f, unit))
    disc = b * b - c
    if disc < 0.0:
        return None
    t = -b - math.sqrt(disc)
    if 0.0 <= t <= length:
        return t
    return None


class World:
    """Road scenario with controllers, lights and obstacles.

    Parameters
    ----------
    num_vehicles : int
        Vehicles spawned by :meth:`reset` (0 for an empty world).
    seed : int or None
        Random seed for reproducibility.
    policy : DrivingPolicy or None
        Controller constants; uses defaults when *None*.
    timing : SignalTiming or None
        Traffic light phase durations.
    path : PathOracle or None
        Reference path; a straight road along +x when *None*.
    lane_offsets : sequence of float
        Lateral offsets of the lanes (positive = right of the path).
    drop_rate : float
        V2X packet drop probability for peer snapshots.
    recycle : bool
        Respawn vehicles at the start once they reach the end of the path.
    populate : bool
        Add the demo traffic light and stalled obstacle.
    """

    def __init__(
        self,
        num_vehicles: int = 6,
        seed: Optional[int] = None,
        policy: Optional[DrivingPolicy] = None,
        timing: Optional[SignalTiming] = None,
        path: Optional[PathOracle] = None,
        lane_offsets: Sequence[float] = _LANE_OFFSETS,
        drop_rate: float = 0.0,
        recycle: bool = True,
        populate: bool = True,
    ) -> None:
        self.policy = policy or DrivingPolicy()
        self.timing = timing or SignalTiming()
        self.path: PathOracle = path or PolylinePath.straight((0.0, 0.0), (_ROAD_LENGTH, 0.0))
        self.lane_offsets: Tuple[float, ...] = tuple(float(o) for o in lane_offsets)
        self.num_vehicles = max(0, int(num_vehicles))
        self.recycle = recycle
        self.populate = populate
        self._seed = seed
        self.bus = V2XBus(drop_rate=drop_rate, seed=seed)
        self._init_entities()

    # ── initialisation / reset ────────────────────────────────────────────────

    def _init_entities(self) -> None:
        self._rng = random.Random(self._seed)
        self.timers = TimerManager()
        self.vehicles: List[Vehicle] = []
        self.lights: List[TrafficLight] = []
        self.obstacles: List[Obstacle] = []
        self._respawn_queue: List[Vehicle] = []
        self.completed_runs: int = 0
        self.lane_changes: int = 0
        self.peer_speeds: Dict[str, float] = {}
        self._tick_count = 0

        if self.populate:
            self.add_traffic_light("TL_0", _LIGHT_DISTANCE, self._lanes_centre(), radius=300.0)
            self.add_obstacle("STALL_0", _STALL_DISTANCE, self.lane_offsets[0])
        for idx in range(self.num_vehicles):
            self._spawn_random_vehicle(idx)

    def reset(self) -> None:
        """Re-create every entity so the scenario can be replayed."""
        self._init_entities()
        log.info("world reset: %d vehicles", len(self.vehicles))

    @property
    def now(self) -> float:
        return self.timers.now

    def _lanes_centre(self) -> float:
        return (min(self.lane_offsets) + max(self.lane_offsets)) / 2.0

    # ── entities ──────────────────────────────────────────────────────────────

    def add_vehicle(
        self,
        agent_id: str,
        distance_along: float,
        lane_offset: float = 0.0,
        color_index: Optional[int] = None,
    ) -> VehicleController:
        """Spawn a vehicle on the path, aligned with it, and return its controller."""
        x, y, yaw = self._pose_on_path(distance_along, lane_offset)
        vehicle = Vehicle(
            agent_id,
            x,
            y,
            yaw_deg=yaw,
            max_movement_speed=self.policy.max_speed,
            color_index=len(self.vehicles) if color_index is None else color_index,
        )
        controller = VehicleController(
            policy=self.policy, timers=self.timers, query=self, path=self.path,
        )
        controller.possess(vehicle)
        controller.lane.current_offset = float(lane_offset)
        controller.lane.target_offset = float(lane_offset)
        self.vehicles.append(vehicle)
        return controller

    def add_traffic_light(
        self,
        light_id: str,
        distance_along: float,
        lane_offset: float = 0.0,
        radius: float = 300.0,
        initial_phase: SignalPhase = SignalPhase.GO,
    ) -> TrafficLight:
        centre = lane_centre(self.path, distance_along, lane_offset)
        light = TrafficLight(
            light_id, centre[0], centre[1], self.timers,
            timing=self.timing, initial_phase=initial_phase, radius=radius,
        )
        light.start()
        self.lights.append(light)
        return light

    def add_obstacle(self, obstacle_id: str, distance_along: float,
                     lane_offset: float = 0.0, radius: float = 150.0) -> Obstacle:
        centre = lane_centre(self.path, distance_along, lane_offset)
        obstacle = Obstacle(obstacle_id, float(centre[0]), float(centre[1]), radius)
        self.obstacles.append(obstacle)
        return obstacle

    def vehicle(self, agent_id: str) -> Optional[Vehicle]:
        key = agent_id.upper()
        for vehicle in self.vehicles:
            if vehicle.agent_id == key:
                return vehicle
        return None

    def light(self, light_id: str) -> Optional[TrafficLight]:
        for light in self.lights:
            if light.light_id == light_id:
                return light
        return None

    def controllers(self) -> List[VehicleController]:
        return [v.controller for v in self.vehicles if v.controller is not None]

    def _pose_on_path(self, distance_along: float, lane_offset: float) -> Tuple[float, float, float]:
        centre = lane_centre(self.path, distance_along, lane_offset)
        lateral = as_vec(self.path.lateral_direction_at_distance(distance_along))
        # Tangent is the lateral direction rotated a quarter turn counter-clockwise.
        yaw = math.degrees(math.atan2(lateral[0], -lateral[1]))
        return float(centre[0]), float(centre[1]), yaw

    def _spawn_random_vehicle(self, idx: int) -> None:
        lane = self._rng.choice(self.lane_offsets)
        along = 0.0
        for _ in range(_SPAWN_MAX_ATTEMPTS):
            along = self._rng.uniform(0.0, _SPAWN_MAX_DISTANCE)
            lane = self._rng.choice(self.lane_offsets)
            if self._spawn_is_clear(lane_centre(self.path, along, lane)):
                break
        else:
            # Deterministic fallback: stack vehicles behind each other.
            lane = self.lane_offsets[idx % len(self.lane_offsets)]
            along = _SPAWN_MIN_GAP * (idx // len(self.lane_offsets))
        self.add_vehicle(f"CAR_{idx:03d}", along, lane)

    def _spawn_is_clear(self, point: VectorLike) -> bool:
        for vehicle in self.vehicles:
            if distance(vehicle.position, point) < _SPAWN_MIN_GAP:
                return False
        return True

    # ── spatial query ─────────────────────────────────────────────────────────

    def _colliders(self) -> List[Any]:
        return [*self.vehicles, *self.lights, *self.obstacles]

    def cast_ray(self, origin: VectorLike, end: VectorLike,
                 ignore: Any = None) -> Optional[HitResult]:
        """Nearest collider crossed by the segment *origin* → *end*, skipping *ignore*."""
        o = as_vec(origin)
        d = as_vec(end) - o
        length = float(np.hypot(d[0], d[1]))
        if length <= NEARLY_ZERO:
            return None
        unit = d / length

        best_t = math.inf
        best: Any = None
        for entity in self._colliders():
            if entity is ignore:
                continue
            t = _ray_circle(o, unit, length, entity.position, entity.radius)
            if t is not None and t < best_t:
                best_t, best = t, entity
        if best is None:
            return None
        return HitResult(point=o + unit * best_t, entity=best)

    # ── commands ──────────────────────────────────────────────────────────────

    def report_gunfire(self, x: float, y: float, radius: float) -> List[str]:
        """Panic every vehicle within *radius* of *(x, y)*; returns their ids."""
        panicked: List[str] = []
        for vehicle in self.vehicles:
            if vehicle.controller is None:
                continue
            if distance(vehicle.position, (x, y)) <= radius:
                vehicle.controller.trigger_panic()
                panicked.append(vehicle.agent_id)
        log.info("gunfire at (%.0f, %.0f) r=%.0f -> %s", x, y, radius, panicked)
        return panicked

    def request_lane_change(self, agent_id: str, offset: float) -> bool:
        """Move *agent_id* toward *offset* if the side it moves to is clear."""
        vehicle = self.vehicle(agent_id)
        if vehicle is None or vehicle.controller is None:
            return False
        controller = vehicle.controller
        if offset == controller.target_lane_offset:
            return True
        check_right = offset > controller.current_lane_offset
        if not controller.is_side_clear(check_right):
            log.info("%s lane change to %.0f refused: side blocked", vehicle.agent_id, offset)
            return False
        controller.set_target_lane_offset(offset)
        self.lane_changes += 1
        log.info("%s lane change -> %.0f", vehicle.agent_id, offset)
        return True

    def shift_lane(self, agent_id: str, step: int) -> bool:
        """Request the neighbouring lane *step* positions to the right (negative = left)."""
        vehicle = self.vehicle(agent_id)
        if vehicle is None or vehicle.controller is None:
            return False
        lanes = sorted(self.lane_offsets)
        current = vehicle.controller.target_lane_offset
        idx = min(range(len(lanes)), key=lambda i: abs(lanes[i] - current))
        new_idx = idx + step
        if not 0 <= new_idx < len(lanes):
            return False
        return self.request_lane_change(agent_id, lanes[new_idx])

    def set_light_phase(self, light_id: str, phase: SignalPhase) -> bool:
        light = self.light(light_id)
        if light is None:
            return False
        light.set_phase(phase)
        return True

    # ── tick ──────────────────────────────────────────────────────────────────

    def tick(self, dt: float) -> None:
        """Advance the whole world by *dt* seconds."""
        self._tick_count += 1
        self.timers.advance(dt)

        for controller in self.controllers():
            snap = controller.snapshot()
            self.bus.publish(V2V_STATE_TOPIC, sender=snap.agent_id, payload=snap.as_payload())
        self.peer_speeds = self._collect_peer_speeds()

        for controller in self.controllers():
            controller.tick(dt, self.peer_speeds)
        for vehicle in self.vehicles:
            vehicle.tick(dt)

        self._request_overtakes()
        self._recycle_finished()

        if self._tick_count % 20 == 1:
            log.debug(
                "=== TICK %d t=%.2f vehicles=%d queued=%d dropped=%d",
                self._tick_count, self.now, len(self.vehicles),
                len(self._respawn_queue), self.bus.metrics.dropped,
            )

    def _collect_peer_speeds(self) -> Dict[str, float]:
        speeds: Dict[str, float] = {}
        for msg in self.bus.poll(V2V_STATE_TOPIC):
            payload = msg.payload if isinstance(msg.payload, dict) else {}
            agent_id = str(payload.get("agent_id", ""))
            if not agent_id:
                continue
            try:
                speeds[agent_id] = float(payload["speed"])
            except (KeyError, TypeError, ValueError):
                continue
        return speeds

    def _request_overtakes(self) -> None:
        """Vehicles halted by a static obstacle try the nearest other lane."""
        for controller in self.controllers():
            decision = controller.last_decision
            if decision is None or decision.reason != "obstacle":
                continue
            if controller.behavior_mode is not BehaviorMode.NORMAL:
                continue
            current = controller.target_lane_offset
            others = sorted(
                (o for o in self.lane_offsets if o != current),
                key=lambda o: abs(o - current),
            )
            for offset in others:
                if self.request_lane_change(controller.agent_id, offset):
                    break

    def _distance_along(self, vehicle: Vehicle) -> float:
        return self.path.distance_at_parameter(self.path.closest_parameter(vehicle.position))

    def _recycle_finished(self) -> None:
        end = self.path.total_length() - _FINISH_MARGIN
        for vehicle in list(self.vehicles):
            if self._distance_along(vehicle) >= end:
                self.vehicles.remove(vehicle)
                self.completed_runs += 1
                if self.recycle:
                    self._respawn_queue.append(vehicle)
                log.debug("%s reached the end of the path", vehicle.agent_id)

        for vehicle in list(self._respawn_queue):
            controller = vehicle.controller
            offset = controller.target_lane_offset if controller else 0.0
            x, y, yaw = self._pose_on_path(0.0, offset)
            if not self._spawn_is_clear((x, y)):
                continue
            vehicle.teleport(x, y, yaw)
            if controller is not None:
                controller.lane.current_offset = offset
            self._respawn_queue.remove(vehicle)
            self.vehicles.append(vehicle)

    # ── queries ───────────────────────────────────────────────────────────────

    def is_finished(self) -> bool:
        return not self.vehicles and not self._respawn_queue

    def snapshots(self) -> List[PeerSnapshot]:
        return [c.snapshot() for c in self.controllers()]

    def vehicle_dicts(self) -> List[Dict[str, Any]]:
        return [v.as_dict() for v in self.vehicles]

    def light_dicts(self) -> List[Dict[str, Any]]:
        return [light.as_dict() for light in self.lights]

    def info(self) -> Dict[str, Any]:
        """World metadata for the viewer."""
        return {
            "time": round(self.now, 2),
            "path": self.path.sample(500.0) if isinstance(self.path, PolylinePath) else [],
            "lane_offsets": list(self.lane_offsets),
            "obstacles": [o.as_dict() for o in self.obstacles],
            "completed_runs": self.completed_runs,
            "lane_changes": self.lane_changes,
            "bus_metrics": self.bus.metrics.report(),
        }


def build_demo_world(
    vehicle_count: int = 6,
    seed: Optional[int] = None,
    drop_rate: float = 0.0,
    policy: Optional[DrivingPolicy] = None,
    timing: Optional[SignalTiming] = None,
) -> World:
    """Straight two-lane road with one traffic light and one stalled car."""
    world = World(
        num_vehicles=vehicle_count,
        seed=seed,
        policy=policy,
        timing=timing,
        drop_rate=drop_rate,
    )
    log.info(
        "demo world: %d vehicles, %d lights, %d obstacles, drop_rate=%.2f",
        len(world.vehicles), len(world.lights), len(world.obstacles), drop_rate,
    )
    return world
