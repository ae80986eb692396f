#!/usr/bin/env python3
"""
Scenario tests for the world tick: ray casts, following, signals, panic
and lane-change requests.
"""

from __future__ import annotations

import unittest

import numpy as np

from vehicle_ai.physics import distance
from vehicle_ai.traffic_light import SignalPhase
from vehicle_ai.traffic_policy import SignalTiming
from vehicle_ai.world import V2V_STATE_TOPIC, World, build_demo_world

DT = 0.05
_LONG_PHASES = SignalTiming(go_s=100.0, caution_s=100.0, stop_s=100.0)


def _empty_world(**kwargs) -> World:
    kwargs.setdefault("lane_offsets", (0.0, 350.0))
    return World(num_vehicles=0, populate=False, recycle=False, seed=1, **kwargs)


def _run(world: World, seconds: float) -> None:
    for _ in range(int(round(seconds / DT))):
        world.tick(DT)


class RayCastTests(unittest.TestCase):
    def setUp(self) -> None:
        self.world = _empty_world()
        self.world.add_vehicle("a", 1000.0)
        self.world.add_vehicle("b", 1400.0)
        self.world.add_obstacle("WALL", 2000.0)
        self.a = self.world.vehicle("A")
        self.b = self.world.vehicle("B")

    def test_nearest_hit_and_caster_ignored(self) -> None:
        hit = self.world.cast_ray(self.a.position, (3000.0, 0.0), ignore=self.a)
        self.assertIsNotNone(hit)
        self.assertIs(hit.entity, self.b)
        np.testing.assert_allclose(hit.point, [1280.0, 0.0])

    def test_origin_inside_collider_skips_it(self) -> None:
        hit = self.world.cast_ray(self.b.position, (3000.0, 0.0))
        self.assertEqual(hit.entity.obstacle_id, "WALL")

    def test_miss_and_short_ray(self) -> None:
        self.assertIsNone(self.world.cast_ray((0.0, 1000.0), (5000.0, 1000.0)))
        self.assertIsNone(self.world.cast_ray((0.0, 0.0), (0.0, 0.0)))
        self.assertIsNone(self.world.cast_ray((0.0, 0.0), (500.0, 0.0)))


class TickTests(unittest.TestCase):
    def test_spawn_is_aligned_with_path(self) -> None:
        world = _empty_world()
        world.add_vehicle("a", 0.0, 350.0)
        vehicle = world.vehicle("A")
        self.assertAlmostEqual(vehicle.yaw_deg, 0.0)
        self.assertAlmostEqual(vehicle.y, -350.0)

    def test_peer_speeds_come_from_the_bus(self) -> None:
        world = _empty_world()
        world.add_vehicle("a", 0.0)
        world.add_vehicle("b", 3000.0)
        world.tick(DT)
        self.assertEqual(set(world.peer_speeds), {"A", "B"})
        world.tick(DT)
        self.assertAlmostEqual(world.peer_speeds["A"], 250.0)
        self.assertEqual(world.bus.metrics.published, 4)
        self.assertEqual(world.bus.poll(V2V_STATE_TOPIC), [])

    def test_dropped_packets_leave_speeds_unknown(self) -> None:
        world = _empty_world(drop_rate=1.0)
        world.add_vehicle("a", 0.0)
        world.tick(DT)
        self.assertEqual(world.peer_speeds, {})
        self.assertEqual(world.bus.metrics.dropped, 1)

    def test_follower_stops_behind_stopped_leader(self) -> None:
        world = _empty_world(lane_offsets=(0.0,))
        world.add_vehicle("a", 0.0)
        world.add_vehicle("b", 1000.0)
        wall = world.add_obstacle("WALL", 3000.0)
        _run(world, 20.0)

        a, b = world.vehicle("A"), world.vehicle("B")
        self.assertLess(a.controller.current_speed, 1.0)
        self.assertLess(b.controller.current_speed, 1.0)
        self.assertLess(a.x, b.x)
        self.assertGreater(distance(a.position, b.position), a.radius + b.radius)
        self.assertGreater(distance(b.position, wall.position), b.radius + wall.radius)
        self.assertEqual(b.controller.last_decision.reason, "obstacle")

    def test_red_light_holds_traffic(self) -> None:
        world = _empty_world(timing=_LONG_PHASES)
        world.add_traffic_light("TL", 3000.0, initial_phase=SignalPhase.STOP)
        world.add_vehicle("a", 0.0)
        _run(world, 10.0)
        vehicle = world.vehicle("A")
        self.assertLess(vehicle.x, 2700.0)
        self.assertLess(vehicle.controller.current_speed, 1.0)
        self.assertIs(vehicle.controller.last_signal_phase, SignalPhase.STOP)

        world.set_light_phase("TL", SignalPhase.GO)
        _run(world, 5.0)
        self.assertGreater(vehicle.x, 3300.0)

    def test_gunfire_suppresses_signal_compliance(self) -> None:
        world = _empty_world(timing=_LONG_PHASES)
        world.add_traffic_light("TL", 3000.0, initial_phase=SignalPhase.STOP)
        world.add_vehicle("a", 0.0)
        world.add_vehicle("far", 10000.0, 350.0)
        panicked = world.report_gunfire(0.0, 0.0, 2000.0)
        self.assertEqual(panicked, ["A"])

        _run(world, 6.0)
        vehicle = world.vehicle("A")
        self.assertTrue(vehicle.controller.is_panicking)
        self.assertGreater(vehicle.x, 3300.0)

        _run(world, 5.0)
        self.assertFalse(vehicle.controller.is_panicking)

    def test_recycles_vehicles_at_path_end(self) -> None:
        world = World(num_vehicles=0, populate=False, recycle=True, seed=1)
        world.add_vehicle("a", world.path.total_length() - 250.0)
        _run(world, 1.0)
        self.assertEqual(world.completed_runs, 1)
        self.assertLess(world.vehicle("A").x, 1000.0)


class CommandTests(unittest.TestCase):
    def test_lane_change_refused_when_side_blocked(self) -> None:
        world = _empty_world()
        world.add_vehicle("a", 1000.0, 0.0)
        world.add_vehicle("b", 1000.0, 350.0)
        self.assertFalse(world.request_lane_change("A", 350.0))
        self.assertEqual(world.vehicle("A").controller.target_lane_offset, 0.0)

    def test_lane_change_accepted_when_clear(self) -> None:
        world = _empty_world()
        world.add_vehicle("a", 1000.0, 0.0)
        self.assertTrue(world.request_lane_change("a", 350.0))
        controller = world.vehicle("A").controller
        self.assertEqual(controller.target_lane_offset, 350.0)
        _run(world, 3.0)
        self.assertEqual(controller.current_lane_offset, 350.0)
        self.assertEqual(world.lane_changes, 1)

    def test_shift_lane_stays_on_the_road(self) -> None:
        world = _empty_world()
        world.add_vehicle("a", 1000.0, 0.0)
        self.assertFalse(world.shift_lane("A", -1))
        self.assertTrue(world.shift_lane("A", 1))
        self.assertFalse(world.request_lane_change("NOPE", 350.0))

    def test_set_light_phase(self) -> None:
        world = _empty_world()
        world.add_traffic_light("TL", 2000.0)
        self.assertTrue(world.set_light_phase("TL", SignalPhase.CAUTION))
        self.assertIs(world.light("TL").get_phase(), SignalPhase.CAUTION)
        self.assertFalse(world.set_light_phase("MISSING", SignalPhase.STOP))


class DemoWorldTests(unittest.TestCase):
    def test_demo_world_runs(self) -> None:
        world = build_demo_world(vehicle_count=4, seed=3)
        self.assertEqual(len(world.vehicles), 4)
        self.assertEqual(len(world.lights), 1)
        self.assertEqual(len(world.obstacles), 1)
        _run(world, 10.0)
        for vehicle in world.vehicles:
            speed = vehicle.controller.current_speed
            self.assertGreaterEqual(speed, 0.0)
            self.assertLessEqual(speed, world.policy.max_speed + 1e-9)

    def test_reset_replays_the_scenario(self) -> None:
        world = build_demo_world(vehicle_count=3, seed=5)
        start = [(v.agent_id, v.x, v.y) for v in world.vehicles]
        _run(world, 2.0)
        world.reset()
        self.assertEqual(world.now, 0.0)
        self.assertEqual([(v.agent_id, v.x, v.y) for v in world.vehicles], start)


if __name__ == "__main__":
    unittest.main()
