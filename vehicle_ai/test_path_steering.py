#!/usr/bin/env python3
"""
Tests for the polyline path oracle and look-ahead steering.
"""

from __future__ import annotations

import math
import unittest

import numpy as np

from vehicle_ai.path import PolylinePath, lane_centre
from vehicle_ai.physics import heading_vector, right_of
from vehicle_ai.steering import compute_steering, look_ahead_target


class PolylinePathTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = PolylinePath.straight((0.0, 0.0), (10000.0, 0.0))

    def test_queries_on_straight_path(self) -> None:
        self.assertEqual(self.path.total_length(), 10000.0)
        param = self.path.closest_parameter((2500.0, 300.0))
        self.assertAlmostEqual(param, 0.25)
        self.assertAlmostEqual(self.path.distance_at_parameter(param), 2500.0)
        np.testing.assert_allclose(self.path.point_at_distance(2500.0), [2500.0, 0.0])
        np.testing.assert_allclose(self.path.lateral_direction_at_distance(2500.0), [0.0, -1.0])

    def test_distances_are_clamped(self) -> None:
        np.testing.assert_allclose(self.path.point_at_distance(-50.0), [0.0, 0.0])
        np.testing.assert_allclose(self.path.point_at_distance(1e9), [10000.0, 0.0])

    def test_positive_offset_is_right_of_travel(self) -> None:
        np.testing.assert_allclose(lane_centre(self.path, 1000.0, 350.0), [1000.0, -350.0])

    def test_multi_segment_parameter(self) -> None:
        path = PolylinePath([(0.0, 0.0), (1000.0, 0.0), (1000.0, 1000.0)])
        self.assertEqual(path.total_length(), 2000.0)
        param = path.closest_parameter((1100.0, 500.0))
        self.assertAlmostEqual(param, 1.5)
        self.assertAlmostEqual(path.distance_at_parameter(param), 1500.0)
        # Turning left: right-hand normal points +x.
        np.testing.assert_allclose(path.lateral_direction_at_distance(1500.0), [1.0, 0.0])

    def test_duplicate_points_dropped(self) -> None:
        path = PolylinePath([(0.0, 0.0), (0.0, 0.0), (100.0, 0.0)])
        self.assertEqual(len(path.points), 2)

    def test_arc_length(self) -> None:
        arc = PolylinePath.arc(0.0, 0.0, 1000.0, 0.0, math.pi / 2, 64)
        self.assertAlmostEqual(arc.total_length(), 1000.0 * math.pi / 2, delta=2.0)


class SteeringTests(unittest.TestCase):
    def setUp(self) -> None:
        self.path = PolylinePath.straight((0.0, 0.0), (10000.0, 0.0))
        self.right = right_of(heading_vector(0.0))

    def test_on_lane_centre_goes_straight(self) -> None:
        steer = compute_steering(self.path, (1000.0, 0.0), self.right, 0.0, 500.0)
        self.assertAlmostEqual(steer, 0.0)

    def test_left_of_path_steers_right(self) -> None:
        steer = compute_steering(self.path, (1000.0, 200.0), self.right, 0.0, 500.0)
        self.assertGreater(steer, 0.0)
        self.assertAlmostEqual(steer, 200.0 / math.hypot(500.0, 200.0))

    def test_positive_lane_offset_steers_right(self) -> None:
        steer = compute_steering(self.path, (1000.0, 0.0), self.right, 350.0, 500.0)
        self.assertGreater(steer, 0.0)

    def test_negative_lane_offset_steers_left(self) -> None:
        steer = compute_steering(self.path, (1000.0, 0.0), self.right, -350.0, 500.0)
        self.assertLess(steer, 0.0)

    def test_output_is_clamped(self) -> None:
        north_right = right_of(heading_vector(90.0))
        steer = compute_steering(self.path, (0.0, 0.0), north_right, 0.0, 500.0)
        self.assertLessEqual(steer, 1.0)
        self.assertGreaterEqual(steer, -1.0)
        self.assertAlmostEqual(steer, 1.0)

    def test_missing_context_gives_zero(self) -> None:
        self.assertEqual(compute_steering(None, (0.0, 0.0), self.right, 0.0, 500.0), 0.0)
        self.assertEqual(compute_steering(self.path, None, self.right, 0.0, 500.0), 0.0)
        empty = PolylinePath([(5.0, 5.0)])
        self.assertEqual(compute_steering(empty, (0.0, 0.0), self.right, 0.0, 500.0), 0.0)

    def test_look_ahead_stops_at_path_end(self) -> None:
        target = look_ahead_target(self.path, (9900.0, 0.0), 0.0, 500.0)
        np.testing.assert_allclose(target, [10000.0, 0.0])


if __name__ == "__main__":
    unittest.main()
