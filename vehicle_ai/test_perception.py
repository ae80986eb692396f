#!/usr/bin/env python3
"""
Tests for the forward ray cast and the alignment-cone classification.
"""

from __future__ import annotations

import math
import unittest
from typing import Any, List, Optional, Tuple

import numpy as np

from vehicle_ai.perception import (
    CLEAR,
    HitResult,
    TargetKind,
    classify_target,
    is_ahead,
    sense,
)
from vehicle_ai.traffic_light import SignalPhase


class _Signal:
    def get_phase(self) -> SignalPhase:
        return SignalPhase.STOP


class _Peer:
    agent_id = "CAR_X"


class _Wall:
    pass


class _FixedHitQuery:
    """Returns one canned hit and records the rays it was asked to cast."""

    def __init__(self, point: Optional[Tuple[float, float]], entity: Any = None) -> None:
        self.point = point
        self.entity = entity
        self.rays: List[Tuple[np.ndarray, np.ndarray, Any]] = []

    def cast_ray(self, origin, end, ignore=None) -> Optional[HitResult]:
        self.rays.append((np.asarray(origin), np.asarray(end), ignore))
        if self.point is None:
            return None
        return HitResult(point=np.array(self.point), entity=self.entity)


class ClassifyTests(unittest.TestCase):
    def test_by_capability(self) -> None:
        self.assertIs(classify_target(_Signal()), TargetKind.SIGNAL)
        self.assertIs(classify_target(_Peer()), TargetKind.PEER)
        self.assertIs(classify_target(_Wall()), TargetKind.OBSTACLE)
        self.assertIs(classify_target(None), TargetKind.NONE)


class SenseTests(unittest.TestCase):
    def test_hit_dead_ahead(self) -> None:
        query = _FixedHitQuery((400.0, 0.0), _Peer())
        result = sense(query, (0.0, 0.0), (1.0, 0.0), 1000.0, 0.7)
        self.assertTrue(result.hit)
        self.assertTrue(result.ahead)
        self.assertTrue(result.obstructed)
        self.assertIs(result.kind, TargetKind.PEER)
        self.assertAlmostEqual(result.alignment, 1.0)
        self.assertAlmostEqual(result.distance, 400.0)

    def test_ray_uses_detection_distance_and_ignore(self) -> None:
        query = _FixedHitQuery(None)
        me = object()
        result = sense(query, (10.0, 0.0), (2.0, 0.0), 1000.0, 0.7, ignore=me)
        self.assertIs(result, CLEAR)
        origin, end, ignore = query.rays[0]
        np.testing.assert_allclose(origin, [10.0, 0.0])
        np.testing.assert_allclose(end, [1010.0, 0.0])
        self.assertIs(ignore, me)

    def test_hit_behind_is_not_ahead(self) -> None:
        query = _FixedHitQuery((-400.0, 0.0), _Wall())
        result = sense(query, (0.0, 0.0), (1.0, 0.0), 1000.0, 0.7)
        self.assertTrue(result.hit)
        self.assertFalse(result.ahead)
        self.assertFalse(result.obstructed)
        self.assertAlmostEqual(result.alignment, -1.0)

    def test_perpendicular_hit_is_not_ahead(self) -> None:
        query = _FixedHitQuery((0.0, 400.0), _Wall())
        result = sense(query, (0.0, 0.0), (1.0, 0.0), 1000.0, 0.7)
        self.assertAlmostEqual(result.alignment, 0.0)
        self.assertFalse(result.ahead)

    def test_cone_threshold(self) -> None:
        inside = (100.0 * 0.75, 100.0 * math.sqrt(1.0 - 0.75 ** 2))
        outside = (100.0 * 0.65, 100.0 * math.sqrt(1.0 - 0.65 ** 2))
        self.assertTrue(is_ahead((0.0, 0.0), (1.0, 0.0), inside, 0.7))
        self.assertFalse(is_ahead((0.0, 0.0), (1.0, 0.0), outside, 0.7))

    def test_missing_context_reads_clear(self) -> None:
        self.assertIs(sense(None, (0.0, 0.0), (1.0, 0.0), 1000.0, 0.7), CLEAR)
        query = _FixedHitQuery((400.0, 0.0), _Wall())
        self.assertIs(sense(query, None, (1.0, 0.0), 1000.0, 0.7), CLEAR)
        self.assertIs(sense(query, (0.0, 0.0), (0.0, 0.0), 1000.0, 0.7), CLEAR)
        self.assertEqual(query.rays, [])


if __name__ == "__main__":
    unittest.main()
