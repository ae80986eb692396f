#!/usr/bin/env python3
"""
Tests for target-speed selection.
"""

from __future__ import annotations

import unittest
from typing import Any

import numpy as np

from vehicle_ai.decision import decide_target_speed
from vehicle_ai.perception import CLEAR, PerceptionResult, TargetKind, classify_target
from vehicle_ai.traffic_light import SignalPhase

MAX_SPEED = 1000.0
SAFE_GAP = 500.0


class _Light:
    def __init__(self, phase: SignalPhase) -> None:
        self.phase = phase

    def get_phase(self) -> SignalPhase:
        return self.phase


class _Peer:
    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id


def _ahead(entity: Any, distance: float = 300.0, ahead: bool = True) -> PerceptionResult:
    return PerceptionResult(
        hit=True,
        point=np.array([distance, 0.0]),
        entity=entity,
        kind=classify_target(entity),
        alignment=1.0 if ahead else -1.0,
        ahead=ahead,
        distance=distance,
    )


def _decide(perception: PerceptionResult, *, current_speed: float = 600.0,
            is_panicking: bool = False, peer_speeds=None):
    return decide_target_speed(
        perception,
        current_speed=current_speed,
        max_speed=MAX_SPEED,
        safe_following_distance=SAFE_GAP,
        is_panicking=is_panicking,
        peer_speeds=peer_speeds,
    )


class ClearRoadTests(unittest.TestCase):
    def test_clear_road_is_free_flow(self) -> None:
        decision = _decide(CLEAR)
        self.assertEqual(decision.target_speed, MAX_SPEED)
        self.assertIs(decision.signal_phase, SignalPhase.GO)

    def test_hit_outside_cone_is_ignored(self) -> None:
        decision = _decide(_ahead(object(), ahead=False))
        self.assertEqual(decision.target_speed, MAX_SPEED)


class SignalTests(unittest.TestCase):
    def test_stop_and_caution_halt(self) -> None:
        for phase in (SignalPhase.STOP, SignalPhase.CAUTION):
            decision = _decide(_ahead(_Light(phase)))
            self.assertEqual(decision.target_speed, 0.0)
            self.assertIs(decision.signal_phase, phase)

    def test_go_is_free_flow(self) -> None:
        decision = _decide(_ahead(_Light(SignalPhase.GO)))
        self.assertEqual(decision.target_speed, MAX_SPEED)
        self.assertIs(decision.signal_phase, SignalPhase.GO)

    def test_panic_overrides_red(self) -> None:
        decision = _decide(_ahead(_Light(SignalPhase.STOP)), is_panicking=True)
        self.assertEqual(decision.target_speed, MAX_SPEED)
        self.assertEqual(decision.reason, "panic")


class PeerTests(unittest.TestCase):
    def test_matches_published_speed_inside_gap(self) -> None:
        decision = _decide(_ahead(_Peer("CAR_B"), 300.0), peer_speeds={"CAR_B": 320.0})
        self.assertEqual(decision.target_speed, 320.0)
        self.assertIsNone(decision.signal_phase)

    def test_leader_speed_is_not_capped(self) -> None:
        decision = _decide(_ahead(_Peer("CAR_B"), 300.0), peer_speeds={"CAR_B": 1500.0})
        self.assertEqual(decision.target_speed, 1500.0)

    def test_unknown_leader_speed_decelerates(self) -> None:
        decision = _decide(_ahead(_Peer("CAR_B"), 300.0), current_speed=600.0, peer_speeds={})
        self.assertAlmostEqual(decision.target_speed, 480.0)
        self.assertEqual(decision.reason, "follow_blind")

    def test_gap_at_or_beyond_safe_distance_is_free_flow(self) -> None:
        self.assertEqual(_decide(_ahead(_Peer("CAR_B"), SAFE_GAP)).target_speed, MAX_SPEED)
        self.assertEqual(_decide(_ahead(_Peer("CAR_B"), 900.0)).target_speed, MAX_SPEED)

    def test_panic_does_not_bypass_peers(self) -> None:
        decision = _decide(_ahead(_Peer("CAR_B"), 300.0), is_panicking=True,
                           peer_speeds={"CAR_B": 0.0})
        self.assertEqual(decision.target_speed, 0.0)


class ObstacleTests(unittest.TestCase):
    def test_obstacle_stops(self) -> None:
        decision = _decide(_ahead(object()))
        self.assertEqual(decision.target_speed, 0.0)
        self.assertEqual(decision.reason, "obstacle")
        self.assertIsNone(decision.signal_phase)

    def test_panic_still_stops_for_obstacle(self) -> None:
        self.assertEqual(_decide(_ahead(object()), is_panicking=True).target_speed, 0.0)

    def test_kind_matches_entity(self) -> None:
        self.assertIs(_ahead(object()).kind, TargetKind.OBSTACLE)


if __name__ == "__main__":
    unittest.main()
