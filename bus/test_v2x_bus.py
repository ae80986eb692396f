#!/usr/bin/env python3
"""
Tests for the in-memory V2X bus.
"""

from __future__ import annotations

import unittest

from bus import BusMetrics, V2XBus, maybe_drop


class _FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class V2XBusTests(unittest.TestCase):
    def test_publish_then_poll_clears_topic(self) -> None:
        bus = V2XBus()
        msg_id = bus.publish("v2v.state", "CAR_A", {"agent_id": "CAR_A", "speed": 12.0})
        self.assertIsNotNone(msg_id)
        msgs = bus.poll("v2v.state")
        self.assertEqual(len(msgs), 1)
        self.assertEqual(msgs[0].payload["speed"], 12.0)
        self.assertEqual(msgs[0].sender, "CAR_A")
        self.assertEqual(bus.poll("v2v.state"), [])
        self.assertEqual(bus.poll("never.used"), [])

    def test_full_drop_rate_loses_everything(self) -> None:
        bus = V2XBus(drop_rate=1.0)
        self.assertIsNone(bus.publish("v2v.state", "CAR_A", {}))
        self.assertEqual(bus.poll("v2v.state"), [])
        self.assertEqual(bus.metrics.report()["dropped"], 1)
        self.assertEqual(bus.metrics.drop_ratio, 1.0)

    def test_seeded_drops_are_reproducible(self) -> None:
        pattern = []
        for _ in range(2):
            bus = V2XBus(drop_rate=0.5, seed=11)
            pattern.append([bus.publish("t", "S", {}) is None for _ in range(50)])
        self.assertEqual(pattern[0], pattern[1])
        self.assertTrue(any(pattern[0]))
        self.assertFalse(all(pattern[0]))

    def test_ack_and_timeouts(self) -> None:
        clock = _FakeClock()
        bus = V2XBus(clock=clock)
        acked = bus.publish("t", "S", {}, require_ack=True)
        stale = bus.publish("t", "S", {}, require_ack=True)
        self.assertTrue(bus.ack(acked))
        self.assertFalse(bus.ack(acked))

        clock.now += 0.5
        self.assertEqual(bus.pending_acks(timeout_s=1.0), [])
        clock.now += 1.0
        self.assertEqual(bus.pending_acks(timeout_s=1.0), [stale])
        self.assertEqual(bus.metrics.acked, 1)
        self.assertEqual(bus.metrics.ack_timeouts, 1)

    def test_invalid_drop_rate(self) -> None:
        with self.assertRaises(ValueError):
            V2XBus(drop_rate=1.5)


class HelperTests(unittest.TestCase):
    def test_maybe_drop_bounds(self) -> None:
        self.assertFalse(maybe_drop(0.0))
        self.assertTrue(maybe_drop(1.0))

    def test_metrics_reset(self) -> None:
        metrics = BusMetrics()
        metrics.published = 3
        metrics.reset()
        self.assertEqual(metrics.report()["published"], 0)
        self.assertEqual(metrics.drop_ratio, 0.0)


if __name__ == "__main__":
    unittest.main()
