#!/usr/bin/env python3
"""
Tests for the restartable panic timer.
"""

from __future__ import annotations

import unittest

from vehicle_ai.panic import PanicState
from vehicle_ai.timers import TimerManager


class PanicStateTests(unittest.TestCase):
    def setUp(self) -> None:
        self.timers = TimerManager()
        self.panic = PanicState(self.timers, duration_s=10.0, owner="CAR_T")

    def test_calm_after_duration(self) -> None:
        self.assertFalse(self.panic.is_panicking)
        self.panic.trigger()
        self.assertTrue(self.panic.is_panicking)
        self.timers.advance(9.0)
        self.assertTrue(self.panic.is_panicking)
        self.timers.advance(1.0)
        self.assertFalse(self.panic.is_panicking)

    def test_last_trigger_wins(self) -> None:
        self.panic.trigger()
        self.timers.advance(6.0)
        self.panic.trigger()
        self.timers.advance(5.0)
        # 11 s after the first trigger, 5 s after the second.
        self.assertTrue(self.panic.is_panicking)
        self.timers.advance(5.0)
        self.assertFalse(self.panic.is_panicking)
        self.assertEqual(self.timers.pending_count(), 0)

    def test_remaining(self) -> None:
        self.panic.trigger()
        self.timers.advance(4.0)
        self.assertAlmostEqual(self.panic.remaining(), 6.0)
        self.timers.advance(6.0)
        self.assertEqual(self.panic.remaining(), 0.0)


if __name__ == "__main__":
    unittest.main()
