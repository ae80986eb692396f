#!/usr/bin/env python3
"""
vehicle_ai/panic.py
===================
Timed panic override: ``CALM → PANICKING`` on every trigger,
``PANICKING → CALM`` only when the latest one-shot timer expires.
"""

from __future__ import annotations

import logging
from typing import Optional

from vehicle_ai.timers import TimerHandle, TimerManager

log = logging.getLogger("panic")

PANIC_DURATION_S: float = 10.0


class PanicState:
    """Panic flag with a restartable expiry timer.

    Re-triggering cancels the pending expiry and schedules a fresh one, so
    calm returns ``duration_s`` after the most recent trigger.
    """

    def __init__(self, timers: TimerManager, duration_s: float = PANIC_DURATION_S,
                 owner: str = "") -> None:
        self._timers = timers
        self.duration_s = duration_s
        self.owner = owner
        self.is_panicking = False
        self._handle: Optional[TimerHandle] = None

    def trigger(self) -> None:
        self.is_panicking = True
        self._timers.clear_timer(self._handle)
        self._handle = self._timers.set_timer(self.duration_s, self._calm)
        log.info("%s panicking until t=%.2f", self.owner or "vehicle", self._handle.deadline)

    def remaining(self) -> float:
        return self._timers.remaining(self._handle)

    def _calm(self) -> None:
        self.is_panicking = False
        self._handle = None
        log.info("%s calmed down", self.owner or "vehicle")
