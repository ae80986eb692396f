#!/usr/bin/env python3
"""
vehicle_ai/traffic_light.py
===========================
Traffic-signal collaborator.

A :class:`TrafficLight` cycles ``GO → CAUTION → STOP → GO`` on its own
one-shot timer, re-armed on every switch with the new phase's duration.
Controllers only read :meth:`TrafficLight.get_phase`; front ends may
force a phase with :meth:`TrafficLight.set_phase`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np

from vehicle_ai.timers import TimerHandle, TimerManager
from vehicle_ai.traffic_policy import SignalTiming

log = logging.getLogger("traffic_light")


class SignalPhase(Enum):
    STOP = "STOP"
    CAUTION = "CAUTION"
    GO = "GO"


_NEXT_PHASE: Dict[SignalPhase, SignalPhase] = {
    SignalPhase.GO: SignalPhase.CAUTION,
    SignalPhase.CAUTION: SignalPhase.STOP,
    SignalPhase.STOP: SignalPhase.GO,
}


class TrafficLight:
    """A timed three-phase signal with a circular collider.

    Parameters
    ----------
    light_id : str
        Unique identifier, e.g. ``"TL_0"``.
    x, y : float
        Collider centre in world units.
    timers : TimerManager
        Scheduler that drives the phase cycle.
    timing : SignalTiming or None
        Phase durations; defaults when *None*.
    initial_phase : SignalPhase
        Phase shown before the first switch.
    radius : float
        Collider radius seen by ray casts.
    """

    def __init__(
        self,
        light_id: str,
        x: float,
        y: float,
        timers: TimerManager,
        timing: Optional[SignalTiming] = None,
        initial_phase: SignalPhase = SignalPhase.GO,
        radius: float = 300.0,
    ) -> None:
        self.light_id = light_id
        self.x = float(x)
        self.y = float(y)
        self.radius = float(radius)
        self.timing = timing or SignalTiming()
        self._timers = timers
        self._phase = initial_phase
        self._handle: Optional[TimerHandle] = None

    @property
    def position(self) -> np.ndarray:
        return np.array([self.x, self.y])

    def start(self) -> None:
        """Arm the cycle timer for the current phase."""
        self._reschedule()

    def get_phase(self) -> SignalPhase:
        return self._phase

    def set_phase(self, phase: SignalPhase) -> None:
        """Force *phase*; the pending switch is cancelled and re-armed from it."""
        self._phase = SignalPhase(phase)
        self._reschedule()
        log.info("%s forced to %s", self.light_id, self._phase.value)

    def switch_light(self) -> None:
        """Advance to the next phase in the cycle and re-arm the timer."""
        self._phase = _NEXT_PHASE[self._phase]
        self._reschedule()
        log.debug("%s -> %s", self.light_id, self._phase.value)

    def duration_for(self, phase: SignalPhase) -> float:
        if phase is SignalPhase.GO:
            return self.timing.go_s
        if phase is SignalPhase.CAUTION:
            return self.timing.caution_s
        return self.timing.stop_s

    def time_to_switch(self) -> float:
        return self._timers.remaining(self._handle)

    def _reschedule(self) -> None:
        self._timers.clear_timer(self._handle)
        self._handle = self._timers.set_timer(
            self.duration_for(self._phase), self.switch_light
        )

    def as_dict(self) -> Dict[str, Any]:
        """Serialisable state for the viewer."""
        return {
            "id": self.light_id,
            "x": self.x,
            "y": self.y,
            "radius": self.radius,
            "phase": self._phase.value,
            "timer": round(self.time_to_switch(), 1),
        }
