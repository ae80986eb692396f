#!/usr/bin/env python3
"""
vehicle_ai/decision.py
======================
Target-speed selection from one tick's perception.

Priority order:

1. Clear road or hit outside the forward cone → free flow.
2. Traffic signal → stop on STOP / CAUTION, go on GO; ignored while panicking.
3. Peer vehicle inside the safe following distance → match its published
   speed, or decelerate when that speed is unknown.
4. Anything else ahead → stop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from vehicle_ai.perception import PerceptionResult, TargetKind
from vehicle_ai.traffic_light import SignalPhase


@dataclass(frozen=True)
class Decision:
    """Result of :func:`decide_target_speed`.

    ``signal_phase`` is ``None`` when the decision carries no signal
    information and the cached phase should stay as it is.
    """

    target_speed: float
    signal_phase: Optional[SignalPhase]
    reason: str


def decide_target_speed(
    perception: PerceptionResult,
    *,
    current_speed: float,
    max_speed: float,
    safe_following_distance: float,
    is_panicking: bool,
    peer_speeds: Optional[Mapping[str, float]] = None,
    follow_fallback_factor: float = 0.8,
) -> Decision:
    if not perception.obstructed:
        return Decision(max_speed, SignalPhase.GO, "clear")

    if perception.kind is TargetKind.SIGNAL:
        if is_panicking:
            return Decision(max_speed, SignalPhase.GO, "panic")
        phase = perception.entity.get_phase()
        if phase in (SignalPhase.STOP, SignalPhase.CAUTION):
            return Decision(0.0, phase, "signal")
        return Decision(max_speed, phase, "signal")

    if perception.kind is TargetKind.PEER:
        if perception.distance >= safe_following_distance:
            return Decision(max_speed, None, "gap")
        peer_id = getattr(perception.entity, "agent_id", None)
        if peer_speeds is not None and peer_id in peer_speeds:
            return Decision(max(0.0, float(peer_speeds[peer_id])), None, "follow")
        return Decision(max(0.0, current_speed * follow_fallback_factor), None, "follow_blind")

    return Decision(0.0, None, "obstacle")
