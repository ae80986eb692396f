#!/usr/bin/env python3
"""
vehicle_ai/lane_change.py
=========================
Lateral lane-offset state and the side-clearance probe.

The offset moves toward its target at a fixed rate and snaps onto the
target on the step that reaches it, so the behaviour mode returns to
``NORMAL`` on exact equality.  :func:`is_side_clear` is advisory: callers
check it before setting a new target, :class:`LaneState` never does.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from vehicle_ai.perception import SpatialQuery
from vehicle_ai.physics import VectorLike, as_vec, safe_normal

# A step that falls short of the target by less than this still lands on it.
_SNAP_EPSILON = 1e-9


class BehaviorMode(Enum):
    NORMAL = "NORMAL"
    WAITING = "WAITING"
    LANE_CHANGING = "LANE_CHANGING"


@dataclass
class LaneState:
    """Current and target lateral offset (positive = right of the path)."""

    current_offset: float = 0.0
    target_offset: float = 0.0
    change_speed: float = 200.0
    mode: BehaviorMode = BehaviorMode.NORMAL

    def set_target(self, offset: float) -> None:
        self.target_offset = float(offset)
        if self.current_offset != self.target_offset:
            self.mode = BehaviorMode.LANE_CHANGING

    def advance(self, dt: float) -> Tuple[float, BehaviorMode]:
        """Move the offset one tick toward the target."""
        if self.current_offset == self.target_offset:
            self.mode = BehaviorMode.NORMAL
            return self.current_offset, self.mode

        gap = self.target_offset - self.current_offset
        step = self.change_speed * max(0.0, dt)
        if step >= abs(gap) - _SNAP_EPSILON * max(1.0, abs(self.target_offset)):
            self.current_offset = self.target_offset
        else:
            self.current_offset += math.copysign(step, gap)

        if self.current_offset == self.target_offset:
            self.mode = BehaviorMode.NORMAL
        else:
            self.mode = BehaviorMode.LANE_CHANGING
        return self.current_offset, self.mode


def is_side_clear(
    query: Optional[SpatialQuery],
    position: Optional[VectorLike],
    forward: VectorLike,
    right: VectorLike,
    check_right: bool,
    probe_distance: float = 300.0,
    forward_offset: float = 100.0,
    ignore: Any = None,
) -> bool:
    """True iff a lateral ray from just ahead of *position* hits nothing.

    Without query context or a position the side is reported blocked.
    """
    if query is None or position is None:
        return False
    side = safe_normal(right)
    if not check_right:
        side = -side
    start = as_vec(position) + safe_normal(forward) * forward_offset
    end = start + side * probe_distance
    return query.cast_ray(start, end, ignore) is None
