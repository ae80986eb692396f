#!/usr/bin/env python3
"""
vehicle_ai/perception.py
========================
Forward sensing for a single vehicle.

:func:`sense` casts one ray along the vehicle's heading and runs the
dot-product cone test on the hit point:

* ``1.0``  → dead ahead
* ``0.0``  → perpendicular
* ``-1.0`` → behind

The hit entity is classified by what it exposes, not by its type, so any
object with a ``get_phase()`` reads as a signal and any object with an
``agent_id`` reads as a peer vehicle.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol

import numpy as np

from vehicle_ai.physics import VectorLike, as_vec, distance, safe_normal


class TargetKind(Enum):
    NONE = "NONE"
    SIGNAL = "SIGNAL"
    PEER = "PEER"
    OBSTACLE = "OBSTACLE"


@dataclass(frozen=True)
class HitResult:
    """Nearest blocking hit of a ray cast."""

    point: np.ndarray
    entity: Any


class SpatialQuery(Protocol):
    def cast_ray(
        self, origin: VectorLike, end: VectorLike, ignore: Any = None,
    ) -> Optional[HitResult]: ...


@dataclass(frozen=True)
class PerceptionResult:
    """Outcome of one forward query; lives for a single tick.

    Attributes
    ----------
    hit : bool
        Whether the ray hit anything.
    point : numpy.ndarray or None
        World-space hit point.
    entity : Any
        The object that was hit.
    kind : TargetKind
        Classification of *entity*.
    alignment : float
        Dot product of the heading with the direction to the hit.
    ahead : bool
        ``alignment > angular_threshold``.
    distance : float
        Euclidean distance from the sensor to the hit point.
    """

    hit: bool = False
    point: Optional[np.ndarray] = None
    entity: Any = None
    kind: TargetKind = TargetKind.NONE
    alignment: float = 0.0
    ahead: bool = False
    distance: float = float("inf")

    @property
    def is_clear(self) -> bool:
        return not self.hit

    @property
    def obstructed(self) -> bool:
        """True when the hit should influence the speed decision."""
        return self.hit and self.ahead


CLEAR = PerceptionResult()


def classify_target(entity: Any) -> TargetKind:
    """Classify a hit entity by capability inspection."""
    if entity is None:
        return TargetKind.NONE
    if callable(getattr(entity, "get_phase", None)):
        return TargetKind.SIGNAL
    if getattr(entity, "agent_id", None) is not None:
        return TargetKind.PEER
    return TargetKind.OBSTACLE


def is_ahead(position: VectorLike, forward: VectorLike,
             point: VectorLike, angular_threshold: float) -> bool:
    """Cone test: is *point* inside the forward cone of *position*?"""
    return alignment_to(position, forward, point) > angular_threshold


def alignment_to(position: VectorLike, forward: VectorLike, point: VectorLike) -> float:
    to_point = safe_normal(as_vec(point) - as_vec(position))
    return float(np.dot(safe_normal(forward), to_point))


def sense(
    query: Optional[SpatialQuery],
    position: Optional[VectorLike],
    forward: VectorLike,
    detection_distance: float,
    angular_threshold: float,
    ignore: Any = None,
) -> PerceptionResult:
    """Cast the forward ray and classify what it hits.

    Missing query context, a missing position or a degenerate heading all
    report a clear road.
    """
    if query is None or position is None:
        return CLEAR
    heading = safe_normal(forward)
    if not heading.any():
        return CLEAR

    origin = as_vec(position)
    end = origin + heading * detection_distance
    hit = query.cast_ray(origin, end, ignore)
    if hit is None:
        return CLEAR

    point = as_vec(hit.point)
    dot = alignment_to(origin, heading, point)
    return PerceptionResult(
        hit=True,
        point=point,
        entity=hit.entity,
        kind=classify_target(hit.entity),
        alignment=dot,
        ahead=dot > angular_threshold,
        distance=distance(origin, point),
    )
