#!/usr/bin/env python3
"""
vehicle_ai/path.py
==================
Reference-path oracle consumed by :mod:`vehicle_ai.steering`.

:class:`PathOracle` is the narrow query interface a controller needs
("point and lateral direction at distance").  :class:`PolylinePath`
implements it over a list of world-space waypoints; arcs are sampled
the same way intersection turn waypoints are.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Protocol, Tuple

import numpy as np

from vehicle_ai.physics import NEARLY_ZERO, VectorLike, as_vec, right_of


class PathOracle(Protocol):
    def total_length(self) -> float: ...

    def closest_parameter(self, world_point: VectorLike) -> float: ...

    def distance_at_parameter(self, param: float) -> float: ...

    def point_at_distance(self, distance: float) -> np.ndarray: ...

    def lateral_direction_at_distance(self, distance: float) -> np.ndarray: ...


def arc_points(cx: float, cy: float, r: float,
               t0: float, t1: float, n: int) -> List[Tuple[float, float]]:
    """Return *n* evenly-spaced points on a circular arc."""
    return [(cx + r * math.cos(t0 + (t1 - t0) * i / (n - 1)),
             cy + r * math.sin(t0 + (t1 - t0) * i / (n - 1)))
            for i in range(n)]


class PolylinePath:
    """Piecewise-linear path through *points*.

    The path parameter is ``segment_index + fraction`` so that
    ``closest_parameter`` behaves like a spline input key.  Sampling never
    extrapolates: distances are clamped to ``[0, total_length()]``.
    Consecutive duplicate points are dropped.
    """

    def __init__(self, points: Iterable[VectorLike]) -> None:
        cleaned: List[np.ndarray] = []
        for p in points:
            v = as_vec(p)
            if cleaned and float(np.hypot(*(v - cleaned[-1]))) <= NEARLY_ZERO:
                continue
            cleaned.append(v)
        self._points = np.array(cleaned, dtype=float).reshape(-1, 2)
        if len(self._points) >= 2:
            self._deltas = np.diff(self._points, axis=0)
            self._seg_len = np.hypot(self._deltas[:, 0], self._deltas[:, 1])
        else:
            self._deltas = np.zeros((0, 2))
            self._seg_len = np.zeros(0)
        self._cum = np.concatenate(([0.0], np.cumsum(self._seg_len)))

    # ── builders ──────────────────────────────────────────────────────────

    @classmethod
    def straight(cls, start: VectorLike, end: VectorLike) -> "PolylinePath":
        return cls([start, end])

    @classmethod
    def arc(cls, cx: float, cy: float, r: float,
            t0: float, t1: float, n: int = 16) -> "PolylinePath":
        return cls(arc_points(cx, cy, r, t0, t1, max(2, n)))

    # ── oracle ────────────────────────────────────────────────────────────

    @property
    def points(self) -> np.ndarray:
        return self._points.copy()

    def total_length(self) -> float:
        return float(self._cum[-1])

    def closest_parameter(self, world_point: VectorLike) -> float:
        if len(self._seg_len) == 0:
            return 0.0
        p = as_vec(world_point)
        starts = self._points[:-1]
        len2 = self._seg_len ** 2
        t = np.einsum("ij,ij->i", p - starts, self._deltas) / len2
        t = np.clip(t, 0.0, 1.0)
        proj = starts + self._deltas * t[:, None]
        d2 = np.sum((proj - p) ** 2, axis=1)
        i = int(np.argmin(d2))
        return float(i + t[i])

    def distance_at_parameter(self, param: float) -> float:
        n_seg = len(self._seg_len)
        if n_seg == 0:
            return 0.0
        param = min(max(0.0, float(param)), float(n_seg))
        i = min(int(math.floor(param)), n_seg - 1)
        return float(self._cum[i] + (param - i) * self._seg_len[i])

    def point_at_distance(self, distance: float) -> np.ndarray:
        if len(self._seg_len) == 0:
            return self._points[0].copy() if len(self._points) else np.zeros(2)
        i, frac = self._locate(distance)
        return self._points[i] + self._deltas[i] * frac

    def tangent_at_distance(self, distance: float) -> np.ndarray:
        if len(self._seg_len) == 0:
            return np.array([1.0, 0.0])
        i, _ = self._locate(distance)
        return self._deltas[i] / self._seg_len[i]

    def lateral_direction_at_distance(self, distance: float) -> np.ndarray:
        """Right-hand unit normal of the path at *distance*."""
        return right_of(self.tangent_at_distance(distance))

    def _locate(self, distance: float) -> Tuple[int, float]:
        d = min(max(0.0, float(distance)), self.total_length())
        i = int(np.searchsorted(self._cum, d, side="right")) - 1
        i = min(max(0, i), len(self._seg_len) - 1)
        return i, (d - self._cum[i]) / self._seg_len[i]

    def sample(self, spacing: float, offset: float = 0.0) -> List[Tuple[float, float]]:
        """Points every *spacing* units, shifted *offset* to the right (for drawing)."""
        length = self.total_length()
        count = max(2, int(length / max(spacing, 1.0)) + 1)
        out: List[Tuple[float, float]] = []
        for k in range(count):
            d = length * k / (count - 1)
            pt = self.point_at_distance(d) + self.lateral_direction_at_distance(d) * offset
            out.append((float(pt[0]), float(pt[1])))
        return out


def lane_centre(path: PathOracle, distance: float, offset: float) -> np.ndarray:
    """World point *offset* units right of the path at *distance*."""
    return path.point_at_distance(distance) + path.lateral_direction_at_distance(distance) * offset
