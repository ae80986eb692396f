"""
viewer/types.py
===============
Lightweight data containers used across every viewer module.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple

ColorRGB = Tuple[int, int, int]
ColorRGBA = Tuple[int, int, int, int]


@dataclass
class Camera:
    """Viewport mapping world coordinates (y up) to screen pixels (y down)."""
    screen_w: int
    screen_h: int
    world_x: float = 0.0
    world_y: float = 0.0
    zoom: float = 0.08

    def world_to_screen(self, wx: float, wy: float) -> Tuple[float, float]:
        cx = self.screen_w / 2
        cy = self.screen_h / 2
        sx = cx + (wx - self.world_x) * self.zoom
        sy = cy - (wy - self.world_y) * self.zoom
        return sx, sy

    def screen_to_world(self, sx: float, sy: float) -> Tuple[float, float]:
        cx = self.screen_w / 2
        cy = self.screen_h / 2
        wx = (sx - cx) / self.zoom + self.world_x
        wy = -((sy - cy) / self.zoom) + self.world_y
        return wx, wy

    def follow(self, wx: float, wy: float, smoothing: float = 0.15) -> None:
        """Ease the view centre toward *(wx, wy)*."""
        self.world_x += (wx - self.world_x) * smoothing
        self.world_y += (wy - self.world_y) * smoothing

    def scale(self, length: float) -> int:
        return max(1, int(round(length * self.zoom)))
