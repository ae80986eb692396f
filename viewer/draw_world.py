#!/usr/bin/env python3
"""Road, lanes, traffic lights, obstacles and vehicles (mixin)."""

from __future__ import annotations

import math
from typing import Any, Mapping, Optional, Sequence

import pygame

from .helpers import draw_alpha_circle, draw_alpha_line, outline_color, render_text


class WorldRenderer:
    """Mixin drawing the world through ``self.camera``."""

    # ------------------------------------------------------------------ #
    #  Road                                                                #
    # ------------------------------------------------------------------ #

    def draw_road(self, surface: pygame.Surface, info: Mapping[str, Any]) -> None:
        points = info.get("path") or []
        offsets = info.get("lane_offsets") or [0.0]
        if len(points) < 2:
            return
        lane_w = 350.0 if len(offsets) < 2 else abs(offsets[1] - offsets[0])
        lo = min(offsets) - lane_w / 2.0
        hi = max(offsets) + lane_w / 2.0

        left = [self._offset_point(points, i, lo) for i in range(len(points))]
        right = [self._offset_point(points, i, hi) for i in range(len(points))]
        poly = [self.camera.world_to_screen(*p) for p in left + right[::-1]]
        pygame.draw.polygon(surface, self.ROAD_COLOR, poly)
        pygame.draw.lines(surface, self.LANE_EDGE_COLOR, False,
                          [self.camera.world_to_screen(*p) for p in left], 2)
        pygame.draw.lines(surface, self.LANE_EDGE_COLOR, False,
                          [self.camera.world_to_screen(*p) for p in right], 2)

        # Dashed separators halfway between neighbouring lanes.
        ordered = sorted(offsets)
        for a, b in zip(ordered, ordered[1:]):
            mid = (a + b) / 2.0
            dashed = [self.camera.world_to_screen(*self._offset_point(points, i, mid))
                      for i in range(len(points))]
            for i in range(0, len(dashed) - 1, 2):
                pygame.draw.line(surface, self.LANE_DASH_COLOR, dashed[i], dashed[i + 1], 1)

    @staticmethod
    def _offset_point(points: Sequence[Sequence[float]], i: int, offset: float):
        j0, j1 = (i, i + 1) if i + 1 < len(points) else (i - 1, i)
        dx = points[j1][0] - points[j0][0]
        dy = points[j1][1] - points[j0][1]
        norm = math.hypot(dx, dy) or 1.0
        # Right of the heading is (dy, -dx).
        return (points[i][0] + dy / norm * offset, points[i][1] - dx / norm * offset)

    # ------------------------------------------------------------------ #
    #  Traffic lights / obstacles                                          #
    # ------------------------------------------------------------------ #

    def draw_lights(self, surface: pygame.Surface, lights: Sequence[Mapping[str, Any]]) -> None:
        for light in lights:
            sx, sy = self.camera.world_to_screen(light["x"], light["y"])
            color = self.PHASE_COLORS.get(light.get("phase", ""), (200, 200, 200))
            r = self.camera.scale(light.get("radius", 300.0))
            draw_alpha_circle(surface, (*color, 60), (int(sx), int(sy)), r)
            pygame.draw.circle(surface, color, (int(sx), int(sy)), max(4, r // 3))
            if self.font_tiny is not None:
                render_text(
                    surface, self.font_tiny,
                    f"{light['id']} {light.get('phase', '?')} {light.get('timer', 0.0):.1f}s",
                    (int(sx), int(sy) - r - 4), color, anchor="midbottom",
                )

    def draw_obstacles(self, surface: pygame.Surface, obstacles: Sequence[Mapping[str, Any]]) -> None:
        for obstacle in obstacles:
            sx, sy = self.camera.world_to_screen(obstacle["x"], obstacle["y"])
            r = self.camera.scale(obstacle.get("radius", 150.0))
            pygame.draw.circle(surface, self.OBSTACLE_COLOR, (int(sx), int(sy)), r)
            pygame.draw.line(surface, (30, 30, 30), (sx - r, sy - r), (sx + r, sy + r), 2)

    # ------------------------------------------------------------------ #
    #  Vehicles                                                            #
    # ------------------------------------------------------------------ #

    def draw_vehicle(self, surface: pygame.Surface, vehicle: Mapping[str, Any],
                     selected: bool = False) -> None:
        sx, sy = self.camera.world_to_screen(vehicle["x"], vehicle["y"])
        r = self.camera.scale(vehicle.get("radius", 120.0))
        yaw = math.radians(vehicle.get("yaw_deg", 0.0))
        fx, fy = math.cos(yaw), -math.sin(yaw)  # screen y is flipped

        # Detection ray, tinted by the latest decision reason.
        ray_px = self.camera.scale(self.detection_distance)
        reason_color = self.REASON_COLORS.get(vehicle.get("reason", ""), (200, 200, 200))
        draw_alpha_line(surface, (*reason_color, self.RAY_ALPHA),
                        (sx, sy), (sx + fx * ray_px, sy + fy * ray_px), 2)

        pygame.draw.circle(surface, vehicle.get("color", (200, 200, 200)), (int(sx), int(sy)), r)
        pygame.draw.line(surface, (20, 20, 20), (sx, sy), (sx + fx * r, sy + fy * r), 2)

        ring = outline_color(vehicle, self.PANIC_COLOR, self.LANE_CHANGE_COLOR)
        if ring is not None:
            pygame.draw.circle(surface, ring, (int(sx), int(sy)), r + 3, 2)
        if selected:
            pygame.draw.circle(surface, self.SELECT_COLOR, (int(sx), int(sy)), r + 7, 1)

        if self.font_tiny is not None:
            render_text(surface, self.font_tiny, str(vehicle.get("id", "?")),
                        (int(sx), int(sy) - r - 3), (220, 220, 220), anchor="midbottom")

    def draw_gunfire(self, surface: pygame.Surface, at: Optional[Sequence[float]],
                     strength: float) -> None:
        """Fading ring where the last gunfire report was placed."""
        if at is None or strength <= 0.0:
            return
        sx, sy = self.camera.world_to_screen(at[0], at[1])
        r = self.camera.scale(self.GUNFIRE_RADIUS)
        draw_alpha_circle(surface, (*self.PANIC_COLOR, int(70 * strength)), (int(sx), int(sy)), r)
