#!/usr/bin/env python3
"""HUD panel, legend, key help and pause banner (mixin)."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

import pygame


class HudRenderer:
    """Mixin that draws every overlay / HUD element."""

    # ------------------------------------------------------------------ #
    #  Selected-vehicle panel                                              #
    # ------------------------------------------------------------------ #

    def draw_hud(
        self,
        surface: pygame.Surface,
        vehicles: Sequence[Mapping[str, Any]],
        selected: Optional[Mapping[str, Any]],
        info: Mapping[str, Any],
        tick: float,
    ) -> None:
        if self.font_small is None or self.font_tiny is None:
            return

        panel_rect = pygame.Rect(16, self.height - 196, 300, 180)
        pygame.draw.rect(surface, self.HUD_BG_COLOR, panel_rect, border_radius=6)
        pygame.draw.rect(surface, self.HUD_BORDER_COLOR, panel_rect, width=1, border_radius=6)

        metrics = info.get("bus_metrics", {})
        header = (
            f"T {info.get('time', 0.0):>6.1f}s  VEH {len(vehicles)}  "
            f"RUNS {info.get('completed_runs', 0)}  DROP {metrics.get('dropped', 0)}"
        )
        surface.blit(self.font_tiny.render(header, True, (180, 180, 180)),
                     (panel_rect.x + 10, panel_rect.y + 6))

        if selected is None:
            surface.blit(self.font_small.render("NO VEHICLE", True, (120, 120, 120)),
                         (panel_rect.x + 10, panel_rect.y + 30))
            return

        blink_on = int((tick * 1000) // self.HUD_BLINK_MS) % 2 == 0
        color = selected.get("color", (255, 255, 255))
        surface.blit(self.font_small.render(f"ID {selected.get('id', '?')}", True, color),
                     (panel_rect.x + 10, panel_rect.y + 26))

        rows = [
            f"SPEED   {selected.get('speed', 0.0):>7.1f}  TARGET {selected.get('target_speed', 0.0):>7.1f}",
            f"STEER   {selected.get('steer', 0.0):>+7.3f}  BRAKE  {selected.get('braking_dist', 0.0):>7.1f}",
            f"LANE    {selected.get('lane_offset', 0.0):>7.1f}  ->     {selected.get('target_offset', 0.0):>7.1f}",
            f"MODE    {selected.get('mode', '?')}",
            f"SIGNAL  {selected.get('signal', '?'):<8} REASON {selected.get('reason', '?')}",
        ]
        y = panel_rect.y + 48
        for line in rows:
            surface.blit(self.font_tiny.render(line, True, (230, 230, 230)), (panel_rect.x + 10, y))
            y += 18

        if selected.get("panicking") and blink_on:
            warn = self.font_small.render(
                f"PANIC {selected.get('panic_left', 0.0):.1f}s", True, self.PANIC_COLOR
            )
            surface.blit(warn, (panel_rect.x + 10, y + 2))

    # ------------------------------------------------------------------ #
    #  Legend / key help                                                   #
    # ------------------------------------------------------------------ #

    def _draw_legend(self, surface: pygame.Surface) -> None:
        if self.font_tiny is None:
            return
        x = self.width - 120
        y = self.height - 16 - len(self.LEGEND_ITEMS) * 18 - 8
        box_w, box_h = 112, len(self.LEGEND_ITEMS) * 18 + 10
        pygame.draw.rect(
            surface, self.HUD_BG_COLOR, (x - 6, y - 4, box_w, box_h), border_radius=4
        )
        pygame.draw.rect(
            surface, self.HUD_BORDER_COLOR, (x - 6, y - 4, box_w, box_h), width=1, border_radius=4
        )
        for label, color in self.LEGEND_ITEMS:
            pygame.draw.circle(surface, color, (x + 4, y + 6), 4)
            text = self.font_tiny.render(label, True, (200, 200, 200))
            surface.blit(text, (x + 14, y))
            y += 18

    def _draw_key_help(self, surface: pygame.Surface) -> None:
        if self.font_tiny is None:
            return
        y = 12
        for line in self.KEY_HELP:
            text = self.font_tiny.render(line, True, (120, 120, 120))
            surface.blit(text, (16, y))
            y += 14

    # ------------------------------------------------------------------ #
    #  Pause banner                                                        #
    # ------------------------------------------------------------------ #

    def _draw_pause_banner(self, surface: pygame.Surface) -> None:
        overlay = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 100))
        surface.blit(overlay, (0, 0))
        if self.font_title:
            text = self.font_title.render("PAUSED", True, (220, 220, 220))
            surface.blit(text, text.get_rect(center=(self.width // 2, self.height // 2)))
