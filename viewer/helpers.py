"""
viewer/helpers.py
=================
Pure utility functions shared across viewer modules:
alpha-surface drawing, text rendering and vehicle colour selection.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple

import pygame

from viewer.types import ColorRGB


# ── Alpha drawing helpers ────────────────────────────────────────────────────

def draw_alpha_line(
    target: pygame.Surface,
    color: Tuple[int, ...],
    start: Tuple[float, float],
    end: Tuple[float, float],
    width: int = 1,
) -> None:
    """Draw a semi-transparent line (colour tuple with 4 channels)."""
    tmp = pygame.Surface(target.get_size(), pygame.SRCALPHA)
    pygame.draw.line(tmp, color, start, end, width)
    target.blit(tmp, (0, 0))


def draw_alpha_circle(
    target: pygame.Surface,
    color: Tuple[int, ...],
    centre: Tuple[int, int],
    radius: int,
) -> None:
    """Draw a semi-transparent circle."""
    if radius < 1:
        return
    size = radius * 2
    tmp = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(tmp, color, (radius, radius), radius)
    target.blit(tmp, (centre[0] - radius, centre[1] - radius))


# ── Text helper ──────────────────────────────────────────────────────────────

def render_text(
    surface: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: Tuple[int, int],
    color: Tuple[int, ...] = (230, 230, 235),
    anchor: str = "topleft",
) -> pygame.Rect:
    """Render text with flexible *anchor* ('topleft', 'center', 'midright' …)."""
    img = font.render(text, True, color)
    rect = img.get_rect(**{anchor: pos})
    surface.blit(img, rect)
    return rect


# ── Vehicle state colour ─────────────────────────────────────────────────────

def outline_color(vehicle: Mapping[str, Any], panic: ColorRGB,
                  lane_change: ColorRGB) -> Optional[ColorRGB]:
    """Outline for vehicles in a notable state, or None."""
    if vehicle.get("panicking"):
        return panic
    if vehicle.get("mode") == "LANE_CHANGING":
        return lane_change
    return None
