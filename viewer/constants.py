#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from typing import Dict, Sequence, Tuple

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (15, 15, 15)
    GRASS_COLOR: ColorRGB = (20, 28, 20)
    ROAD_COLOR: ColorRGB = (36, 36, 36)
    LANE_DASH_COLOR: ColorRGB = (90, 90, 90)
    LANE_EDGE_COLOR: ColorRGB = (60, 60, 60)
    HUD_BG_COLOR: ColorRGB = (22, 22, 22)
    HUD_BORDER_COLOR: ColorRGB = (42, 42, 42)
    OBSTACLE_COLOR: ColorRGB = (120, 110, 100)
    PANIC_COLOR: ColorRGB = (255, 60, 60)
    LANE_CHANGE_COLOR: ColorRGB = (255, 136, 0)
    SELECT_COLOR: ColorRGB = (255, 255, 255)
    RAY_ALPHA = 70

    PHASE_COLORS: Dict[str, ColorRGB] = {
        "GO": (0, 255, 127),
        "CAUTION": (255, 200, 40),
        "STOP": (255, 60, 60),
    }

    REASON_COLORS: Dict[str, ColorRGB] = {
        "clear": (0, 255, 127),
        "panic": (255, 60, 60),
        "signal": (255, 200, 40),
        "gap": (120, 180, 255),
        "follow": (120, 180, 255),
        "follow_blind": (180, 120, 255),
        "obstacle": (255, 136, 0),
    }

    LEGEND_ITEMS: Sequence[Tuple[str, ColorRGB]] = (
        ("PANIC", (255, 60, 60)),
        ("LANE CHANGE", (255, 136, 0)),
        ("SELECTED", (255, 255, 255)),
    )

    KEY_HELP: Sequence[str] = (
        "SPACE pause   R reset   TAB select",
        "Q / E lane left / right   G gunfire",
        "1 STOP   2 CAUTION   3 GO",
    )

    DEFAULT_ZOOM = 0.08
    MIN_ZOOM = 0.02
    MAX_ZOOM = 0.4
    GUNFIRE_RADIUS = 2500.0
    DASH_SPACING = 400.0
    HUD_BLINK_MS = 500
