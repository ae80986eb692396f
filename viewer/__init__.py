#!/usr/bin/env python3

from .types import Camera, ColorRGB, ColorRGBA
from .constants import ViewConstants
from .draw_world import WorldRenderer
from .hud import HudRenderer
from .pygame_view import PygameRoadView, run_pygame_view

__all__ = [
    "Camera",
    "ColorRGB",
    "ColorRGBA",
    "ViewConstants",
    "WorldRenderer",
    "HudRenderer",
    "PygameRoadView",
    "run_pygame_view",
]
