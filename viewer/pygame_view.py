#!/usr/bin/env python3
"""
Main view class — combines all viewer mixins into one runnable Pygame window.

Module layout
─────────────
    viewer/
    ├── types.py           – ColorRGB, Camera
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – alpha drawing, text, state colours
    ├── draw_world.py      – WorldRenderer mixin (road, lights, obstacles, vehicles)
    ├── hud.py             – HudRenderer mixin  (HUD, legend, key help, pause)
    └── pygame_view.py     – PygameRoadView (this file – main loop)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pygame

from vehicle_ai.traffic_light import SignalPhase
from vehicle_ai.traffic_policy import DrivingPolicy

from .constants import ViewConstants
from .draw_world import WorldRenderer
from .hud import HudRenderer
from .types import Camera

log = logging.getLogger("viewer")

_PHASE_KEYS: Dict[int, SignalPhase] = {
    pygame.K_1: SignalPhase.STOP,
    pygame.K_2: SignalPhase.CAUTION,
    pygame.K_3: SignalPhase.GO,
}


class PygameRoadView(
    ViewConstants,
    WorldRenderer,
    HudRenderer,
):
    """Top-down road visualiser polling a :class:`~vehicle_ai.sim_bridge.SimBridge`.

    The camera follows the selected vehicle; commands are forwarded to
    the bridge, which applies them under its tick lock.
    """

    def __init__(self, bridge: Any, width: int = 1000, height: int = 700, fps: int = 60,
                 policy: Optional[DrivingPolicy] = None):
        self.bridge = bridge
        self.width = width
        self.height = height
        self.fps = fps
        self.detection_distance = (policy or DrivingPolicy()).detection_distance

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None
        self.font_tiny: Optional[pygame.font.Font] = None
        self.font_title: Optional[pygame.font.Font] = None

        self.camera = Camera(width, height, zoom=self.DEFAULT_ZOOM)
        self.time_seconds = 0.0
        self.paused = False
        self.show_legend = True
        self.selected_id: Optional[str] = None

        self._gunfire_at: Optional[Tuple[float, float]] = None
        self._gunfire_until = 0.0

    # ------------------------------------------------------------------ #
    #  Setup / resize                                                      #
    # ------------------------------------------------------------------ #
    @staticmethod
    def _load_font(size: int, bold: bool = False) -> pygame.font.Font:
        return pygame.font.SysFont("consolas,dejavusansmono,monospace", size, bold=bold)

    def _handle_resize(self, new_w: int, new_h: int) -> None:
        self.width = max(400, new_w)
        self.height = max(300, new_h)
        self.camera.screen_w = self.width
        self.camera.screen_h = self.height
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )

    # ------------------------------------------------------------------ #
    #  Selection                                                           #
    # ------------------------------------------------------------------ #
    def _selected(self, vehicles: List[Mapping[str, Any]]) -> Optional[Mapping[str, Any]]:
        if not vehicles:
            return None
        for vehicle in vehicles:
            if vehicle.get("id") == self.selected_id:
                return vehicle
        self.selected_id = vehicles[0].get("id")
        return vehicles[0]

    def _select_next(self, vehicles: List[Mapping[str, Any]]) -> None:
        ids = [v.get("id") for v in vehicles]
        if not ids:
            return
        try:
            idx = (ids.index(self.selected_id) + 1) % len(ids)
        except ValueError:
            idx = 0
        self.selected_id = ids[idx]

    # ------------------------------------------------------------------ #
    #  Commands                                                            #
    # ------------------------------------------------------------------ #
    def _handle_key(self, key: int, vehicles: List[Mapping[str, Any]],
                    lights: List[Mapping[str, Any]]) -> None:
        if key == pygame.K_SPACE:
            self.paused = not self.paused
            self.bridge.set_paused(self.paused)
        elif key == pygame.K_r:
            self.paused = False
            self.selected_id = None
            self.bridge.reset()
            self.bridge.set_paused(False)
        elif key == pygame.K_TAB:
            self._select_next(vehicles)
        elif key in (pygame.K_q, pygame.K_e) and self.selected_id:
            step = -1 if key == pygame.K_q else 1
            accepted = self.bridge.shift_lane(self.selected_id, step)
            log.info("lane shift %+d for %s: %s", step, self.selected_id,
                     "accepted" if accepted else "refused")
        elif key == pygame.K_g:
            at = (self.camera.world_x, self.camera.world_y)
            self.bridge.trigger_gunfire(at[0], at[1], self.GUNFIRE_RADIUS)
            self._gunfire_at = at
            self._gunfire_until = self.time_seconds + 1.0
        elif key in _PHASE_KEYS:
            for light in lights:
                self.bridge.set_light_phase(light["id"], _PHASE_KEYS[key])
        elif key in (pygame.K_EQUALS, pygame.K_PLUS):
            self.camera.zoom = min(self.MAX_ZOOM, self.camera.zoom * 1.2)
        elif key == pygame.K_MINUS:
            self.camera.zoom = max(self.MIN_ZOOM, self.camera.zoom / 1.2)
        elif key == pygame.K_l:
            self.show_legend = not self.show_legend

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption("VEHICLE AI")
        self.screen = pygame.display.set_mode(
            (self.width, self.height), pygame.RESIZABLE
        )
        self.clock = pygame.time.Clock()
        self.font_small = self._load_font(13, bold=False)
        self.font_tiny = self._load_font(11, bold=False)
        self.font_title = self._load_font(28, bold=True)

        running = True
        while running:
            delta_time = self.clock.tick(self.fps) / 1000.0
            self.time_seconds += delta_time

            vehicles = self.bridge.get_vehicles()
            lights = self.bridge.get_lights()
            info = self.bridge.get_world_info()

            # ---- events ------------------------------------------------- #
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self._handle_resize(event.w, event.h)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        self._handle_key(event.key, vehicles, lights)

            selected = self._selected(vehicles)
            if selected is not None:
                self.camera.follow(selected["x"], selected["y"])

            # ---- render ------------------------------------------------- #
            self.screen.fill(self.GRASS_COLOR)
            self.draw_road(self.screen, info)
            self.draw_obstacles(self.screen, info.get("obstacles", []))
            self.draw_lights(self.screen, lights)
            for vehicle in vehicles:
                self.draw_vehicle(self.screen, vehicle,
                                  selected=vehicle.get("id") == self.selected_id)
            strength = max(0.0, self._gunfire_until - self.time_seconds)
            self.draw_gunfire(self.screen, self._gunfire_at, strength)

            # HUD layers
            self.draw_hud(self.screen, vehicles, selected, info, self.time_seconds)
            self._draw_key_help(self.screen)
            if self.show_legend:
                self._draw_legend(self.screen)
            if self.paused:
                self._draw_pause_banner(self.screen)

            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_pygame_view(
    bridge: Any, width: int = 1000, height: int = 700, fps: int = 60,
    policy: Optional[DrivingPolicy] = None,
) -> None:
    view = PygameRoadView(bridge=bridge, width=width, height=height, fps=fps, policy=policy)
    view.run()


if __name__ == "__main__":
    raise SystemExit(
        "pygame_view.py needs a SimBridge. Run `python main.py` "
        "or call run_pygame_view(your_bridge)."
    )
