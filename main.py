#!/usr/bin/env python3
"""
main.py
=======
Entry point: builds the demo road world and either opens the pygame
viewer or runs headless for a fixed simulated duration.

Environment overrides
---------------------
``VEHICLE_AI_VEHICLES``    vehicle count
``VEHICLE_AI_TICK_HZ``     simulation tick rate
``VEHICLE_AI_SEED``        random seed
``VEHICLE_AI_DROP_RATE``   V2X packet drop probability
``VEHICLE_AI_HEADLESS``    1 / true to skip the viewer
``VEHICLE_AI_DURATION_S``  simulated seconds for a headless run
``VEHICLE_AI_LOG_LEVEL``   DEBUG / INFO / WARNING
"""

import os
import logging
from typing import Any, Callable, Dict

import config
from logging_setup import setup_logging
from vehicle_ai.sim_bridge import SimBridge
from vehicle_ai.world import World, build_demo_world

log = logging.getLogger("main")

_TRUTHY = {"1", "true", "yes", "on"}


def _env(name: str, default: Any, cast: Callable[[str], Any]) -> Any:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        log.warning("ignoring %s=%r (expected %s)", name, raw, type(default).__name__)
        return default


def load_settings() -> Dict[str, Any]:
    """Config defaults merged with ``VEHICLE_AI_*`` environment overrides."""
    return {
        "vehicles": _env("VEHICLE_AI_VEHICLES", config.DEFAULT_VEHICLE_COUNT, int),
        "tick_hz": _env("VEHICLE_AI_TICK_HZ", config.DEFAULT_TICK_RATE_HZ, float),
        "seed": _env("VEHICLE_AI_SEED", config.DEFAULT_SEED, int),
        "drop_rate": _env("VEHICLE_AI_DROP_RATE", config.DEFAULT_DROP_RATE, float),
        "headless": _env("VEHICLE_AI_HEADLESS", config.DEFAULT_HEADLESS,
                         lambda s: s.lower() in _TRUTHY),
        "duration_s": _env("VEHICLE_AI_DURATION_S", config.DEFAULT_DURATION_S, float),
        "log_level": _env("VEHICLE_AI_LOG_LEVEL", config.DEFAULT_LOG_LEVEL, str.upper),
    }


def run_headless(world: World, tick_hz: float, duration_s: float) -> None:
    """Tick *world* as fast as possible for *duration_s* simulated seconds."""
    dt = 1.0 / tick_hz
    next_status = 0.0
    while world.now < duration_s and not world.is_finished():
        world.tick(dt)
        if world.now >= next_status:
            next_status += config.STATUS_EVERY_S
            for vehicle in world.vehicle_dicts():
                log.info(
                    "t=%6.2f %s speed=%7.1f target=%7.1f lane=%6.1f mode=%s reason=%s%s",
                    world.now, vehicle["id"], vehicle["speed"], vehicle["target_speed"],
                    vehicle["lane_offset"], vehicle["mode"], vehicle["reason"],
                    " PANIC" if vehicle["panicking"] else "",
                )
    log.info("headless run finished: %s", world.info()["bus_metrics"])


def main():
    settings = load_settings()
    setup_logging(getattr(logging, settings["log_level"], logging.INFO))
    log.info("Starting vehicle AI: %s", settings)

    world = build_demo_world(
        vehicle_count=settings["vehicles"],
        seed=settings["seed"],
        drop_rate=settings["drop_rate"],
    )

    if settings["headless"]:
        try:
            run_headless(world, settings["tick_hz"], settings["duration_s"])
        except KeyboardInterrupt:
            log.info("Shutting down...")
        return

    # pygame is only needed for the viewer.
    from viewer import run_pygame_view

    bridge = SimBridge(tick_rate_hz=settings["tick_hz"], world=world)
    bridge.start()
    try:
        run_pygame_view(
            bridge,
            width=config.WINDOW_WIDTH,
            height=config.WINDOW_HEIGHT,
            fps=config.TARGET_FPS,
            policy=world.policy,
        )
    except KeyboardInterrupt:
        log.info("Shutting down...")
    finally:
        bridge.stop()


if __name__ == "__main__":
    main()
