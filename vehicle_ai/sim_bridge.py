"""
vehicle_ai/sim_bridge.py
========================
Background-thread orchestrator around :class:`vehicle_ai.world.World`.
The viewer polls the bridge for the latest snapshot without blocking,
and sends commands (gunfire, lane changes, light overrides) through it.

One lock serialises world ticks, cache swaps and commands, so a timer
callback, a tick and a viewer command never run at the same time.

Public API consumed by :mod:`viewer.pygame_view`
------------------------------------------------
* ``get_vehicles()``                    → ``List[dict]``
* ``get_lights()``                      → ``List[dict]``
* ``get_world_info()``                  → ``dict``
* ``is_finished()``                     → ``bool``
* ``reset()``                           → ``None``
* ``set_paused(bool)``                  → ``None``
* ``trigger_gunfire(x, y, radius)``     → ``List[str]``
* ``request_lane_change(id, offset)``   → ``bool``
* ``shift_lane(id, step)``              → ``bool``
* ``set_light_phase(id, phase)``        → ``bool``
"""

from __future__ import annotations

import threading
import time
import logging
from typing import Any, Dict, List, Optional

from vehicle_ai.traffic_light import SignalPhase
from vehicle_ai.traffic_policy import DrivingPolicy, SignalTiming
from vehicle_ai.world import World

log = logging.getLogger("sim_bridge")


class SimBridge:
    """Simulation orchestrator running in a background thread.

    The thread calls :meth:`_tick` at ``tick_rate_hz``, advancing the
    world and caching vehicle / light dicts for the UI thread.

    Parameters
    ----------
    tick_rate_hz : float
        Simulation ticks per second.
    drop_rate : float
        V2X bus packet drop probability (0.0–1.0).
    vehicle_count : int
        Number of vehicles to spawn.
    random_seed : int or None
        Seed for reproducibility.
    policy : DrivingPolicy or None
        Controller constants.
    timing : SignalTiming or None
        Traffic light phase durations.
    world : World or None
        Pre-built world; the other world arguments are ignored when given.
    """

    def __init__(
        self,
        tick_rate_hz: float = 20.0,
        drop_rate: float = 0.0,
        vehicle_count: int = 6,
        random_seed: Optional[int] = None,
        policy: Optional[DrivingPolicy] = None,
        timing: Optional[SignalTiming] = None,
        world: Optional[World] = None,
    ) -> None:
        if tick_rate_hz <= 0:
            raise ValueError(f"tick_rate_hz must be > 0, got {tick_rate_hz}")
        self._tick_rate_hz = tick_rate_hz
        self._world = world or World(
            num_vehicles=vehicle_count,
            seed=random_seed,
            policy=policy,
            timing=timing,
            drop_rate=drop_rate,
        )

        self._lock = threading.Lock()

        # Cached state: written by the sim thread, read by the UI thread
        self._vehicles: List[Dict[str, Any]] = []
        self._lights: List[Dict[str, Any]] = []
        self._info: Dict[str, Any] = {}

        self._thread: Optional[threading.Thread] = None
        self._running = False
        self._paused = False
        self._refresh_cache()

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        """Spawn the background simulation thread."""
        if self._running:
            return
        self._running = True
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="SimBridge"
        )
        self._thread.start()
        log.info("SimBridge started at %.1f Hz", self._tick_rate_hz)

    def stop(self) -> None:
        """Signal the thread to stop and wait for it to join."""
        self._running = False
        if self._thread:
            self._thread.join(timeout=2.0)
        log.info("SimBridge stopped")

    @property
    def tick_rate_hz(self) -> float:
        return self._tick_rate_hz

    @property
    def paused(self) -> bool:
        return self._paused

    # ── Viewer API ────────────────────────────────────────────────────────────

    def get_vehicles(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._vehicles)

    def get_lights(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._lights)

    def get_world_info(self) -> Dict[str, Any]:
        """Return world metadata (path, lanes, obstacles, counters)."""
        with self._lock:
            return dict(self._info)

    def is_finished(self) -> bool:
        with self._lock:
            return self._world.is_finished()

    def reset(self) -> None:
        """Re-initialise the world so the scenario replays."""
        with self._lock:
            self._world.reset()
        self._refresh_cache()
        log.info("SimBridge reset")

    def set_paused(self, paused: bool) -> None:
        """Pause / unpause the simulation tick."""
        self._paused = paused
        log.info("SimBridge %s", "paused" if paused else "resumed")

    # ── Commands ──────────────────────────────────────────────────────────────

    def trigger_gunfire(self, x: float, y: float, radius: float) -> List[str]:
        with self._lock:
            panicked = self._world.report_gunfire(x, y, radius)
        self._refresh_cache()
        return panicked

    def request_lane_change(self, agent_id: str, offset: float) -> bool:
        with self._lock:
            accepted = self._world.request_lane_change(agent_id, offset)
        self._refresh_cache()
        return accepted

    def shift_lane(self, agent_id: str, step: int) -> bool:
        with self._lock:
            accepted = self._world.shift_lane(agent_id, step)
        self._refresh_cache()
        return accepted

    def set_light_phase(self, light_id: str, phase: SignalPhase) -> bool:
        with self._lock:
            changed = self._world.set_light_phase(light_id, phase)
        self._refresh_cache()
        return changed

    # ── Background loop ───────────────────────────────────────────────────────

    def _loop(self) -> None:
        dt = 1.0 / self._tick_rate_hz
        while self._running:
            t0 = time.perf_counter()
            if not self._paused:
                try:
                    self._tick(dt)
                except Exception:
                    log.exception("SimBridge tick error")
            time.sleep(max(0.0, dt - (time.perf_counter() - t0)))

    def _tick(self, dt: float) -> None:
        with self._lock:
            self._world.tick(dt)
            self._swap_cache()

    def _refresh_cache(self) -> None:
        with self._lock:
            self._swap_cache()

    def _swap_cache(self) -> None:
        # Caller holds self._lock.
        self._vehicles = self._world.vehicle_dicts()
        self._lights = self._world.light_dicts()
        self._info = self._world.info()
