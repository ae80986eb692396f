#!/usr/bin/env python3
"""
config.py
=========
Application-wide configuration constants.

Values can be overridden via environment variables (see :mod:`main`).
This module is a thin, import-safe leaf: it never imports from
other project packages.
"""

# ── Simulation defaults ──────────────────────────────────────────────────────
DEFAULT_VEHICLE_COUNT: int = 6
DEFAULT_TICK_RATE_HZ: float = 20.0
DEFAULT_SEED: int = 7

# ── Headless run ─────────────────────────────────────────────────────────────
DEFAULT_HEADLESS: bool = False
DEFAULT_DURATION_S: float = 60.0
STATUS_EVERY_S: float = 5.0

# ── V2X bus defaults ─────────────────────────────────────────────────────────
DEFAULT_DROP_RATE: float = 0.0

# ── UI defaults ──────────────────────────────────────────────────────────────
WINDOW_WIDTH: int = 1000
WINDOW_HEIGHT: int = 700
TARGET_FPS: int = 60

# ── Logging ──────────────────────────────────────────────────────────────────
DEFAULT_LOG_LEVEL: str = "INFO"
LOG_FILE: str = "vehicle_ai.log"
CONTROLLER_DEBUG_LOG_FILE: str = "controller_debug.log"
