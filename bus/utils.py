"""
Helpers for V2XBus:
    - message ID generation
    - latency simulation
    - packet-drop decision
"""

import uuid
import time
import random
import logging
from typing import Optional

log = logging.getLogger(__name__)


# ---------- ID Helpers ----------
def new_msg_id() -> str:
    """
    Generate a globally unique message ID.

    Returns:
        str: UUID4 string.
    """
    return str(uuid.uuid4())


# ---------- Latency / Timing ----------
def simulate_latency(ms: int):
    """
    Block for *ms* milliseconds; no-op when *ms* <= 0.

    Args:
        ms (int): Latency in milliseconds.
    """
    if ms > 0:
        time.sleep(ms / 1000.0)


# ---------- Fault Injection ----------
def maybe_drop(drop_rate: float, rng: Optional[random.Random] = None) -> bool:
    """
    Decide whether a packet is lost.

    Args:
        drop_rate (float): Probability (0.0–1.0) that the packet is dropped.
        rng (random.Random, optional): Source of randomness; the module-level
            generator when omitted.

    Returns:
        bool: True if the packet should be dropped.
    """
    if drop_rate <= 0.0:
        return False
    if drop_rate >= 1.0:
        return True
    draw = rng.random() if rng is not None else random.random()
    return draw < drop_rate
