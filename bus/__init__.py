"""
bus — In-memory V2X messaging for vehicle-state snapshots
=========================================================

A lightweight pub/sub transport with optional packet loss and latency.
The world publishes one :class:`V2XMessage` per vehicle per tick on
``v2v.state`` and polls them back into a peer-speed table; a dropped
packet leaves that peer's speed unknown for the tick.

Modules
-------
message
    :class:`V2XMessage` dataclass.
v2x_bus
    :class:`V2XBus` publish / poll / ack transport.
metrics
    :class:`BusMetrics` counters.
utils
    ID generation, latency sleep, packet-drop decision.
"""

from .message import V2XMessage
from .v2x_bus import V2XBus
from .metrics import BusMetrics
from .utils   import new_msg_id, simulate_latency, maybe_drop

__all__ = [
    "V2XMessage",
    "V2XBus",
    "BusMetrics",
    "new_msg_id",
    "simulate_latency",
    "maybe_drop",
]
