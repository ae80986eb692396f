"""
V2XBus: In-memory pub/sub for vehicle-to-everything messages.

Supports:
    - Topic-based messaging
    - Optional ACKs with timeout tracking
    - Seeded packet drop and latency simulation
    - Traffic counters (:class:`BusMetrics`)

Intended usage:
    - Every controller publishes a snapshot to 'v2v.state' once per tick
    - The world polls 'v2v.state' into a read-only peer-speed table
"""

import time
import random
import logging
from typing import Callable, Dict, List, Optional

from .message import V2XMessage
from .metrics import BusMetrics
from .utils import maybe_drop, new_msg_id, simulate_latency

log = logging.getLogger(__name__)


class V2XBus:
    """
    Transport layer for V2X messages.

    Attributes:
        drop_rate (float): Probability of dropping a published packet.
        latency_ms (int): Simulated latency per publish, in milliseconds.
        metrics (BusMetrics): Traffic counters.
    """

    def __init__(
        self,
        drop_rate: float = 0.0,
        latency_ms: int = 0,
        seed: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            drop_rate (float): Chance of dropping a message (0.0 to 1.0).
            latency_ms (int): Simulated latency for published messages.
            seed (int, optional): Seed for the drop generator.
            clock (callable): Timestamp source for messages and ACK timeouts.
        """
        if not 0.0 <= drop_rate <= 1.0:
            raise ValueError(f"drop_rate must be within [0, 1], got {drop_rate}")
        self._topics: Dict[str, List[V2XMessage]] = {}
        self._pending_ack: Dict[str, float] = {}
        self._rng = random.Random(seed)
        self._clock = clock
        self.drop_rate = drop_rate
        self.latency_ms = latency_ms
        self.metrics = BusMetrics()

    def publish(
        self,
        topic: str,
        sender: str,
        payload: dict,
        require_ack: bool = False,
    ) -> Optional[str]:
        """
        Publish a message to *topic*.

        Args:
            topic (str): Topic name, e.g. 'v2v.state'.
            sender (str): Agent id of the publisher.
            payload (dict): Message contents.
            require_ack (bool): Track the message until :meth:`ack` is called.

        Returns:
            Optional[str]: The message ID, or None if the packet was dropped.
        """
        if maybe_drop(self.drop_rate, self._rng):
            self.metrics.dropped += 1
            log.debug("packet_dropped topic=%s sender=%s", topic, sender)
            return None

        simulate_latency(self.latency_ms)
        msg = V2XMessage(
            id=new_msg_id(),
            topic=topic,
            sender=sender,
            payload=payload,
            ts=self._clock(),
            require_ack=require_ack,
        )
        self._topics.setdefault(topic, []).append(msg)
        self.metrics.published += 1

        if require_ack:
            self._pending_ack[msg.id] = msg.ts

        log.debug("publish topic=%s sender=%s id=%s", topic, sender, msg.id)
        return msg.id

    def poll(self, topic: str) -> List[V2XMessage]:
        """
        Retrieve and clear all messages queued on *topic*.

        Returns:
            List[V2XMessage]: Messages published since the last poll, oldest first.
        """
        msgs = self._topics.get(topic, [])
        self._topics[topic] = []
        return msgs

    def ack(self, msg_id: str) -> bool:
        """
        Acknowledge a message published with ``require_ack``.

        Returns:
            bool: True if the message was pending.
        """
        if self._pending_ack.pop(msg_id, None) is None:
            return False
        self.metrics.acked += 1
        log.debug("ack_received id=%s", msg_id)
        return True

    def pending_acks(self, timeout_s: float = 1.0) -> List[str]:
        """
        Retrieve and forget messages whose ACK is overdue.

        Args:
            timeout_s (float): Seconds before a pending ACK expires.

        Returns:
            List[str]: IDs that timed out.
        """
        now = self._clock()
        expired = [
            msg_id
            for msg_id, ts in self._pending_ack.items()
            if now - ts > timeout_s
        ]
        for msg_id in expired:
            log.warning("ack_timeout id=%s", msg_id)
            self._pending_ack.pop(msg_id, None)
        self.metrics.ack_timeouts += len(expired)
        return expired
