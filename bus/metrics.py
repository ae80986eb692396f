"""
BusMetrics: counters for V2XBus traffic.
"""


class BusMetrics:
    """
    Counts published, dropped and acknowledged messages.

    Attributes:
        published (int): Messages delivered to a topic queue.
        dropped (int): Messages lost to simulated packet drop.
        acked (int): Messages acknowledged by a receiver.
        ack_timeouts (int): Messages whose ACK never arrived in time.
    """

    def __init__(self):
        self.reset()

    def reset(self):
        """Zero every counter."""
        self.published = 0
        self.dropped = 0
        self.acked = 0
        self.ack_timeouts = 0

    @property
    def drop_ratio(self) -> float:
        """Fraction of publish attempts that were dropped."""
        attempts = self.published + self.dropped
        return self.dropped / attempts if attempts else 0.0

    def report(self) -> dict:
        """
        Return a snapshot of the counters.

        Returns:
            dict: 'published', 'dropped', 'acked', 'ack_timeouts' and 'drop_ratio'.
        """
        return {
            "published": self.published,
            "dropped": self.dropped,
            "acked": self.acked,
            "ack_timeouts": self.ack_timeouts,
            "drop_ratio": round(self.drop_ratio, 3),
        }
