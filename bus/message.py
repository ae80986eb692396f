"""
V2XMessage: one packet carried by the V2XBus.
"""

from dataclasses import dataclass, field


@dataclass
class V2XMessage:
    """
    A single message on the V2XBus.

    Attributes:
        id (str): Unique message identifier.
        topic (str): Topic name, e.g. 'v2v.state' for per-tick vehicle snapshots.
        sender (str): Agent id of the publisher, e.g. 'CAR_000'.
        payload (dict): Message contents; vehicle snapshots carry
            'agent_id', 'speed', 'x' and 'y'.
        ts (float): Bus clock reading when the message was published.
        require_ack (bool): If True, the publisher expects an ACK.
    """
    id: str
    topic: str
    sender: str
    payload: dict = field(default_factory=dict)
    ts: float = 0.0
    require_ack: bool = False
