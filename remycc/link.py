"""Network links with bounded packet queues and propagation delays."""

from __future__ import annotations

import queue
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

QUEUE_CAPACITY = 1000


@dataclass
class Link:
    """A link of given bandwidth (bytes per second) and latency, with a bounded queue."""

    bandwidth: int
    latency: timedelta
    packet_queue: queue.Queue = field(
        default_factory=lambda: queue.Queue(maxsize=QUEUE_CAPACITY), repr=False, compare=False
    )

    def enqueue(self, packet: Any) -> bool:
        """Queue ``packet`` without blocking; return False when the queue is full."""
        try:
            self.packet_queue.put_nowait(packet)
        except queue.Full:
            return False
        return True


@dataclass
class Delay:
    """Propagation delay in the network."""

    delay: timedelta