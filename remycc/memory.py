"""Congestion-signal memory kept by a sender and the ranges that partition it."""

from __future__ import annotations

import math
import struct
import sys
from dataclasses import dataclass, field
from typing import Iterable

ALPHA = 1.0 / 8.0
SLOW_ALPHA = 1.0 / 256.0

_U64 = 1 << 64
_NS_PER_SECOND = 1e9


def _ratio(numerator: float, denominator: float) -> float:
    """Divide with IEEE semantics: division by zero yields inf or nan."""
    if denominator == 0:
        if numerator == 0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _seconds(later_ns: int, earlier_ns: int) -> float:
    return (later_ns - earlier_ns) / _NS_PER_SECOND


def _float_bits(value: float) -> int:
    return struct.unpack("<Q", struct.pack("<d", value))[0]


@dataclass
class Packet:
    """A packet as seen by the memory: timestamps are nanoseconds since the epoch."""

    seq_no: int
    sender_id: int
    flow_id: int
    sent: int
    received: int | None = None


@dataclass
class Memory:
    """Smoothed congestion signals observed by a sender."""

    recv_rate: float = 0.0
    send_rate: float = 0.0
    latest_delay: float = 0.0
    inter_packet_delay: float = 0.0
    _last_sent_time: int | None = field(default=None, init=False, repr=False, compare=False)
    _last_recv_time: int | None = field(default=None, init=False, repr=False, compare=False)
    _min_rtt: float = field(default=0.0, init=False, repr=False, compare=False)

    def update(self, recv_rate: float, send_rate: float, latest_delay: float,
               inter_packet_delay: float) -> None:
        """Overwrite all four signals."""
        self.recv_rate = recv_rate
        self.send_rate = send_rate
        self.latest_delay = latest_delay
        self.inter_packet_delay = inter_packet_delay

    def _has_history(self) -> bool:
        return self._last_sent_time is not None and self._last_recv_time is not None

    def update_sent_packet(self, packet: Packet) -> None:
        """Fold a freshly sent packet into the send and receive rates."""
        if not self._has_history():
            self._last_sent_time = packet.sent
            self._last_recv_time = packet.sent
            self._min_rtt = 0.0
            return
        self.send_rate = (1 - ALPHA) * self.send_rate + ALPHA * _seconds(packet.sent, self._last_sent_time)
        self.recv_rate = (1 - ALPHA) * self.recv_rate + ALPHA * _seconds(packet.sent, self._last_recv_time)
        self._min_rtt = 0.0
        self._last_sent_time = packet.sent
        self._last_recv_time = packet.sent

    def update_received_packets(self, packets: Iterable[Packet], flow_id: int) -> None:
        """Fold received packets belonging to ``flow_id`` into the signals."""
        for packet in packets:
            if packet.flow_id != flow_id:
                continue
            if packet.received is None:
                raise ValueError(f"packet {packet.seq_no} has no receive time")
            rtt = _seconds(packet.received, packet.sent)
            if not self._has_history():
                self._last_sent_time = packet.sent
                self._last_recv_time = packet.received
                self._min_rtt = rtt
                continue
            recv_gap = _seconds(packet.received, self._last_recv_time)
            self.recv_rate = (1 - ALPHA) * self.recv_rate + ALPHA * recv_gap
            self.send_rate = (1 - ALPHA) * self.send_rate + ALPHA * _seconds(packet.sent, self._last_sent_time)
            self.inter_packet_delay = (1 - SLOW_ALPHA) * self.inter_packet_delay + SLOW_ALPHA * recv_gap
            self._last_sent_time = packet.sent
            self._last_recv_time = packet.received
            self._min_rtt = min(self._min_rtt, rtt)
            self.latest_delay = _ratio(rtt, self._min_rtt)

    def update_rtt(self, rtt: float) -> None:
        """Record a round-trip time in seconds and refresh the delay ratio."""
        self._min_rtt = rtt if self._min_rtt == 0 else min(self._min_rtt, rtt)
        self.latest_delay = _ratio(rtt, self._min_rtt)

    def hash_code(self) -> int:
        """Return a 64-bit hash built from the bit patterns of the signals."""
        result = 0
        for value in (self.recv_rate, self.send_rate, self.latest_delay, self.inter_packet_delay):
            result = (result * 31 + _float_bits(value)) % _U64
        return result

    def _signals(self) -> tuple[float, float, float, float]:
        return (self.recv_rate, self.send_rate, self.latest_delay, self.inter_packet_delay)

    def is_greater_than_or_equal(self, other: Memory) -> bool:
        """True when every signal is at least the other's."""
        return all(a >= b for a, b in zip(self._signals(), other._signals()))

    def is_less_than(self, other: Memory) -> bool:
        """True when every signal is strictly below the other's."""
        return all(a < b for a, b in zip(self._signals(), other._signals()))

    def is_equal(self, other: Memory) -> bool:
        """True when every signal equals the other's."""
        return all(a == b for a, b in zip(self._signals(), other._signals()))

    def reset(self) -> None:
        """Return to the initial, history-free state."""
        self.update(0.0, 0.0, 0.0, 0.0)
        self._last_sent_time = None
        self._last_recv_time = None
        self._min_rtt = 0.0

    def advance_to(self, tick: int) -> None:
        """Advance the memory to ``tick`` nanoseconds since the epoch."""
        if self._last_sent_time is not None:
            gap = ((tick - self._last_sent_time) % _U64) / _NS_PER_SECOND
            self.send_rate = (1 - ALPHA) * self.send_rate + ALPHA * gap
        if self._last_recv_time is not None:
            gap = ((tick - self._last_recv_time) % _U64) / _NS_PER_SECOND
            self.recv_rate = (1 - ALPHA) * self.recv_rate + ALPHA * gap
            self.inter_packet_delay = (1 - SLOW_ALPHA) * self.inter_packet_delay + SLOW_ALPHA * gap
        self._last_sent_time = tick
        self._last_recv_time = tick

    def __str__(self) -> str:
        return (f"RecvRate={self.recv_rate:f}, SendRate={self.send_rate:f}, "
                f"LatestDelay={self.latest_delay:f}, InterPacketDelay={self.inter_packet_delay:f}")


@dataclass
class MemoryRange:
    """An axis-aligned box of memory values, bounds inclusive."""

    lower: Memory
    upper: Memory

    def contains(self, m: Memory) -> bool:
        """True when ``m`` lies inside the range on every axis."""
        return all(lo <= v <= hi for lo, v, hi in
                   zip(self.lower._signals(), m._signals(), self.upper._signals()))

    def intersects(self, other: MemoryRange) -> bool:
        """True when the two ranges overlap on every axis."""
        return all(
            lo <= o_hi and hi >= o_lo
            for lo, hi, o_lo, o_hi in zip(self.lower._signals(), self.upper._signals(),
                                          other.lower._signals(), other.upper._signals())
        )

    def __str__(self) -> str:
        return f"[{self.lower}] - [{self.upper}]"


def min_memory() -> Memory:
    """The smallest memory value."""
    return Memory()


def max_memory() -> Memory:
    """The largest representable memory value."""
    top = sys.float_info.max
    return Memory(top, top, top, top)