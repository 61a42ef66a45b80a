"""Whisker-driven congestion controller and its packet wire format."""

from __future__ import annotations

import logging
import socket
import struct
import threading
import time
from dataclasses import dataclass
from typing import Iterable

from remycc.memory import Memory
from remycc.memory import Packet as MemoryPacket
from remycc.whisker import Whisker
from remycc.whisker_tree import WhiskerLookupError, WhiskerTree

log = logging.getLogger(__name__)

# seq_no (int32), sender id (int32), flow id (uint64), sent time in ns (int64), big-endian
_WIRE = struct.Struct(">iiQq")
_RECV_BUFFER = 1024
_U64 = 1 << 64
_NS_PER_SECOND = 1_000_000_000
_ALGORITHM = b"remy"
_TCP_CONGESTION = getattr(socket, "TCP_CONGESTION", 13)


class CongestionControlError(OSError):
    """Raised when the congestion-control algorithm cannot be set on a socket."""


@dataclass
class Packet:
    """A packet on the wire: timestamps are nanoseconds since the epoch."""

    seq_no: int
    sender_id: int
    flow_id: int = 0
    sent: int = 0
    received: int | None = None


def encode_packet(packet: Packet) -> bytes:
    """Serialise the sequence number, sender id, flow id and send time."""
    try:
        return _WIRE.pack(packet.seq_no, packet.sender_id, packet.flow_id, packet.sent)
    except struct.error as exc:
        raise ValueError(f"cannot encode packet: {exc}") from exc


def decode_packet(data: bytes) -> Packet:
    """Parse a packet from ``data``; trailing bytes are ignored."""
    if len(data) < _WIRE.size:
        raise ValueError(f"packet needs {_WIRE.size} bytes, got {len(data)}")
    seq_no, sender_id, flow_id, sent = _WIRE.unpack_from(data)
    return Packet(seq_no, sender_id, flow_id, sent)


def send_packet(conn: socket.socket, packet: Packet) -> None:
    """Write the encoded packet to ``conn``."""
    conn.sendall(encode_packet(packet))


def receive_packet(conn: socket.socket) -> Packet:
    """Read one packet from ``conn`` and stamp its receive time."""
    data = conn.recv(_RECV_BUFFER)
    if not data:
        raise ConnectionError("connection closed by peer")
    packet = decode_packet(data)
    packet.received = time.time_ns()
    return packet


def set_rat_algorithm_system_wide(sock: socket.socket) -> None:
    """Select the remy congestion-control algorithm on ``sock``."""
    try:
        sock.setsockopt(socket.IPPROTO_TCP, _TCP_CONGESTION, _ALGORITHM)
    except OSError as exc:
        raise CongestionControlError(
            f"failed to set RAT congestion control algorithm: {exc}"
        ) from exc


class Rat:
    """A sender whose window and pacing follow the whisker matching its memory."""

    def __init__(self, whiskers: WhiskerTree, track: bool = False) -> None:
        self._whiskers = whiskers
        self.memory = Memory()
        self.track = track
        self._packets_sent = 0
        self._packets_received = 0
        self._last_send_time = 0
        self._congestion_window = 0
        self._intersend_time = 0.0
        self._flow_id = 0
        self._current_whisker: Whisker = whiskers.root.whisker
        self._lock = threading.Lock()

    @property
    def congestion_window(self) -> int:
        return self._congestion_window

    @property
    def intersend_time(self) -> float:
        return self._intersend_time

    @property
    def flow_id(self) -> int:
        return self._flow_id

    @property
    def packets_received(self) -> int:
        return self._packets_received

    @property
    def last_send_time(self) -> int:
        return self._last_send_time

    @property
    def current_whisker(self) -> Whisker:
        return self._current_whisker

    def start(self) -> None:
        """Open a listening socket and select the remy algorithm on it."""
        with socket.create_server(("", 0)) as listener:
            set_rat_algorithm_system_wide(listener)

    def send(self, sender_id: int, conn: socket.socket, seq: int,
             packets_sent_cap: int) -> Packet | None:
        """Send one packet if the window and pacing allow; return it, or None."""
        with self._lock:
            if self._packets_sent < self._packets_received:
                raise RuntimeError(
                    "Number of packets sent should be greater than or equal to "
                    "the number of packets received"
                )
            if self._congestion_window == 0:
                self._current_whisker = self._whiskers.root.whisker
                self._congestion_window = self._current_whisker.window(0)
                self._intersend_time = self._current_whisker.intersend

            now = time.time_ns()
            pacing = int(self._intersend_time * _NS_PER_SECOND)
            if (self._packets_sent >= self._packets_received + self._congestion_window
                    or now - self._last_send_time < pacing):
                return None
            if self._packets_sent >= packets_sent_cap:
                return None

            packet = Packet(seq, sender_id, self._flow_id, now)
            self._packets_sent += 1
            self.memory.update_sent_packet(
                MemoryPacket(packet.seq_no, packet.sender_id, packet.flow_id,
                             packet.sent, packet.received)
            )
            send_packet(conn, packet)
            self._last_send_time = time.time_ns()
            return packet

    def receive_packets(self, packets: Iterable[Packet]) -> None:
        """Account for received packets and update the controller state."""
        with self._lock:
            batch = list(packets)
            self._packets_received += len(batch)
            memory_packets: list[MemoryPacket] = []
            for packet in batch:
                if packet.flow_id != self._flow_id:
                    continue
                rtt = (time.time_ns() - packet.sent) / _NS_PER_SECOND
                memory_packets.append(
                    MemoryPacket(packet.seq_no, packet.sender_id, packet.flow_id,
                                 packet.sent, packet.received)
                )
                try:
                    whisker = self._whiskers.find_whisker(self.memory)
                except WhiskerLookupError as exc:
                    log.warning("Error finding whisker: %s", exc)
                    continue
                self._update_state(rtt, whisker)
            self.memory.update_received_packets(memory_packets, self._flow_id)

    def _update_state(self, rtt: float, whisker: Whisker) -> None:
        self.memory.update_rtt(rtt)
        self._current_whisker = whisker
        self._congestion_window = whisker.window(self._congestion_window)
        self._intersend_time = whisker.intersend
        self._flow_id = (self._flow_id + 1) % _U64 or 1

    def next_event_time(self) -> int:
        """Nanosecond timestamp at which the next send becomes allowed."""
        return self._last_send_time + int(self._intersend_time * _NS_PER_SECOND)

    def packets_sent(self) -> int:
        """Number of packets sent so far."""
        return self._packets_sent

    def whiskers(self) -> WhiskerTree:
        """The whisker tree driving this controller."""
        return self._whiskers