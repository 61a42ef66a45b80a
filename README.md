# remycc

A small library for experimenting with rule-table congestion control. A
sender keeps a summary of what it has seen on the network (a `Memory`). It
looks that summary up in a tree of rules (a `WhiskerTree`). The matching
`Whisker` then sets the sender's congestion window and how long it waits
between packets.

The package depends only on the standard library.

## Installation

```
pip install remycc
```

To run the tests as well:

```
pip install "remycc[test]"
pytest
```

## Modules

### `remycc.memory`

- `Memory` holds four congestion signals: `recv_rate`, `send_rate`,
  `latest_delay` and `inter_packet_delay`.
  - `update_sent_packet(packet)` and `update_received_packets(packets, flow_id)`
    fold `Packet` records into the signals with exponentially weighted
    averages. The weights are 1/8 for the rates and 1/256 for the
    inter-packet delay.
  - `update_rtt(rtt)` takes a time in seconds. It sets `latest_delay` to the
    ratio of that time to the smallest round-trip time seen so far.
  - `advance_to(tick)` moves the memory forward to a given time.
  - `reset()` returns the memory to its initial state.
  - `hash_code()` gives a 64-bit hash of the four signals.
  - `is_equal`, `is_less_than` and `is_greater_than_or_equal` compare two
    memories signal by signal.
- `Packet` holds `seq_no`, `sender_id`, `flow_id`, `sent` and `received`.
  `sent` and `received` are in nanoseconds since the epoch.
- `MemoryRange(lower, upper)` is a box of memory values with inclusive bounds.
  It has `contains(m)` and `intersects(other)`.
- `min_memory()` and `max_memory()` give the corners of the whole space.

### `remycc.whisker`

- `Whisker(generation, window_increment, window_multiple, intersend, domain)`
  is a single rule. `window(prev_window)` returns
  `prev_window * window_multiple + window_increment`, clamped to the range
  0 to 1,000,000.
- `generate_whiskers(generations, window_increments, window_multiples, intersends, domains)`
  builds one whisker for every generation and every combination of the
  other settings. Generations vary slowest and domains fastest.

### `remycc.whisker_tree`

- `WhiskerTree` starts with a root rule that covers all memory. That root
  rule has generation 0, window increment 0, window multiple 1.0 and
  intersend 0.0.
- `insert(whisker)` works through the tree as follows:
  - It replaces the first rule whose domain meets the new whisker's domain,
    provided the new whisker has a newer generation.
  - If the rule it meets is not older, it raises `WhiskerInsertError`.
  - Where no rule's domain meets the new one, it adds the whisker as a new
    child.
- `find_whisker(memory)` returns the rule whose domain contains the memory.
  It raises `WhiskerLookupError` if no rule does.
- `str(tree)` lists the rules, with each level of children indented by two
  more spaces.

### `remycc.link`

- `Link(bandwidth, latency)` is a link with a bounded packet queue. The
  queue holds at most 1000 packets. `enqueue(packet)` returns `False`
  instead of blocking when the queue is full.
- `Delay(delay)` is a propagation delay, given as a `timedelta`.

### `remycc.rat`

- `Packet` is a packet on the wire.
- `encode_packet` and `decode_packet` use a fixed 24-byte big-endian format:
  - sequence number, int32
  - sender id, int32
  - flow id, uint64
  - send time in nanoseconds, int64

  `decode_packet` raises `ValueError` on short input.
- `send_packet(conn, packet)` writes a packet to a connected socket.
- `receive_packet(conn)` reads a packet from a connected socket and stamps
  its receive time. It raises `ConnectionError` when the peer has closed the
  connection.
- `Rat(whiskers, track=False)` is the sender that drives a whisker tree.
  - `send(sender_id, conn, seq, packets_sent_cap)` sends a packet only when
    all of the following hold, and returns the packet. Otherwise it returns
    `None`.
    - The congestion window allows it.
    - The intersend time has passed.
    - The cap has not been reached.
  - `receive_packets(packets)` counts the packets. For those in the current
    flow, it looks up the matching whisker, updates the window, the
    intersend time and the memory, and moves on to the next flow id.
  - `next_event_time()`, `packets_sent()` and `whiskers()` report its state.
- `Rat.start()` and `set_rat_algorithm_system_wide(sock)` ask the operating
  system to use the `remy` TCP congestion control module on a socket. They
  raise `CongestionControlError` if that fails. They work only on Linux,
  and only where that module is available.

## Example

```python
from remycc.memory import Memory, MemoryRange, min_memory, max_memory
from remycc.whisker import Whisker
from remycc.whisker_tree import WhiskerTree

tree = WhiskerTree()
rule = Whisker(1, 2, 1.0, 0.01, MemoryRange(min_memory(), max_memory()))
tree.insert(rule)

found = tree.find_whisker(Memory())
print(found.window(10))  # 12
```

## What the package does not do

- It has no commands. There is no tool to generate whisker sets from a
  configuration, and no tool to run senders against a link.
- It cannot read or write whisker trees as files. Trees are built in code
  with `WhiskerTree.insert`.
- It has no network simulator that moves packets between senders and
  receivers. `Link` and `Delay` are building blocks only.