from datetime import timedelta

from remycc.link import QUEUE_CAPACITY, Delay, Link


def test_enqueue_until_full():
    link = Link(1000, timedelta(milliseconds=10))
    results = [link.enqueue(n) for n in range(QUEUE_CAPACITY)]
    assert all(results)
    assert link.enqueue("overflow") is False
    assert link.packet_queue.qsize() == QUEUE_CAPACITY


def test_queue_capacity_is_one_thousand():
    assert Link(1, timedelta()).packet_queue.maxsize == 1000


def test_enqueue_preserves_order():
    link = Link(1000, timedelta(milliseconds=10))
    for item in ("a", "b", "c"):
        assert link.enqueue(item)
    drained = [link.packet_queue.get_nowait() for _ in range(3)]
    assert drained == ["a", "b", "c"]


def test_draining_frees_space():
    link = Link(1000, timedelta(milliseconds=10))
    for n in range(QUEUE_CAPACITY):
        link.enqueue(n)
    assert link.packet_queue.get_nowait() == 0
    assert link.enqueue("late") is True


def test_links_have_separate_queues():
    first = Link(1000, timedelta(milliseconds=10))
    second = Link(1000, timedelta(milliseconds=10))
    first.enqueue("x")
    assert second.packet_queue.empty()
    assert first.packet_queue.qsize() == 1


def test_link_and_delay_hold_values():
    latency = timedelta(milliseconds=25)
    link = Link(500, latency)
    assert link.bandwidth == 500
    assert link.latency == latency
    assert Delay(latency).delay == latency