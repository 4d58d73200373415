from __future__ import annotations

"""
Unit tests for the Rendezvous Channels.

Verifies:
1. Items arrive in order and iteration stops at closure.
2. Double close and put-after-close fail loudly.
3. The single slot applies backpressure to the producer.
4. Timeouts surface as queue.Empty, drained streams as ChannelDrained.
"""

import queue
import threading

import pytest

from diskrank.core.pipeline.channel import ChannelDrained, make_channel
from diskrank.domain.errors import ChannelClosedError, PipelineInvariantError


def test_items_arrive_in_order_then_iteration_stops() -> None:
    tx, rx = make_channel("test")

    def produce() -> None:
        for i in range(5):
            tx.put(i)
        tx.close()

    t = threading.Thread(target=produce)
    t.start()
    received = list(rx)
    t.join(timeout=2)

    assert received == [0, 1, 2, 3, 4]
    assert rx.drained is True


def test_double_close_is_an_invariant_violation() -> None:
    tx, rx = make_channel("records")
    tx.close()

    with pytest.raises(ChannelClosedError, match="records"):
        tx.close()
    assert issubclass(ChannelClosedError, PipelineInvariantError)


def test_put_after_close_is_rejected() -> None:
    tx, _ = make_channel("snapshots")
    tx.close()

    with pytest.raises(ChannelClosedError, match="snapshots"):
        tx.put("late")


def test_producer_blocks_while_slot_is_occupied() -> None:
    tx, rx = make_channel("test")
    tx.put("first")
    second_sent = threading.Event()

    def produce() -> None:
        tx.put("second")
        second_sent.set()

    t = threading.Thread(target=produce, daemon=True)
    t.start()

    assert not second_sent.wait(timeout=0.1)
    assert rx.get() == "first"
    assert second_sent.wait(timeout=2)
    assert rx.get() == "second"
    t.join(timeout=2)


def test_get_timeout_raises_empty() -> None:
    _, rx = make_channel("test")

    with pytest.raises(queue.Empty):
        rx.get(timeout=0.01)


def test_get_after_drain_keeps_raising() -> None:
    tx, rx = make_channel("test")
    tx.close()

    with pytest.raises(ChannelDrained):
        rx.get()
    with pytest.raises(ChannelDrained):
        rx.get(timeout=0.01)
    assert list(rx) == []
