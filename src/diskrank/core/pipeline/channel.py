from __future__ import annotations

"""
Rendezvous Channels.

Single-slot handoff between pipeline stages. A channel is split into a sender
and a receiver endpoint so that only the owning (producing) stage can ever
close it. End-of-stream travels through the slot as a private sentinel, which
means a receiver observes closure only after every item put before it.
"""

import queue
import threading
from typing import Any, Generic, Iterator, Optional, Tuple, TypeVar

from diskrank.domain.errors import ChannelClosedError

T = TypeVar("T")

_CLOSED = object()


class ChannelDrained(Exception):
    """Raised by a receiver once the sender has closed and the slot is empty."""


class ChannelSender(Generic[T]):
    """Producer endpoint. Safe to share between threads of one stage."""

    def __init__(self, slot: "queue.Queue[Any]", name: str):
        self._slot = slot
        self._name = name
        self._lock = threading.Lock()
        self._closed = False

    def put(self, item: T) -> None:
        """
        Hand an item to the consumer, blocking while the slot is occupied.

        Raises:
            ChannelClosedError: If the sender was already closed.
        """
        if self._closed:
            raise ChannelClosedError(f"put on closed channel '{self._name}'")
        self._slot.put(item)

    def close(self) -> None:
        """
        Signal end-of-stream. Must be called exactly once by the owner.

        Raises:
            ChannelClosedError: On a second close.
        """
        with self._lock:
            if self._closed:
                raise ChannelClosedError(f"channel '{self._name}' closed twice")
            self._closed = True
        self._slot.put(_CLOSED)


class ChannelReceiver(Generic[T]):
    """Consumer endpoint. Intended for exactly one consuming stage."""

    def __init__(self, slot: "queue.Queue[Any]", name: str):
        self._slot = slot
        self._name = name
        self._drained = False

    @property
    def drained(self) -> bool:
        return self._drained

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Receive the next item.

        Args:
            timeout: Seconds to wait; None blocks indefinitely.

        Returns:
            The next item put by the sender.

        Raises:
            queue.Empty: If the timeout elapsed with nothing received.
            ChannelDrained: If the stream has ended.
        """
        if self._drained:
            raise ChannelDrained(self._name)
        item = self._slot.get(timeout=timeout)
        if item is _CLOSED:
            self._drained = True
            raise ChannelDrained(self._name)
        return item

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except ChannelDrained:
                return


def make_channel(name: str) -> Tuple[ChannelSender[Any], ChannelReceiver[Any]]:
    """
    Create a connected sender/receiver pair backed by a one-slot queue.

    Args:
        name: Label used in diagnostics and invariant errors.

    Returns:
        Tuple[ChannelSender, ChannelReceiver]: The two endpoints.
    """
    slot: "queue.Queue[Any]" = queue.Queue(maxsize=1)
    return ChannelSender(slot, name), ChannelReceiver(slot, name)
