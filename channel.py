"""
Closable FIFO channel shared between a producer and consumers.

A Channel with capacity 0 is unbuffered: send() returns only once a receiver
has taken the value. A positive capacity buffers up to that many values.
Closing signals exhaustion; receivers still drain buffered values first. A
channel closed with an error re-raises it to receivers once drained.
"""

import threading
from collections import deque
from typing import Callable, Deque, Generic, Iterator, Optional, Tuple, TypeVar

from cancel import CancelToken
from errors import ChannelClosedError, panic

T = TypeVar("T")


class Channel(Generic[T]):
    """Thread-safe closable queue."""

    def __init__(self, capacity: int = 0):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._buffer: Deque[T] = deque()
        self._closed = False
        self._error: Optional[BaseException] = None
        self._cond = threading.Condition()
        self._sent = 0
        self._received = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def error(self) -> Optional[BaseException]:
        """The error the channel was closed with, if any."""
        with self._cond:
            return self._error

    def __len__(self) -> int:
        with self._cond:
            return len(self._buffer)

    def send(self, value: T, token: Optional[CancelToken] = None) -> bool:
        """
        Put ``value`` on the channel, blocking while it is full.

        Returns False if ``token`` is cancelled before the value is delivered.
        Raises ChannelClosedError when the channel is closed.
        """
        with self._cond:
            if self._closed:
                panic("send on closed channel", ChannelClosedError)

            limit = max(self._capacity, 1)
            if not self._wait(lambda: self._closed or len(self._buffer) < limit, token):
                return False
            if self._closed:
                panic("send on closed channel", ChannelClosedError)

            self._buffer.append(value)
            self._sent += 1
            ticket = self._sent
            self._cond.notify_all()

            if self._capacity == 0 and not self._wait(lambda: self._received >= ticket, token):
                # unbuffered: the pending value is the only one in the buffer
                self._buffer.pop()
                self._sent -= 1
                self._cond.notify_all()
                return False

            return True

    def receive(self, token: Optional[CancelToken] = None) -> Tuple[Optional[T], bool]:
        """
        Take the next value.

        Returns ``(value, True)``, or ``(None, False)`` once the channel is
        closed and drained or ``token`` is cancelled. A cancelled token never
        consumes a value. If the channel was closed with an error, that error
        is raised instead of reporting exhaustion.
        """
        with self._cond:
            if not self._wait(lambda: bool(self._buffer) or self._closed, token):
                return None, False
            if not self._buffer:
                if self._error is not None:
                    raise self._error
                return None, False

            value = self._buffer.popleft()
            self._received += 1
            self._cond.notify_all()
            return value, True

    def close(self, error: Optional[BaseException] = None) -> None:
        """Close the channel, optionally recording why the producer stopped."""
        with self._cond:
            if self._closed:
                panic("close of closed channel", ChannelClosedError)
            self._closed = True
            self._error = error
            self._cond.notify_all()

    def __iter__(self) -> Iterator[T]:
        while True:
            value, ok = self.receive()
            if not ok:
                return
            yield value

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Channel {state} {len(self._buffer)}/{self._capacity}>"

    def _wait(self, predicate: Callable[[], bool], token: Optional[CancelToken]) -> bool:
        # caller holds self._cond
        if token is None:
            self._cond.wait_for(predicate)
            return True
        if token.cancelled():
            return False

        token.add_callback(self._wake)
        try:
            while not predicate():
                if token.cancelled():
                    return False
                self._cond.wait()
            return True
        finally:
            token.remove_callback(self._wake)

    def _wake(self) -> None:
        with self._cond:
            self._cond.notify_all()
