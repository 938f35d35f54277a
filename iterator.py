"""
Pull-based iterators.

Every iterator implements ``next()``, returning ``Some(value)`` or
``Nothing()`` once exhausted. Two capabilities are optional and detected at
runtime with isinstance():

- BlockingIterator: ``wait_for_next(token)`` blocks until a value, exhaustion,
  or cancellation of ``token``.
- Enumerable: ``count()`` reports how many values remain.

Iterators are not safe to pull from several threads at once.
"""

import logging
import threading
from typing import Callable, Generic, Iterator as PyIterator, List, Optional, Protocol, Sequence, TypeVar, runtime_checkable

from cancel import CancelToken
from channel import Channel
from optional import Nothing, Option, Some

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Iterator(Protocol[T_co]):
    """A basic iterator. ``Nothing()`` from next() means exhausted."""

    def next(self) -> Option[T_co]:
        ...


@runtime_checkable
class BlockingIterator(Protocol[T_co]):
    """An iterator whose next value can be awaited with cancellation."""

    def wait_for_next(self, token: CancelToken) -> Option[T_co]:
        ...


@runtime_checkable
class Enumerable(Protocol[T_co]):
    """An iterator that knows its remaining size."""

    def next(self) -> Option[T_co]:
        ...

    def count(self) -> int:
        ...


class _Drain:
    """Python iteration over next() until exhausted."""

    def __iter__(self) -> PyIterator:
        while True:
            opt = self.next()
            if not opt.is_some():
                return
            yield opt.expect()


class Slice(_Drain, Generic[T]):
    """
    Iterator over a fixed sequence.

    The sequence should not be modified after the iterator is created.
    A None sequence is an exhausted iterator.
    """

    def __init__(self, values: Optional[Sequence[T]] = None):
        self.values: List[T] = list(values) if values is not None else []
        self._index = 0

    def next(self) -> Option[T]:
        if len(self.values) > self._index:
            self._index += 1
            return Some(self.values[self._index - 1])
        return Nothing()

    def count(self) -> int:
        """Remaining number of elements."""
        return len(self.values) - self._index

    def wait_for_next(self, token: CancelToken) -> Option[T]:
        # next() never blocks; implemented so wait_for_next() skips the thread
        if token.cancelled():
            return Nothing()
        return self.next()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.values[self._index:]!r})"


class Chan(_Drain, Generic[T]):
    """
    Iterator over a Channel.

    next() blocks until the channel yields a value or is closed. A Chan over
    None blocks forever.
    """

    def __init__(self, channel: Optional[Channel[T]]):
        self.channel = channel

    def next(self) -> Option[T]:
        if self.channel is None:
            threading.Event().wait()
        value, ok = self.channel.receive()
        if ok:
            return Some(value)
        return Nothing()

    def wait_for_next(self, token: CancelToken) -> Option[T]:
        """Wait for a value, the channel closing, or ``token`` being cancelled."""
        if self.channel is None:
            token.wait()
            return Nothing()
        value, ok = self.channel.receive(token)
        if ok:
            return Some(value)
        return Nothing()


class Func(_Drain, Generic[T]):
    """
    Iterator over a function returning Options. A None function is an
    exhausted iterator.

    Whether values keep coming after the first Nothing() is up to the function.
    """

    def __init__(self, fn: Optional[Callable[[], Option[T]]]):
        self.fn = fn

    def next(self) -> Option[T]:
        if self.fn is not None:
            return self.fn()
        return Nothing()


def send(*values: T) -> Channel[T]:
    """
    Return an open channel already holding ``values``.

    Useful when a Chan iterator is needed over known values; close the
    channel to make the iterator finite.
    """
    ch = Channel(capacity=len(values))
    for v in values:
        ch.send(v)
    return ch


def wait_for_next(token: CancelToken, iterator: Iterator[T]) -> Option[T]:
    """
    Wait for the next value of ``iterator``, or Nothing() if ``token`` is
    cancelled first.

    BlockingIterators are waited on directly. For anything else a daemon
    thread calls next() and hands the result over a one-slot channel; if
    next() never returns, that thread is leaked. An exception raised by next()
    is re-raised in the caller.
    """
    if isinstance(iterator, BlockingIterator):
        return iterator.wait_for_next(token)
    return _wait_for_next(token, iterator)


def _wait_for_next(token: CancelToken, iterator: Iterator[T]) -> Option[T]:
    if token.cancelled():
        return Nothing()

    result: Channel[Option[T]] = Channel(capacity=1)

    def pull():
        try:
            opt = iterator.next()
        except Exception as exc:
            result.close(exc)
        else:
            result.send(opt)
            result.close()

    worker = threading.Thread(target=pull, name="wait-for-next", daemon=True)
    worker.start()
    logger.debug(f"Started {worker.name} thread for {type(iterator).__name__}")

    opt, ok = result.receive(token)
    if ok:
        return opt
    return Nothing()
