"""
Higher-order functions over pull-based iterators.

All functions accept any Iterator and only use next(), probing for
Enumerable to size buffers. filter(), map() and sort() consume their source
completely when called and return a Slice over the results; they are not
lazy.

A None iterator behaves as an empty one.
"""

import builtins
import heapq
import logging
import threading
from typing import Any, Callable, List, Optional, Protocol, TypeVar

from cancel import CancelToken
from channel import Channel
from errors import NilFunctionError, panic
from iterator import Enumerable, Iterator, Slice
from utils import get_settings

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

Break = Callable[[], None]


class SupportsLess(Protocol):
    """Anything with a strict ordering via ``<``."""

    def __lt__(self, other: Any) -> bool:
        ...


S = TypeVar("S", bound=SupportsLess)


class Sorted(Slice[S]):
    """A Slice known to be in ascending order; sort() returns these unchanged."""
    pass


def size_hint(iterator: Optional[Iterator[Any]]) -> int:
    """Return iterator.count() when Enumerable and positive, else the configured default."""
    if isinstance(iterator, Enumerable):
        count = iterator.count()
        if count > 0:
            return count
    return get_settings().default_size_hint


def for_each(iterator: Optional[Iterator[T]], fn: Callable[[T, Break], None]) -> None:
    """
    Call ``fn(value, stop)`` for every value until the iterator is exhausted.

    Calling ``stop()`` ends the loop before the next pull.
    """
    if iterator is None:
        return

    loop = True

    def stop():
        nonlocal loop
        loop = False

    while loop:
        opt = iterator.next()
        if opt.is_some():
            fn(opt.expect(), stop)
        else:
            stop()


def all(iterator: Optional[Iterator[T]], fn: Callable[[T], bool]) -> bool:
    """True unless some value fails ``fn``. Stops at the first failure."""
    return not any(iterator, lambda x: not fn(x))


def any(iterator: Optional[Iterator[T]], fn: Callable[[T], bool]) -> bool:
    """True if some value satisfies ``fn``. Stops at the first success."""
    found = False

    def check(x, stop):
        nonlocal found
        found = bool(fn(x))
        if found:
            stop()

    for_each(iterator, check)
    return found


def collect(iterator: Optional[Iterator[T]]) -> List[T]:
    """Drain the iterator into a list."""
    values: List[T] = []
    for_each(iterator, lambda x, _: values.append(x))
    return values


def collect_to_chan(iterator: Optional[Iterator[T]], token: Optional[CancelToken] = None) -> Channel[T]:
    """
    Drain the iterator onto a channel from a background thread.

    The channel holds up to size_hint(iterator) values and is closed once the
    iterator is exhausted. If the iterator raises, the channel is closed with
    that error and receivers get it once the values sent before it are
    drained. Without ``token`` the producer runs until then, so
    an abandoned channel over an endless iterator leaks the thread; cancelling
    ``token`` stops the producer and closes the channel.
    """
    ch: Channel[T] = Channel(capacity=size_hint(iterator))

    def publish(x, stop):
        if not ch.send(x, token):
            stop()

    def produce():
        try:
            for_each(iterator, publish)
        except Exception as exc:
            logger.exception("Iterator failed while collecting to channel")
            ch.close(exc)
        else:
            ch.close()
            logger.debug("Collection channel closed")

    worker = threading.Thread(target=produce, name="collect-to-chan", daemon=True)
    worker.start()
    return ch


def equal(a: Optional[Iterator[T]], b: Optional[Iterator[T]]) -> bool:
    """
    Compare two iterators element by element, consuming both.

    Size hints are compared first; iterators without an accurate count()
    fall back to the default hint, so that check is only a shortcut.
    """
    if size_hint(a) != size_hint(b):
        return False

    a_values, b_values = collect(a), collect(b)
    if len(a_values) != len(b_values):
        return False

    for x, y in zip(a_values, b_values):
        if x != y:
            return False
    return True


def filter(iterator: Optional[Iterator[T]], fn: Callable[[T], bool]) -> Slice[T]:
    """Return a Slice of every value ``x`` for which ``fn(x)`` holds."""
    if fn is None:
        panic("nil filter", NilFunctionError)

    kept: List[T] = []

    def keep(x, _):
        if fn(x):
            kept.append(x)

    for_each(iterator, keep)
    return Slice(kept)


def map(iterator: Optional[Iterator[T]], fn: Callable[[T], U]) -> Slice[U]:
    """Return a Slice of ``fn(x)`` for every value ``x``."""
    if fn is None:
        panic("nil mapper", NilFunctionError)

    mapped: List[U] = []
    for_each(iterator, lambda x, _: mapped.append(fn(x)))
    return Slice(mapped)


def reduce(iterator: Optional[Iterator[T]], fn: Callable[[U, T], U], zero: Callable[[], U] = int) -> U:
    """
    Left fold. The accumulator starts at ``zero()`` and becomes
    ``fn(accumulator, value)`` for each value in order.
    """
    if fn is None:
        panic("nil reducer", NilFunctionError)

    accumulator = zero()

    def step(x, _):
        nonlocal accumulator
        accumulator = fn(accumulator, x)

    for_each(iterator, step)
    return accumulator


def sort(iterator: Optional[Iterator[S]], stable: bool) -> Sorted[S]:
    """
    Return the values in ascending order.

    A Sorted iterator (as returned by an earlier sort) is returned as is.
    The stable path keeps equal elements in their original order.
    """
    if isinstance(iterator, Sorted):
        logger.debug("Iterator already sorted, skipping")
        return iterator

    values = collect(iterator)
    if not _is_sorted(values):
        if stable:
            values.sort()
        else:
            values = _heap_sort(values)
    return Sorted(values)


def _is_sorted(values: List[S]) -> bool:
    return builtins.all(not values[i] < values[i - 1] for i in range(1, len(values)))


def _heap_sort(values: List[S]) -> List[S]:
    heap = list(values)
    heapq.heapify(heap)
    return [heapq.heappop(heap) for _ in range(len(heap))]
