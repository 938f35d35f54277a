from typing import Any, Callable, Optional

import combinators
import number
from cancel import CancelToken
from channel import Channel
from iterator import Iterator, Slice


class Pipeline:
    """
    A chainable wrapper around an iterator. Each step runs the matching
    combinator right away and wraps the resulting Slice in a new Pipeline,
    so the source is consumed by the first step.
    """
    def __init__(self, source):
        if source is None or isinstance(source, Iterator):
            self._iter = source
        else:
            self._iter = Slice(source)    # lists, tuples, ranges, ...

    @property
    def iterator(self) -> Optional[Iterator]:
        return self._iter

    # --------- chainable operators (eager) ----------
    def map(self, fn):
        return Pipeline(combinators.map(self._iter, fn))

    def filter(self, pred):
        return Pipeline(combinators.filter(self._iter, pred))

    def sort(self, stable=True):
        return Pipeline(combinators.sort(self._iter, stable))

    def multiply(self, factor):
        return Pipeline(number.multiply_vector(self._iter, factor))

    # --------- terminal operations ----------
    def collect(self):
        return combinators.collect(self._iter)

    def to_list(self):
        return self.collect()

    def to_channel(self, token: Optional[CancelToken] = None) -> Channel:
        return combinators.collect_to_chan(self._iter, token)

    def for_each(self, fn: Callable[[Any, combinators.Break], None]):
        combinators.for_each(self._iter, fn)

    def reduce(self, fn, zero=int):
        return combinators.reduce(self._iter, fn, zero)

    def sum(self):
        return number.sum(self._iter)

    def all(self, pred):
        return combinators.all(self._iter, pred)

    def any(self, pred):
        return combinators.any(self._iter, pred)

    def count(self):
        """Number of remaining elements (consumes the iterator)"""
        return len(self.collect())

    def first(self, default=None):
        """Return the first element, or default if empty"""
        if self._iter is None:
            return default
        opt = self._iter.next()
        if opt.is_some():
            return opt.expect()
        return default

    def equal(self, other):
        if isinstance(other, Pipeline):
            other = other.iterator
        elif other is not None and not isinstance(other, Iterator):
            other = Slice(other)
        return combinators.equal(self._iter, other)

    # --------- iterator protocol ----------
    def __iter__(self):
        if self._iter is None:
            return
        while True:
            opt = self._iter.next()
            if not opt.is_some():
                return
            yield opt.expect()
