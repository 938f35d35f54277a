"""Eager list transforms and function composition."""

from typing import Callable, List, Optional, Sequence, TypeVar

from errors import NilFunctionError, panic

T = TypeVar("T")
U = TypeVar("U")
V = TypeVar("V")


def chain(*fns: Callable[[T], T]) -> Callable[[T], T]:
    """
    Compose ``fns`` right to left, so that

        chain(f)(x) == f(x)
        chain(f, g)(x) == f(g(x))
        chain(f, g, h)(x) == f(g(h(x)))

    With no functions the result returns its input. A None member raises
    NilFunctionError immediately.
    """
    for fn in fns:
        if fn is None:
            panic("nil chain function", NilFunctionError)

    def chained(x: T) -> T:
        for fn in reversed(fns):
            x = fn(x)
        return x

    return chained


def compose(f: Callable[[U], V], g: Callable[[T], U]) -> Callable[[T], V]:
    """Return ``x -> f(g(x))``. Raises NilFunctionError if either is None."""
    if f is None:
        panic("nil f", NilFunctionError)
    if g is None:
        panic("nil g", NilFunctionError)

    return lambda x: f(g(x))


def filter(values: Optional[Sequence[T]], fn: Callable[[T], bool]) -> List[T]:
    """
    Return the values for which ``fn`` returns True, in order.

    The result is always a new list; a None sequence counts as empty.
    """
    if fn is None:
        panic("nil filter", NilFunctionError)

    return [v for v in values or () if fn(v)]


def map(values: Optional[Sequence[T]], fn: Callable[[T], U]) -> List[U]:
    """
    Return ``fn(v)`` for every value, in order.

    The result is always a new list; a None sequence counts as empty.
    """
    if fn is None:
        panic("nil mapper", NilFunctionError)

    return [fn(v) for v in values or ()]


def reduce(values: Optional[Sequence[T]], fn: Callable[[U, T], U], zero: Callable[[], U] = int) -> U:
    """Left fold starting from ``zero()``; a None sequence returns ``zero()``."""
    if fn is None:
        panic("nil reducer", NilFunctionError)

    accumulator = zero()
    for v in values or ():
        accumulator = fn(accumulator, v)
    return accumulator
