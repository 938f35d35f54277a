"""Numeric helpers built from combinators.map and combinators.reduce."""

import math
from typing import TypeVar

import combinators
from errors import DimensionMismatchError, panic
from iterator import Enumerable, Iterator, Slice

N = TypeVar("N", int, float, complex)


def sum(iterator: Iterator[N]) -> N:
    """Sum of all values; 0 when empty."""
    return combinators.reduce(iterator, lambda accum, cur: accum + cur)


def multiply_scalar(iterator: Iterator[N]) -> N:
    """
    Product of all values; 1 when empty.

    The product is seeded with the multiplicative identity 1, not the zero
    value 0, which would make every product 0.
    """
    return combinators.reduce(iterator, lambda accum, cur: accum * cur, zero=lambda: 1)


def multiply_vector(iterator: Iterator[N], factor: N) -> Slice[N]:
    """Every value multiplied by ``factor``."""
    return combinators.map(iterator, lambda x: x * factor)


def dot_product(a: Enumerable[N], b: Enumerable[N]) -> N:
    """
    Sum of the pairwise products of ``a`` and ``b``.

    Both must report their size; DimensionMismatchError is raised when they
    differ.
    """
    if a.count() != b.count():
        panic("dot product on iterators with different dimensions", DimensionMismatchError)

    return combinators.reduce(a, lambda accum, x: accum + x * b.next().expect())


def square(iterator: Iterator[N]) -> Slice[N]:
    return combinators.map(iterator, lambda x: x * x)


def cube(iterator: Iterator[N]) -> Slice[N]:
    return combinators.map(iterator, lambda x: x * x * x)


def fourth_power(iterator: Iterator[N]) -> Slice[N]:
    return combinators.map(iterator, lambda x: x * x * x * x)


def to_power(iterator: Iterator[N], exp: N) -> Slice[N]:
    """
    Raise every value to ``exp`` with math.pow, converting back to the
    value's own type. Prefer square(), cube() and fourth_power().
    """
    return combinators.map(iterator, lambda x: type(x)(math.pow(x, exp)))
