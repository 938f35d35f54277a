"""
Optional values.

Option holds a value that may be absent; Result is an Option whose absence
carries an error. Both are immutable and compared by value.
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from errors import ExpectError

T = TypeVar("T")


@dataclass(frozen=True)
class Option(Generic[T]):
    """
    A value that is either present ("Some") or absent ("Nothing").

    A default-constructed Option is Nothing. Use the Some/Nothing factories
    rather than the constructor.
    """
    some: bool = False
    value: Optional[T] = None

    def __post_init__(self):
        if not self.some and self.value is not None:
            raise ValueError("an absent Option cannot carry a value")

    def is_some(self) -> bool:
        return self.some

    def is_none(self) -> bool:
        return not self.some

    def get(self) -> Optional[T]:
        """Return the value, or None when absent. Never raises."""
        return self.value

    def expect(self) -> T:
        """Same as get(), but raises ExpectError when absent."""
        if not self.some:
            raise ExpectError("optional: expect() called on Nothing")
        return self.value

    def __str__(self) -> str:
        if self.some:
            return str(self.value)
        return "None"

    def __repr__(self) -> str:
        if self.some:
            return f"Some({self.value!r})"
        return "Nothing()"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    An optional value whose absence is an error.

    A default-constructed Result is erroneous but carries no error: ``ok()``
    is False and ``err()`` is None.
    """
    opt: Option = Option()
    error: Optional[BaseException] = None

    def __post_init__(self):
        if self.opt.is_some() and self.error is not None:
            raise ValueError("an ok Result cannot carry an error")

    def ok(self) -> bool:
        return self.opt.is_some()

    def err(self) -> Optional[BaseException]:
        return self.error

    def get(self) -> Optional[T]:
        return self.opt.get()

    def expect(self) -> T:
        """Return the value, raising ExpectError when the result is erroneous."""
        if not self.ok():
            raise ExpectError("optional: expect() called on error result")
        return self.opt.value

    def __str__(self) -> str:
        if self.ok():
            return str(self.opt)
        # erroneous results without an error object render like a missing value
        return str(self.error)

    def __repr__(self) -> str:
        if self.ok():
            return f"Ok({self.opt.value!r})"
        return f"Err({self.error!r})"


def Some(value: T) -> Option[T]:
    """Construct a present Option."""
    return Option(some=True, value=value)


def Nothing() -> Option[Any]:
    """Construct an absent Option."""
    return Option()


def Ok(value: T) -> Result[T]:
    return Result(opt=Some(value))


def Err(error: Optional[BaseException]) -> Result[Any]:
    return Result(error=error)
