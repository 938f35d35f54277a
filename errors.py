"""Programmer-error exceptions raised by the functional toolkit.

These mark misuse at the call site (missing callbacks, unwrapping an absent
value, mismatched dimensions, closed channels). They are raised, never
caught inside the library.
"""

from typing import NoReturn


class PanicError(RuntimeError):
    """Base class for unrecoverable misuse of the library."""
    pass


class ExpectError(PanicError):
    """Raised when expect() is called on an absent Option or an erroneous Result."""
    pass


class NilFunctionError(PanicError, TypeError):
    """Raised when a required callback is None."""
    pass


class DimensionMismatchError(PanicError, ValueError):
    """Raised when an operation needs equal-length inputs and gets different ones."""
    pass


class ChannelClosedError(PanicError):
    """Raised when sending on, or closing, an already closed channel."""
    pass


def panic(message: str, error_cls: type = PanicError) -> NoReturn:
    """Raise ``error_cls`` with the ``functional:`` prefix."""
    raise error_cls(f"functional: {message}")
