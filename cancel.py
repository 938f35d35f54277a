"""
Cancellation tokens for blocking waits.

A CancelToken is handed to blocking operations (Chan.wait_for_next,
Channel.receive, iterator.wait_for_next, collect_to_chan). Once cancelled it
stays cancelled, and every registered callback runs exactly once.
"""

import logging
import threading
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)


class CancelToken:
    """One-shot cancellation signal shared between threads."""

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []

        for callback in callbacks:
            callback()

    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or ``timeout`` elapses; return whether cancelled."""
        return self._event.wait(timeout)

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run ``callback`` on cancellation, immediately if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled() else "active"
        return f"<CancelToken {state}>"


def background() -> CancelToken:
    """A token nobody cancels."""
    return CancelToken()


def with_cancel(parent: Optional[CancelToken] = None) -> Tuple[CancelToken, Callable[[], None]]:
    """Return a new token and the function cancelling it.

    The child is also cancelled when ``parent`` is. Cancelling the child
    detaches it from ``parent``, so a long-lived parent does not hold on to
    finished children.
    """
    token = CancelToken()
    if parent is not None:
        parent.add_callback(token.cancel)
        token.add_callback(lambda: parent.remove_callback(token.cancel))
    return token, token.cancel


def with_timeout(seconds: float, parent: Optional[CancelToken] = None) -> Tuple[CancelToken, Callable[[], None]]:
    """Like with_cancel(), but the token also cancels itself after ``seconds``."""
    token, cancel = with_cancel(parent)
    timer = threading.Timer(seconds, cancel)
    timer.daemon = True
    timer.start()
    logger.debug(f"Cancellation timer armed for {seconds:.3f}s")

    def stop():
        timer.cancel()
        cancel()

    return token, stop
