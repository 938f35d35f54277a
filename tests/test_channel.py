import threading
import time

import pytest

from cancel import CancelToken, background, with_cancel, with_timeout
from channel import Channel
from errors import ChannelClosedError

WAIT_TIMEOUT = 5.0


class TestCancelToken:
    """Test the cancellation signal"""

    def test_new_token_is_active(self):
        token = background()
        assert not token.cancelled()
        assert not token.wait(0.01)

    def test_cancel_runs_callbacks_once(self):
        """Test that callbacks run exactly once"""
        calls = []
        token = CancelToken()
        token.add_callback(lambda: calls.append("a"))
        token.cancel()
        token.cancel()
        assert token.cancelled()
        assert calls == ["a"]

    def test_callback_on_cancelled_token_runs_immediately(self, canceled):
        calls = []
        canceled.add_callback(lambda: calls.append("late"))
        assert calls == ["late"]

    def test_removed_callback_does_not_run(self):
        calls = []
        callback = lambda: calls.append("x")
        token = CancelToken()
        token.add_callback(callback)
        token.remove_callback(callback)
        token.cancel()
        assert calls == []

    def test_child_follows_parent(self):
        """Test that cancelling the parent cancels derived tokens"""
        parent, cancel_parent = with_cancel()
        child, _ = with_cancel(parent)
        cancel_parent()
        assert child.cancelled()

    def test_cancelling_child_leaves_parent(self):
        parent, _ = with_cancel()
        child, cancel_child = with_cancel(parent)
        cancel_child()
        assert child.cancelled()
        assert not parent.cancelled()

    def test_cancelled_child_detaches_from_parent(self):
        """Test that finished children do not pile up on a long-lived parent"""
        parent = background()
        for _ in range(100):
            _, cancel_child = with_cancel(parent)
            cancel_child()
        assert parent._callbacks == []

    def test_stopped_timeout_detaches_from_parent(self):
        parent = background()
        token, stop = with_timeout(60, parent)
        assert len(parent._callbacks) == 1
        stop()
        assert token.cancelled()
        assert parent._callbacks == []

    def test_live_child_stays_attached(self):
        parent, cancel_parent = with_cancel()
        first, cancel_first = with_cancel(parent)
        second, _ = with_cancel(parent)
        cancel_first()
        cancel_parent()
        assert second.cancelled()

    def test_timeout_cancels(self):
        """Test that with_timeout cancels on its own"""
        token, _ = with_timeout(0.05)
        assert token.wait(WAIT_TIMEOUT)

    def test_timeout_stop_cancels_early(self):
        token, stop = with_timeout(60)
        stop()
        assert token.cancelled()


class TestChannel:
    """Test the closable FIFO channel"""

    def test_buffered_fifo_order(self):
        """Test that values come out in the order they went in"""
        ch = Channel(capacity=3)
        for v in (1, 2, 3):
            assert ch.send(v)
        assert len(ch) == 3
        assert [ch.receive() for _ in range(3)] == [(1, True), (2, True), (3, True)]

    def test_close_after_drain(self):
        """Test that a closed channel yields buffered values, then reports closed"""
        ch = Channel(capacity=2)
        ch.send("a")
        ch.close()
        assert ch.closed
        assert ch.receive() == ("a", True)
        assert ch.receive() == (None, False)
        assert ch.receive() == (None, False)

    def test_close_with_error_raises_after_drain(self):
        """Test that receivers get the close error once buffered values are gone"""
        ch = Channel(capacity=2)
        ch.send("a")
        ch.close(RuntimeError("producer failed"))
        assert isinstance(ch.error, RuntimeError)
        assert ch.receive() == ("a", True)
        with pytest.raises(RuntimeError, match="producer failed"):
            ch.receive()

    def test_close_with_error_raises_during_iteration(self):
        ch = Channel(capacity=1)
        ch.send(1)
        ch.close(ValueError("boom"))
        seen = []
        with pytest.raises(ValueError, match="boom"):
            for v in ch:
                seen.append(v)
        assert seen == [1]

    def test_plain_close_has_no_error(self):
        ch = Channel()
        ch.close()
        assert ch.error is None

    def test_iteration_stops_at_close(self):
        ch = Channel(capacity=3)
        for v in (1, 2, 3):
            ch.send(v)
        ch.close()
        assert list(ch) == [1, 2, 3]

    def test_send_on_closed_channel_raises(self):
        ch = Channel(capacity=1)
        ch.close()
        with pytest.raises(ChannelClosedError, match="send on closed channel"):
            ch.send(1)

    def test_double_close_raises(self):
        ch = Channel()
        ch.close()
        with pytest.raises(ChannelClosedError, match="close of closed channel"):
            ch.close()

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            Channel(capacity=-1)

    def test_cancelled_receive_consumes_nothing(self, canceled):
        """Test that an already cancelled token leaves the buffer intact"""
        ch = Channel(capacity=1)
        ch.send(5)
        assert ch.receive(canceled) == (None, False)
        assert ch.receive() == (5, True)

    def test_receive_unblocks_on_cancel(self):
        """Test that a blocked receive returns once the token is cancelled"""
        ch = Channel()
        token, _ = with_timeout(0.05)
        start = time.perf_counter()
        assert ch.receive(token) == (None, False)
        assert time.perf_counter() - start < WAIT_TIMEOUT

    def test_receive_from_another_thread(self):
        """Test a blocked receive wakes when a producer sends"""
        ch = Channel(capacity=1)
        received = []
        consumer = threading.Thread(target=lambda: received.append(ch.receive()))
        consumer.start()
        ch.send("hello")
        consumer.join(WAIT_TIMEOUT)
        assert received == [("hello", True)]

    def test_unbuffered_send_waits_for_receiver(self):
        """Test that an unbuffered send returns only after the value is taken"""
        ch = Channel()
        done = threading.Event()

        def producer():
            ch.send(1)
            done.set()

        worker = threading.Thread(target=producer, daemon=True)
        worker.start()
        assert not done.wait(0.05)
        assert ch.receive() == (1, True)
        assert done.wait(WAIT_TIMEOUT)

    def test_unbuffered_send_cancelled_retracts_value(self):
        """Test that a cancelled unbuffered send leaves nothing behind"""
        ch = Channel()
        token, _ = with_timeout(0.05)
        assert ch.send(1, token) is False
        assert len(ch) == 0

    def test_full_buffer_send_cancelled(self):
        ch = Channel(capacity=1)
        ch.send(1)
        token, _ = with_timeout(0.05)
        assert ch.send(2, token) is False
        assert ch.receive() == (1, True)
        assert len(ch) == 0
