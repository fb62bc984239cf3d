"""
Unit tests for response bodies, single-shot callbacks and delivery.
"""

import threading

import pytest

from aboutui.errors import CallbackAlreadyRunError
from aboutui.source.response import OnceCallback, RefCountedBytes, ResponseSink


class TestRefCountedBytes:
    """Tests for RefCountedBytes."""

    def test_take_string_str(self):
        """Test str bodies are UTF-8 encoded."""
        body = RefCountedBytes.take_string("héllo")
        assert body.data == "héllo".encode("utf-8")
        assert body.decode() == "héllo"

    def test_take_string_bytes(self):
        body = RefCountedBytes.take_string(b"\x00\x01")
        assert body.data == b"\x00\x01"
        assert len(body) == 2

    def test_take_string_none(self):
        assert RefCountedBytes.take_string(None).data == b""

    def test_empty(self):
        assert len(RefCountedBytes()) == 0

    def test_decode_replaces_invalid(self):
        assert RefCountedBytes(b"a\xffb").decode() == "a�b"


class TestOnceCallback:
    """Tests for OnceCallback."""

    def test_runs_once(self):
        received = []
        callback = OnceCallback(received.append, name="once")
        assert not callback.is_null()

        callback.run(RefCountedBytes(b"x"))

        assert received == [RefCountedBytes(b"x")]
        assert callback.is_null()

    def test_second_run_raises(self):
        """Test a second delivery is an error, not a silent duplicate."""
        received = []
        callback = OnceCallback(received.append)
        callback(RefCountedBytes(b"1"))
        with pytest.raises(CallbackAlreadyRunError):
            callback(RefCountedBytes(b"2"))
        assert len(received) == 1

    def test_repr(self):
        callback = OnceCallback(lambda body: None, name="cb")
        assert repr(callback) == "OnceCallback('cb', pending)"
        callback.run(RefCountedBytes())
        assert repr(callback) == "OnceCallback('cb', spent)"


class TestResponseSink:
    """Tests for ResponseSink.deliver()."""

    def test_inline_on_main(self, main, recorder):
        """Test delivery on the main context runs the callback inline."""
        sink = ResponseSink(main)
        main.post(sink.deliver, "page", recorder.callback())
        main.run_until_idle()

        assert recorder.text == "page"
        assert recorder.on_main == [True]

    def test_deferred_from_other_thread(self, main, recorder):
        """Test delivery from another thread hops onto the main context."""
        sink = ResponseSink(main)
        thread = threading.Thread(target=sink.deliver, args=(b"page", recorder.callback()))
        thread.start()
        thread.join()

        assert recorder.count == 0
        assert main.run_until(lambda: recorder.count == 1)
        assert recorder.text == "page"
        assert recorder.on_main == [True]
