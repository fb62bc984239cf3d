"""
=============================================================================
RESPONSE DELIVERY
=============================================================================

Every request ends with exactly one call of its response callback, on the
main context, with the body wrapped in RefCountedBytes.

=============================================================================
DELIVERY ANATOMY
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ResponseSink.deliver                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   str / bytes ──► RefCountedBytes.take_string()                     │
    │                            │                                         │
    │                            ▼                                         │
    │        on main context? ── yes ──► callback.run(body)   (inline)     │
    │                 │                                                    │
    │                 no ──► main.post(callback.run, body)    (deferred)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

OnceCallback enforces the "exactly once" half: a second run raises
CallbackAlreadyRunError instead of silently delivering twice.

=============================================================================
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Union

from ..core.main_context import MainContext
from ..errors import CallbackAlreadyRunError


logger = logging.getLogger(__name__)


Content = Union[str, bytes]


@dataclass(frozen=True)
class RefCountedBytes:
    """
    Immutable response body handed to callbacks.

    Python's own reference counting shares the buffer; the wrapper exists
    so callbacks receive one type no matter how the body was produced.
    """

    data: bytes = b""

    @classmethod
    def take_string(cls, content: Optional[Content]) -> "RefCountedBytes":
        """Wrap a str (UTF-8 encoded) or bytes body."""
        if content is None:
            return cls(b"")
        if isinstance(content, str):
            return cls(content.encode("utf-8"))
        return cls(bytes(content))

    def decode(self, encoding: str = "utf-8", errors: str = "replace") -> str:
        return self.data.decode(encoding, errors)

    def __len__(self) -> int:
        return len(self.data)


ResponseCallback = Callable[[RefCountedBytes], None]


class OnceCallback:
    """
    A callback that may run at most once.

    Usage:
        callback = OnceCallback(lambda body: print(body.decode()))
        callback.run(RefCountedBytes.take_string("hello"))
        callback.run(...)   # raises CallbackAlreadyRunError
    """

    def __init__(self, func: ResponseCallback, name: str = ""):
        self._func: Optional[ResponseCallback] = func
        self.name = name or getattr(func, "__qualname__", "callback")
        self._lock = threading.Lock()

    def is_null(self) -> bool:
        """True once the callback has been run."""
        return self._func is None

    def run(self, body: RefCountedBytes) -> None:
        with self._lock:
            func = self._func
            self._func = None
        if func is None:
            raise CallbackAlreadyRunError(f"Response callback {self.name!r} already ran")
        func(body)

    def __call__(self, body: RefCountedBytes) -> None:
        self.run(body)

    def __repr__(self) -> str:
        state = "spent" if self.is_null() else "pending"
        return f"OnceCallback({self.name!r}, {state})"


class ResponseSink:
    """Delivers response bodies on the main context."""

    def __init__(self, main: MainContext):
        self.main = main

    def deliver(self, content: Optional[Content], callback: OnceCallback) -> None:
        body = RefCountedBytes.take_string(content)
        logger.debug(f"Delivering {len(body)} bytes to {callback.name}")
        if self.main.is_current():
            callback.run(body)
        else:
            self.main.post(callback.run, body)
