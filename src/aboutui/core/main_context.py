"""
=============================================================================
MAIN EXECUTION CONTEXT
=============================================================================

The about-ui source has exactly one designated "main" context. Requests
start on it, loaders are created on it, and every response callback runs on
it. Blocking reads happen elsewhere (see thread_pool.py) and hop back here.

=============================================================================
HOW THE CONTEXT RUNS
=============================================================================

The context is a FIFO of callables plus the identity of the thread that
currently drains it:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        MainContext                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   any thread ── post(fn, *args) ──►  ┌───────────────┐              │
    │                                      │  task queue   │              │
    │   worker reply ── post(reply) ────►  └──────┬────────┘              │
    │                                             │                       │
    │                                             ▼                       │
    │                          owner thread runs tasks one at a time      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

There are two ways to own the context:

1. start() spawns a dedicated daemon thread that drains the queue until
   stop() is called. This is what AboutServer does.

2. run_until(predicate) / run_until_idle() make the *calling* thread the
   owner for the duration of the call. Tests use this to step the context
   deterministically without a second thread.

Tasks run strictly one after another, so state read only on the main
context never needs a lock.

=============================================================================
"""

import functools
import logging
import queue
import threading
import time
from typing import Any, Callable, Optional

from ..errors import WrongContextError


logger = logging.getLogger(__name__)


Task = Callable[[], None]


class MainContext:
    """
    Single-threaded task runner with thread affinity checks.

    Usage:
        main = MainContext()
        main.start()
        main.post(print, "runs on the main context")
        main.stop()
    """

    def __init__(self, name: str = "main"):
        self.name = name
        self._queue: "queue.Queue[Optional[Task]]" = queue.Queue()
        self._owner: Optional[int] = None
        self._owner_lock = threading.Lock()
        self._depth = 0
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

        # Metrics
        self.tasks_run = 0
        self.tasks_failed = 0

    # =========================================================================
    # AFFINITY
    # =========================================================================

    def is_current(self) -> bool:
        """True when called from the thread that currently owns the context."""
        return self._owner is not None and self._owner == threading.get_ident()

    def check_current(self, operation: str = "") -> None:
        """Raise WrongContextError unless running on the main context."""
        if not self.is_current():
            raise WrongContextError(self.name, operation)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # =========================================================================
    # SCHEDULING
    # =========================================================================

    def post(self, func: Callable[..., Any], *args: Any) -> None:
        """
        Schedule func(*args) to run later on the main context.

        Safe to call from any thread. Always defers, even when the caller is
        already on the main context.
        """
        self._queue.put(functools.partial(func, *args))

    def call(self, func: Callable[..., Any], *args: Any) -> None:
        """Run func(*args) now if on the main context, otherwise post it."""
        if self.is_current():
            func(*args)
        else:
            self.post(func, *args)

    @property
    def pending(self) -> int:
        """Number of queued tasks."""
        return self._queue.qsize()

    # =========================================================================
    # DEDICATED THREAD
    # =========================================================================

    def start(self) -> None:
        """Start a daemon thread that owns the context until stop()."""
        if self.is_running:
            return

        self._ready.clear()
        self._thread = threading.Thread(
            target=self._run_forever,
            name=f"{self.name}-context",
            daemon=True,
        )
        self._thread.start()
        self._ready.wait()
        logger.debug(f"Context {self.name!r} started")

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop the dedicated thread.

        Tasks already queued ahead of the stop marker still run; anything
        posted afterwards is never run (the response is simply dropped).
        """
        thread = self._thread
        if thread is None:
            return

        self._queue.put(None)  # Poison pill
        thread.join(timeout=timeout)
        self._thread = None
        logger.debug(f"Context {self.name!r} stopped")

    def _run_forever(self) -> None:
        self._acquire()
        self._ready.set()
        try:
            while True:
                task = self._queue.get()
                if task is None:
                    break
                self._run_task(task)
        finally:
            self._release()

    # =========================================================================
    # CALLER-DRIVEN LOOP
    # =========================================================================

    def run_until(
        self,
        predicate: Callable[[], bool],
        timeout: float = 5.0,
        poll_interval: float = 0.01,
    ) -> bool:
        """
        Drain tasks on the calling thread until predicate() becomes true.

        Returns the final value of predicate(); False means the timeout
        elapsed first.

        Raises:
            RuntimeError: if a dedicated thread already owns the context.
        """
        self._acquire()
        try:
            deadline = time.monotonic() + timeout
            while not predicate():
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                try:
                    task = self._queue.get(timeout=min(poll_interval, remaining))
                except queue.Empty:
                    continue
                if task is None:
                    # Stop marker meant for a dedicated thread; keep it queued.
                    self._queue.put(None)
                    break
                self._run_task(task)
            return predicate()
        finally:
            self._release()

    def run_until_idle(self) -> int:
        """Run every task queued right now, plus those they post. Returns the count."""
        self._acquire()
        ran = 0
        try:
            while True:
                try:
                    task = self._queue.get_nowait()
                except queue.Empty:
                    return ran
                if task is None:
                    self._queue.put(None)
                    return ran
                self._run_task(task)
                ran += 1
        finally:
            self._release()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _acquire(self) -> None:
        ident = threading.get_ident()
        with self._owner_lock:
            if self._owner is not None and self._owner != ident:
                raise RuntimeError(f"Context {self.name!r} is already owned by another thread")
            self._owner = ident
            self._depth += 1

    def _release(self) -> None:
        with self._owner_lock:
            self._depth -= 1
            if self._depth == 0:
                self._owner = None

    def _run_task(self, task: Task) -> None:
        # A failing task must not take the context down with it.
        try:
            task()
            self.tasks_run += 1
        except Exception as e:
            self.tasks_failed += 1
            logger.exception(f"Task on context {self.name!r} failed: {e}")
