"""
=============================================================================
CONTENT LOADER BASE
=============================================================================

Some about-ui content lives on disk and must be read without blocking the
main context. A loader is a short-lived object that owns one such request
from start to delivery.

=============================================================================
LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         LOADER LIFECYCLE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   CREATED ──► DISPATCHED ──► RESOLVED ──► DELIVERED                 │
    │      │            │              │              │                    │
    │   start()     _dispatch()   _run_blocking()  _respond_on_main()      │
    │   main ctx    main ctx      worker thread    main ctx                │
    │                                                                      │
    │   Loaders that can answer immediately go CREATED ──► DELIVERED.     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The state is written once on the worker (resolve) and read once on the
main context (respond). The pool's post-and-reply ordering makes the write
visible before the read, so no lock is needed.

=============================================================================
OWNERSHIP
=============================================================================

start() does not return the loader. Once dispatched, the only reference is
held by the reply closure queued in the thread pool; when the reply has run
the loader is garbage. There is nothing to cancel and nothing to leak.

=============================================================================
FAILURE
=============================================================================

A failing read never reaches the caller. Empty content after the blocking
step means "use the fallback", and the fallback is family specific:
packaged terms, packaged OS credits, a placeholder string, or nothing.
An exception in the blocking step is logged by the worker; the reply still
runs and sees empty content.

=============================================================================
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, ClassVar, Optional

from ..collaborators import Collaborators
from ..core.main_context import MainContext
from ..core.thread_pool import TaskPriority, ThreadPool
from ..source.response import Content, OnceCallback, ResponseSink


logger = logging.getLogger(__name__)


class LoaderPhase(Enum):
    CREATED = "created"
    DISPATCHED = "dispatched"
    RESOLVED = "resolved"
    DELIVERED = "delivered"


@dataclass
class LoaderState:
    """Per-request state owned by one loader."""

    requested_path: str
    pending_callback: Optional[OnceCallback]
    resolved_content: bytes = b""
    phase: LoaderPhase = LoaderPhase.CREATED


@dataclass
class LoaderEnv:
    """Shared services a loader needs. One per AboutServer."""

    main: MainContext
    pool: ThreadPool
    collaborators: Collaborators
    application_locale: str = "en-US"
    os_credits_path: str = ""
    sink: ResponseSink = field(init=False)

    def __post_init__(self):
        self.sink = ResponseSink(self.main)


BlockingWork = Callable[[], Optional[bytes]]


class ContentLoader(ABC):
    """
    Base class for asynchronous content loaders.

    Subclasses implement _begin() (runs on the main context) and usually
    dispatch a blocking read; they override _fallback_content() when empty
    content has a substitute.
    """

    priority: ClassVar[TaskPriority] = TaskPriority.USER_VISIBLE

    def __init__(self, path: str, callback: OnceCallback, env: LoaderEnv):
        self.env = env
        # Snapshot: later locale changes do not affect this request.
        self.locale = env.application_locale
        self.state = LoaderState(requested_path=path, pending_callback=callback)

    @classmethod
    def start(cls, path: str, callback: OnceCallback, env: LoaderEnv) -> None:
        """Create a loader for one request and start it on the main context."""
        env.main.check_current(f"{cls.__name__}.start")
        loader = cls(path, callback, env)
        logger.debug(f"{cls.__name__} started for path {path!r}")
        loader._begin()

    @property
    def path(self) -> str:
        return self.state.requested_path

    @property
    def collaborators(self) -> Collaborators:
        return self.env.collaborators

    @abstractmethod
    def _begin(self) -> None:
        """Start the request. Runs on the main context."""

    # =========================================================================
    # WORKER HOP
    # =========================================================================

    def _dispatch(self, work: BlockingWork) -> None:
        """Run work() on the pool, then _respond_on_main() on the main context."""
        self.state.phase = LoaderPhase.DISPATCHED
        self.env.pool.post_task_and_reply(
            lambda: self._run_blocking(work),
            self._respond_on_main,
            reply_context=self.env.main,
            priority=self.priority,
            name=f"{type(self).__name__}({self.path!r})",
        )

    def _run_blocking(self, work: BlockingWork) -> None:
        content = work()
        self.state.resolved_content = content or b""
        self.state.phase = LoaderPhase.RESOLVED

    # =========================================================================
    # DELIVERY
    # =========================================================================

    def _respond_now(self, content: Optional[Content]) -> None:
        """Answer without a worker hop. Main context only."""
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.state.resolved_content = content or b""
        self.state.phase = LoaderPhase.RESOLVED
        self._respond_on_main()

    def _respond_on_main(self) -> None:
        self.env.main.check_current(f"{type(self).__name__}._respond_on_main")

        content: Content = self.state.resolved_content
        if not content:
            content = self._fallback_content()

        callback = self.state.pending_callback
        self.state.pending_callback = None
        self.state.phase = LoaderPhase.DELIVERED
        if callback is None:
            logger.error(f"{type(self).__name__} responded twice for {self.path!r}")
            return
        self.env.sink.deliver(content, callback)

    def _fallback_content(self) -> Content:
        """Substitute for empty content. Runs on the main context."""
        return b""
