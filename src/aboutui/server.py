"""
=============================================================================
ABOUT-UI SERVER
=============================================================================

Ties the pieces together: configuration, collaborators, the main context,
the worker pool, middleware and the router.

=============================================================================
ARCHITECTURE OVERVIEW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     ABOUT-UI ARCHITECTURE                            │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │                        ┌─────────────────┐                          │
    │                        │   AboutServer   │                          │
    │                        │  (Orchestrator) │                          │
    │                        └────────┬────────┘                          │
    │                                 │                                    │
    │            ┌────────────────────┼────────────────────┐              │
    │            ▼                    ▼                    ▼              │
    │    ┌──────────────┐    ┌──────────────┐    ┌──────────────┐        │
    │    │ MainContext  │    │  ThreadPool  │    │    Router    │        │
    │    │ (callbacks)  │    │ (disk reads) │    │ (dispatching)│        │
    │    └──────────────┘    └──────────────┘    └──────┬───────┘        │
    │                                                   │                 │
    │                                      ┌────────────┴────────────┐    │
    │                                      ▼                         ▼    │
    │                               ┌────────────┐           ┌───────────┐│
    │                               │ Generators │           │  Loaders  ││
    │                               └────────────┘           └───────────┘│
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
REQUEST LIFECYCLE
=============================================================================

1. resolve(host, path, callback) is called from any thread
2. The request hops onto the main context
3. Middleware runs, then the router picks a family
4. Generators answer inline; loaders read on a worker and hop back
5. The callback runs once, on the main context

fetch(url) wraps all of this into a blocking call for scripts and the CLI.

=============================================================================
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Union

from .capabilities import PlatformCapabilities
from .collaborators import Collaborators
from .config import AboutConfig
from .core.main_context import MainContext
from .core.thread_pool import ThreadPool
from .loaders.base import LoaderEnv
from .middleware.base import Middleware, MiddlewarePipeline, NextHandler
from .source.mime_types import get_content_type
from .source.policy import build_content_security_policy, get_access_control_allow_origin
from .source.request import VirtualRequest, split_virtual_url
from .source.response import OnceCallback, RefCountedBytes
from .source.router import ContentSourceRouter


logger = logging.getLogger(__name__)


Callback = Union[OnceCallback, Callable[[RefCountedBytes], None]]


@dataclass
class SourceResponse:
    """Result of AboutServer.fetch()."""

    url: str
    host: str
    path: str
    body: RefCountedBytes
    mime_type: str
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.body.decode()

    def __len__(self) -> int:
        return len(self.body)


class AboutServer:
    """
    The about-ui content source as a service.

    Usage:
        with AboutServer(AboutConfig(chromeos=True)) as server:
            response = server.fetch("chrome://terms/")
            print(response.mime_type, len(response))

        # Or asynchronously:
        server.resolve("credits", "", lambda body: print(body.decode()))
    """

    def __init__(
        self,
        config: Optional[AboutConfig] = None,
        collaborators: Optional[Collaborators] = None,
        capabilities: Optional[PlatformCapabilities] = None,
        configure_logging: bool = True,
    ):
        self.config = config or AboutConfig()
        self.config.validate()

        if configure_logging:
            self._setup_logging()

        self.collaborators = collaborators or Collaborators.defaults(self.config)
        self.capabilities = capabilities or PlatformCapabilities.from_config(self.config)

        self.main = MainContext()
        self.pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
        )
        self.env = LoaderEnv(
            main=self.main,
            pool=self.pool,
            collaborators=self.collaborators,
            application_locale=self.config.application_locale,
            os_credits_path=self.config.os_credits_path,
        )
        self.router = ContentSourceRouter(
            self.env,
            self.capabilities,
            link_scheme=self.config.link_scheme,
            display_scheme=self.config.display_scheme,
            program_path=self.config.program_path,
        )

        self._pipeline = MiddlewarePipeline()
        self._handler: Optional[NextHandler] = None
        self._running = False

    # =========================================================================
    # MIDDLEWARE
    # =========================================================================

    def use(self, middleware: Middleware) -> "AboutServer":
        """Add middleware. First added is outermost."""
        self._pipeline.add(middleware)
        self._handler = None
        return self

    def _get_handler(self) -> NextHandler:
        if self._handler is None:
            self._handler = self._pipeline.wrap(self.router.handle)
        return self._handler

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> "AboutServer":
        if self._running:
            return self
        logger.info(
            f"Starting about-ui source (locale={self.config.application_locale}, "
            f"chromeos={self.capabilities.chromeos}, hosts={', '.join(self.router.hosts)})"
        )
        self.pool.start()
        self.main.start()
        self._running = True
        return self

    def shutdown(self, timeout: Optional[float] = 5.0) -> None:
        """
        Stop the pool, then the main context.

        Pool tasks already queued still run and their replies still reach
        the main context, which drains them before it stops.
        """
        if not self._running:
            return
        logger.info("Shutting down about-ui source...")
        self._running = False
        self.pool.shutdown(wait=True, timeout=timeout)
        self.main.stop(timeout=timeout)
        logger.info("About-ui source stopped")

    def __enter__(self) -> "AboutServer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # =========================================================================
    # REQUESTS
    # =========================================================================

    def resolve(self, host: str, path: str, callback: Callback) -> None:
        """
        Request content for (host, path). Safe to call from any thread.

        The callback runs exactly once, on the main context.
        """
        if not self._running:
            raise RuntimeError("Server not started")
        if not isinstance(callback, OnceCallback):
            callback = OnceCallback(callback)
        request = VirtualRequest(host=host.lower(), path=path, callback=callback)
        self.main.call(self._dispatch, request)

    def resolve_url(self, url: str, callback: Callback) -> None:
        host, path = split_virtual_url(url)
        self.resolve(host, path, callback)

    def _dispatch(self, request: VirtualRequest) -> None:
        self._get_handler()(request)

    def fetch(self, url: str, timeout: float = 5.0, origin: Optional[str] = None) -> SourceResponse:
        """
        Resolve a URL and wait for the body.

        Raises:
            RuntimeError: when called on the main context (it would deadlock).
            TimeoutError: when no response arrives in time.
        """
        if self.main.is_current():
            raise RuntimeError("fetch() must not be called on the main context")

        host, path = split_virtual_url(url)
        done = threading.Event()
        received: Dict[str, RefCountedBytes] = {}

        def on_body(body: RefCountedBytes) -> None:
            received["body"] = body
            done.set()

        self.resolve(host, path, OnceCallback(on_body, name=f"fetch({url})"))
        if not done.wait(timeout):
            raise TimeoutError(f"No response for {url} within {timeout}s")

        return SourceResponse(
            url=url,
            host=host,
            path=path,
            body=received["body"],
            mime_type=self.router.mime_type(path),
            headers=self.headers_for(host, path, origin=origin),
        )

    def headers_for(self, host: str, path: str, origin: Optional[str] = None) -> Dict[str, str]:
        """Headers the embedder attaches to a response for (host, path)."""
        chromeos = self.capabilities.chromeos
        headers = {"Content-Type": get_content_type(path, chromeos=chromeos)}

        csp = build_content_security_policy(host, chromeos=chromeos)
        if csp:
            headers["Content-Security-Policy"] = csp

        allowed = get_access_control_allow_origin(
            host, origin, chromeos=chromeos, oobe_url=self.config.oobe_url
        )
        if allowed:
            headers["Access-Control-Allow-Origin"] = allowed
        return headers

    # =========================================================================
    # MONITORING
    # =========================================================================

    @property
    def stats(self) -> dict:
        return {
            "pool": self.pool.stats,
            "main": {
                "pending": self.main.pending,
                "tasks_run": self.main.tasks_run,
                "tasks_failed": self.main.tasks_failed,
            },
        }

    def _setup_logging(self) -> None:
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("aboutui").setLevel(level)
