"""
=============================================================================
BASE MIDDLEWARE INTERFACE
=============================================================================

Middleware wraps request handling in layers (Chain of Responsibility).
About-ui responses are asynchronous, so a handler returns nothing: the
answer arrives later through the request's callback. Middleware that wants
to see the answer wraps the callback and passes on a derived request.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                     REQUEST / DELIVERY FLOW                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   request ──► [AccessLog] ──► [Custom] ──► router.handle(request)   │
    │                   │              │                  │                │
    │             wraps callback   may replace            │                │
    │                   │          host / path            ▼                │
    │                   │                         loader / generator       │
    │                   │                                 │                │
    │   ◄── original ◄──┴──── wrapped callback ◄──────────┘                │
    │       callback          (runs on main context)                       │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Requests are frozen; middleware derives new ones with dataclasses.replace().

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional
import logging

from ..source.request import VirtualRequest


logger = logging.getLogger(__name__)


# Next middleware or the final handler (router.handle).
NextHandler = Callable[[VirtualRequest], None]


class Middleware(ABC):
    """
    Abstract base class for middleware.

    =========================================================================
    MIDDLEWARE ANATOMY
    =========================================================================

        class Rewrite(Middleware):
            def __call__(self, request: VirtualRequest, next: NextHandler) -> None:
                if request.host == "about":
                    request = dataclasses.replace(request, host="chrome-urls")
                next(request)

    Not calling next() short-circuits; the middleware then owns the
    callback and must run it exactly once itself.

    =========================================================================
    """

    @abstractmethod
    def __call__(self, request: VirtualRequest, next: NextHandler) -> None:
        """
        Process the request.

        Args:
            request: The incoming virtual request
            next: The next handler in the chain
        """

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Chains middleware around a final handler.

        pipeline = MiddlewarePipeline()
        pipeline.add(AccessLogMiddleware())    # first added = outermost
        handler = pipeline.wrap(router.handle)
        handler(request)
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        """Add middleware. Returns self for chaining."""
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        """
        Wrap a handler with every middleware in the pipeline.

        Given [MW1, MW2, MW3] the result calls MW1 → MW2 → MW3 → handler,
        so wrapping happens in reverse order.
        """
        current = handler
        for middleware in reversed(self._middleware):
            current = self._create_wrapped_handler(middleware, current)
        return current

    def _create_wrapped_handler(self, middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        def wrapped(request: VirtualRequest) -> None:
            middleware(request, next_handler)

        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)


class FunctionMiddleware(Middleware):
    """
    Wraps a plain function as middleware.

        def rewrite(request, next):
            next(dataclasses.replace(request, path=request.path.lower()))

        pipeline.add(FunctionMiddleware(rewrite))
    """

    def __init__(
        self,
        func: Callable[[VirtualRequest, NextHandler], None],
        name: Optional[str] = None,
    ):
        self._func = func
        self._name = name or func.__name__

    def __call__(self, request: VirtualRequest, next: NextHandler) -> None:
        self._func(request, next)

    @property
    def name(self) -> str:
        return self._name


def function_middleware(func: Callable[[VirtualRequest, NextHandler], None]) -> FunctionMiddleware:
    """Decorator form of FunctionMiddleware."""
    return FunctionMiddleware(func)
