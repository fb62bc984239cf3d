"""
Middleware for about-ui requests.

    from aboutui.middleware import AccessLogMiddleware, FunctionMiddleware

    server.use(AccessLogMiddleware(log_format="json"))
"""

from .base import FunctionMiddleware, Middleware, MiddlewarePipeline, NextHandler, function_middleware
from .logging import AccessLogMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "FunctionMiddleware",
    "function_middleware",
    "AccessLogMiddleware",
    "RequestLog",
]
