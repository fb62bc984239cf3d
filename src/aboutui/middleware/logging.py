"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

One log line per delivered response, on the "aboutui.access" logger.

    TEXT FORMAT (default):
    ┌─────────────────────────────────────────────────────────────────────┐
    │ [18/Oct/2026:10:55:36 +0000] "chrome://terms/oem" 5123 4.21ms a1b2c3d4│
    │  ─────────────────────────   ─────────────────── ──── ────── ──────── │
    │  Timestamp                   URL                 Size Time   ID       │
    └─────────────────────────────────────────────────────────────────────┘

    JSON FORMAT:
    ┌─────────────────────────────────────────────────────────────────────┐
    │ {"request_id": "a1b2c3d4", "host": "terms", "path": "oem",          │
    │  "content_length": 5123, "duration_ms": 4.21, ...}                  │
    └─────────────────────────────────────────────────────────────────────┘

The duration runs from the moment the request enters the pipeline until
its callback runs, so it includes any worker-thread read.

Configure it like any logger:
    logging.getLogger("aboutui.access").setLevel(logging.INFO)

=============================================================================
"""

import dataclasses
import json
import logging
import time
import uuid
from dataclasses import dataclass
from typing import List, Optional

from .base import Middleware, NextHandler
from ..source.request import VirtualRequest
from ..source.response import OnceCallback, RefCountedBytes


logger = logging.getLogger("aboutui.access")


@dataclass
class RequestLog:
    """Structured access log entry."""

    request_id: str
    host: str
    path: str
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "host": self.host,
            "path": self.path,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        return (
            f'[{self.timestamp}] "chrome://{self.host}/{self.path}" '
            f'{self.content_length} {self.duration_ms:.2f}ms {self.request_id}'
        )


class AccessLogMiddleware(Middleware):
    """
    Logs every delivery.

    Usage:
        server.use(AccessLogMiddleware())                  # text
        server.use(AccessLogMiddleware(log_format="json"))
        server.use(AccessLogMiddleware(skip_hosts=["credits"]))
    """

    def __init__(
        self,
        log_format: str = "text",
        log_level: int = logging.INFO,
        skip_hosts: Optional[List[str]] = None,
    ):
        if log_format not in ("text", "json"):
            raise ValueError(f"Invalid log_format: {log_format!r}")
        self.log_format = log_format
        self.log_level = log_level
        self.skip_hosts = set(skip_hosts or [])

    def __call__(self, request: VirtualRequest, next: NextHandler) -> None:
        if request.host in self.skip_hosts:
            next(request)
            return

        request_id = str(uuid.uuid4())[:8]
        start_time = time.monotonic()
        original = request.callback

        def log_and_deliver(body: RefCountedBytes) -> None:
            duration_ms = (time.monotonic() - start_time) * 1000
            self._emit(RequestLog(
                request_id=request_id,
                host=request.host,
                path=request.path,
                content_length=len(body),
                duration_ms=duration_ms,
                timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
            ))
            original.run(body)

        wrapped = OnceCallback(log_and_deliver, name=original.name)
        try:
            next(dataclasses.replace(request, callback=wrapped))
        except Exception as e:
            duration_ms = (time.monotonic() - start_time) * 1000
            logger.error(
                f"Request failed: chrome://{request.host}/{request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

    def _emit(self, entry: RequestLog) -> None:
        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())
