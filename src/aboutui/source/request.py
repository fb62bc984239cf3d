"""
=============================================================================
VIRTUAL REQUESTS
=============================================================================

A request for the about-ui source never touches a socket. It is a
(host, path) pair plus the single-shot callback that receives the answer:

    chrome://terms/arc/terms?x=1
    ───┬──   ──┬──  ────┬───────
       │       │        │
    scheme   host     path  ("arc/terms?x=1")

The path handed to the source has no leading slash and is percent-decoded;
the query string, if any, stays attached. Content families are derived from
(host, path) by the router, never stored on the request.

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple
from urllib.parse import unquote, urlsplit

from .response import OnceCallback


class ContentFamily(Enum):
    """Kind of content a (host, path) pair produces."""
    URL_LISTING = "url_listing"
    CREDITS = "credits"
    OS_CREDITS = "os_credits"
    CROSTINI_CREDITS = "crostini_credits"
    TERMS = "terms"
    OEM_EULA = "oem_eula"
    ARC_TERMS = "arc_terms"
    ARC_PRIVACY_POLICY = "arc_privacy_policy"
    LINUX_PROXY_CONFIG = "linux_proxy_config"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class VirtualRequest:
    """
    One request for about-ui content.

    Attributes:
        host: Virtual host name, e.g. "credits".
        path: Request path without the leading slash, e.g. "credits.js".
        callback: Receives the response exactly once.
    """

    host: str
    path: str
    callback: OnceCallback

    @property
    def url(self) -> str:
        return f"chrome://{self.host}/{self.path}"


def url_to_request_path(url: str) -> str:
    """
    Strip scheme, host and the leading slash from a URL.

    Examples:
        >>> url_to_request_path("chrome://credits/credits.js")
        'credits.js'

        >>> url_to_request_path("chrome://terms/arc%2Fterms?v=2")
        'arc/terms?v=2'

        >>> url_to_request_path("chrome://terms")
        ''
    """
    parts = urlsplit(url)
    path = unquote(parts.path).lstrip("/")
    if parts.query:
        path = f"{path}?{parts.query}"
    return path


def split_virtual_url(url: str) -> Tuple[str, str]:
    """Return (host, path) for a virtual URL. The host is lowercased."""
    parts = urlsplit(url)
    return (parts.hostname or "").lower(), url_to_request_path(url)


def parse_virtual_url(url: str, callback: OnceCallback) -> VirtualRequest:
    """Build a VirtualRequest from a URL such as "chrome://terms/oem"."""
    host, path = split_virtual_url(url)
    return VirtualRequest(host=host, path=path, callback=callback)
