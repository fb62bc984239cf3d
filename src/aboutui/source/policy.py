"""
=============================================================================
RESPONSE POLICIES (CSP AND CORS)
=============================================================================

Headers the embedding browser attaches to about-ui responses. The source
decides them per host; it never sees an actual HTTP exchange.

=============================================================================
CONTENT SECURITY POLICY
=============================================================================

Each directive has a default value. Hosts may override single directives,
or opt out of CSP altogether:

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Host                │ CSP                                            │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ credits             │ defaults, but trusted-types credits-static;   │
    │ os-credits          │ none (ChromeOS)                                │
    │ crostini-credits    │ none (ChromeOS)                                │
    │ everything else     │ defaults                                       │
    └─────────────────────┴────────────────────────────────────────────────┘

The two credits pages loaded from disk carry third-party markup that the
default policy would break, hence the opt-out.

=============================================================================
CROSS-ORIGIN ACCESS
=============================================================================

Only one cross-origin read is allowed: the OOBE page fetching the terms
host on ChromeOS. The origin is echoed back when the OOBE URL starts with
it:

    origin "chrome://oobe"    + host "terms"   →  "chrome://oobe"
    origin "chrome://oobe/"   + host "terms"   →  "chrome://oobe/"
    origin "chrome://evil"    + host "terms"   →  None
    origin "chrome://oobe"    + host "credits" →  None

=============================================================================
"""

from enum import Enum
from typing import Dict, Optional

from .constants import CREDITS_HOST, CROSTINI_CREDITS_HOST, OS_CREDITS_HOST, TERMS_HOST


DEFAULT_OOBE_URL = "chrome://oobe/"


class CSPDirective(Enum):
    """CSP directive names, in the order they are emitted."""
    CHILD_SRC = "child-src"
    CONNECT_SRC = "connect-src"
    DEFAULT_SRC = "default-src"
    FRAME_ANCESTORS = "frame-ancestors"
    FRAME_SRC = "frame-src"
    IMG_SRC = "img-src"
    MEDIA_SRC = "media-src"
    OBJECT_SRC = "object-src"
    SCRIPT_SRC = "script-src"
    STYLE_SRC = "style-src"
    WORKER_SRC = "worker-src"
    REQUIRE_TRUSTED_TYPES_FOR = "require-trusted-types-for"
    TRUSTED_TYPES = "trusted-types"


DEFAULT_CSP: Dict[CSPDirective, str] = {
    CSPDirective.CHILD_SRC: "child-src 'none';",
    CSPDirective.OBJECT_SRC: "object-src 'none';",
    CSPDirective.SCRIPT_SRC: "script-src chrome://resources 'self';",
    CSPDirective.FRAME_ANCESTORS: "frame-ancestors 'none';",
    CSPDirective.REQUIRE_TRUSTED_TYPES_FOR: "require-trusted-types-for 'script';",
    CSPDirective.TRUSTED_TYPES: "trusted-types;",
}

CREDITS_TRUSTED_TYPES = "trusted-types credits-static;"

_NO_CSP_HOSTS = frozenset({OS_CREDITS_HOST, CROSTINI_CREDITS_HOST})


def should_add_content_security_policy(host: str, chromeos: bool = False) -> bool:
    """False for the disk-loaded credits pages on ChromeOS, True otherwise."""
    if chromeos and host in _NO_CSP_HOSTS:
        return False
    return True


def get_content_security_policy(host: str, directive: CSPDirective) -> str:
    """
    Value of one CSP directive for a host; "" when the directive is unset.

    Examples:
        >>> get_content_security_policy("credits", CSPDirective.TRUSTED_TYPES)
        'trusted-types credits-static;'

        >>> get_content_security_policy("terms", CSPDirective.TRUSTED_TYPES)
        'trusted-types;'
    """
    if host == CREDITS_HOST and directive is CSPDirective.TRUSTED_TYPES:
        return CREDITS_TRUSTED_TYPES
    return DEFAULT_CSP.get(directive, "")


def build_content_security_policy(host: str, chromeos: bool = False) -> Optional[str]:
    """Full Content-Security-Policy header value, or None when disabled."""
    if not should_add_content_security_policy(host, chromeos=chromeos):
        return None
    values = (get_content_security_policy(host, directive) for directive in CSPDirective)
    return " ".join(value for value in values if value)


def get_access_control_allow_origin(
    host: str,
    origin: Optional[str],
    chromeos: bool = False,
    oobe_url: str = DEFAULT_OOBE_URL,
) -> Optional[str]:
    """Access-Control-Allow-Origin value for a request origin, or None."""
    if not origin:
        return None
    if chromeos and host == TERMS_HOST and oobe_url.startswith(origin):
        return origin
    return None
