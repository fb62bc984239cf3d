"""
=============================================================================
ABOUT-UI CONTENT SOURCE
=============================================================================

Request and response types, MIME typing and header policies for the
virtual hosts. The router lives in aboutui.source.router and is imported
from there; it depends on the loaders, which depend on this package.

=============================================================================
"""

from .mime_types import get_content_type, get_mime_type, is_text_type
from .policy import (
    CSPDirective,
    build_content_security_policy,
    get_access_control_allow_origin,
    get_content_security_policy,
    should_add_content_security_policy,
)
from .request import ContentFamily, VirtualRequest, parse_virtual_url, url_to_request_path
from .response import OnceCallback, RefCountedBytes, ResponseSink

__all__ = [
    # Request / response
    "ContentFamily",
    "VirtualRequest",
    "parse_virtual_url",
    "url_to_request_path",
    "OnceCallback",
    "RefCountedBytes",
    "ResponseSink",

    # MIME
    "get_mime_type",
    "get_content_type",
    "is_text_type",

    # Policies
    "CSPDirective",
    "should_add_content_security_policy",
    "get_content_security_policy",
    "build_content_security_policy",
    "get_access_control_allow_origin",
]
