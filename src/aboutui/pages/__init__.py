"""Pages generated on the fly: the URL listing and the proxy help page."""

from .html import append_body, append_footer, append_header
from .proxy_config import render_linux_proxy_config
from .url_listing import render_url_listing

__all__ = [
    "append_header",
    "append_body",
    "append_footer",
    "render_url_listing",
    "render_linux_proxy_config",
]
