"""
The URL listing page: every registered host, every internals page, and the
debug URLs.

    <h2>List of Lt-Browser URLs</h2>
    <li><a href='chrome://credits/'>lt-browser://credits</a></li>
    ...
    <h2>List of lt-browser://internals pages</h2>
    <li><a href='chrome://internals/media'>lt-browser://internals/media</a></li>
    ...
    <h2>For Debug</h2>
    <li>chrome://crash/</li>          (text only, never a link)

Links use the scheme the browser actually routes ("chrome"); the visible
text uses the product's display scheme.
"""

import html
from typing import List

from ..collaborators import UrlRegistry
from .html import append_body, append_footer, append_header


DEFAULT_TITLE = "LT browser URLs"
DEFAULT_HEADING = "List of Lt-Browser URLs"

DEBUG_NOTE = (
    "<p>The following pages are for debugging purposes only. Because they "
    "crash or hang the renderer, they're not linked directly; you can type "
    "them into the address bar if you need them.</p>\n"
)


def _link(href: str, text: str) -> str:
    return f"<li><a href='{html.escape(href, quote=True)}'>{html.escape(text)}</a></li>\n"


def render_url_listing(
    registry: UrlRegistry,
    link_scheme: str = "chrome",
    display_scheme: str = "lt-browser",
    title: str = DEFAULT_TITLE,
    heading: str = DEFAULT_HEADING,
) -> str:
    parts: List[str] = []
    append_header(parts, 0, title)
    append_body(parts)

    parts.append(f"<h2>{html.escape(heading)}</h2>\n<ul>\n")
    for host in sorted(set(registry.hosts)):
        parts.append(_link(f"{link_scheme}://{host}/", f"{display_scheme}://{host}"))

    parts.append(
        f"</ul><a id=\"internals\"><h2>List of {html.escape(display_scheme)}://internals "
        "pages</h2></a>\n<ul>\n"
    )
    for path in sorted(set(registry.internals_paths)):
        parts.append(
            _link(f"{link_scheme}://internals/{path}", f"{display_scheme}://internals/{path}")
        )

    parts.append("</ul>\n<h2>For Debug</h2>\n")
    parts.append(DEBUG_NOTE)
    parts.append("<ul>")
    for url in registry.debug_urls:
        parts.append(f"<li>{html.escape(url)}</li>\n")
    parts.append("</ul>\n")

    append_footer(parts)
    return "".join(parts)
