"""Help page shown when the system proxy configuration cannot be used."""

import html
import os
from typing import List

from ..collaborators import LocalizedStrings, MessageId
from .html import append_body, append_footer, append_header


PAGE_STYLE = "<style>body { max-width: 70ex; padding: 2ex 5ex; }</style>"


def render_linux_proxy_config(strings: LocalizedStrings, program_path: str) -> str:
    """
    Render the explainer. The body names the product and the base name of
    the running binary (for "man <binary>").
    """
    parts: List[str] = []
    append_header(parts, 0, strings.get_string(MessageId.ABOUT_LINUX_PROXY_CONFIG_TITLE))
    parts.append(PAGE_STYLE)
    append_body(parts)

    binary = os.path.basename(program_path.rstrip("/\\")) or program_path
    parts.append(
        strings.get_string(
            MessageId.ABOUT_LINUX_PROXY_CONFIG_BODY,
            html.escape(strings.get_string(MessageId.PRODUCT_NAME)),
            html.escape(binary),
        )
    )
    append_footer(parts)
    return "".join(parts)
