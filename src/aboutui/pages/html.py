"""
Shared page skeleton for the generated about-ui pages.

Pages are built by appending to a list of string parts and joining once:

    parts: List[str] = []
    append_header(parts, 0, "Title")
    parts.append("<style>...</style>")   # still inside <head>
    append_body(parts)
    parts.append("<p>content</p>")
    append_footer(parts)
    page = "".join(parts)
"""

import html
from typing import List


def append_header(parts: List[str], refresh: int, title: str) -> None:
    """Doctype, <head>, escaped title, charset and optional refresh."""
    parts.append("<!DOCTYPE HTML>\n<html>\n<head>\n")
    if title:
        parts.append(f"<title>{html.escape(title)}</title>\n")
    parts.append("<meta charset='utf-8'>\n")
    if refresh > 0:
        parts.append(f"<meta http-equiv='refresh' content='{refresh}'/>\n")


def append_body(parts: List[str]) -> None:
    parts.append("</head>\n<body>\n")


def append_footer(parts: List[str]) -> None:
    parts.append("</body>\n</html>\n")
