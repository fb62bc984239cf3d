"""
=============================================================================
MIME TYPE DETECTION
=============================================================================

The about-ui source serves HTML pages plus a handful of scripts. Unlike a
file server it does not look at extensions: only the exact script paths it
knows about are JavaScript, and everything else is HTML.

    ┌───────────────────────┬──────────────────────────┬────────────────┐
    │ Path                  │ MIME type                │ Platform       │
    ├───────────────────────┼──────────────────────────┼────────────────┤
    │ credits.js            │ application/javascript   │ all            │
    │ stats.js              │ application/javascript   │ all            │
    │ strings.js            │ application/javascript   │ all            │
    │ keyboard_utils.js     │ application/javascript   │ ChromeOS only  │
    │ anything else         │ text/html                │ all            │
    └───────────────────────┴──────────────────────────┴────────────────┘

So "credits.html", "other.js" and "" are all text/html.

=============================================================================
"""

from .constants import CREDITS_JS_PATH, KEYBOARD_UTILS_PATH, STATS_JS_PATH, STRINGS_JS_PATH


JAVASCRIPT_MIME_TYPE = "application/javascript"
DEFAULT_MIME_TYPE = "text/html"

SCRIPT_PATHS = frozenset({CREDITS_JS_PATH, STATS_JS_PATH, STRINGS_JS_PATH})
CHROMEOS_SCRIPT_PATHS = SCRIPT_PATHS | {KEYBOARD_UTILS_PATH}


def get_mime_type(path: str, chromeos: bool = False) -> str:
    """
    Get the MIME type for a request path.

    Examples:
        >>> get_mime_type("credits.js")
        'application/javascript'

        >>> get_mime_type("keyboard_utils.js")
        'text/html'

        >>> get_mime_type("keyboard_utils.js", chromeos=True)
        'application/javascript'
    """
    scripts = CHROMEOS_SCRIPT_PATHS if chromeos else SCRIPT_PATHS
    if path in scripts:
        return JAVASCRIPT_MIME_TYPE
    return DEFAULT_MIME_TYPE


def is_text_type(mime_type: str) -> bool:
    """Everything this source serves is text, but keep the check honest."""
    if mime_type.startswith("text/"):
        return True
    return mime_type in {
        "application/javascript",
        "application/json",
        "application/xml",
    }


def get_content_type(path: str, chromeos: bool = False, charset: str = "utf-8") -> str:
    """
    Full Content-Type value for a request path.

    Examples:
        >>> get_content_type("")
        'text/html; charset=utf-8'
    """
    mime_type = get_mime_type(path, chromeos=chromeos)
    if is_text_type(mime_type):
        return f"{mime_type}; charset={charset}"
    return mime_type
