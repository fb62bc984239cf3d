"""
=============================================================================
ABOUTUI - Built-in "about" pages for an embedded browser
=============================================================================

This package answers in-process requests for a small set of virtual hosts
by generating or loading HTML and JavaScript on demand. There is no socket:
a request is (host, path, callback) and the answer arrives through the
callback, exactly once, on the main context.

=============================================================================
HOSTS
=============================================================================

    ┌──────────────────────┬──────────────────────────────────────────────┐
    │ Host                 │ Content                                      │
    ├──────────────────────┼──────────────────────────────────────────────┤
    │ chrome-urls          │ listing of every registered page             │
    │ credits              │ open-source credits page and its script      │
    │ os-credits           │ OS credits from disk (ChromeOS)              │
    │ crostini-credits     │ Linux credits from the Termina component     │
    │ terms                │ terms of service, OEM EULA, Play Store terms │
    │ linux-proxy-config   │ proxy configuration help (Linux, BSD)        │
    └──────────────────────┴──────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    aboutui/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m aboutui)
    ├── server.py            # AboutServer orchestrator
    ├── config.py            # AboutConfig dataclass
    ├── errors.py            # Exception hierarchy
    ├── capabilities.py      # Per-platform feature switches
    ├── collaborators.py     # External interfaces and defaults
    ├── core/
    │   ├── main_context.py  # The main context
    │   └── thread_pool.py   # Worker threads for disk reads
    ├── locale/
    │   ├── region.py        # Country → region
    │   └── fallback.py      # Locale fallback chain
    ├── source/
    │   ├── router.py        # (host, path) → strategy
    │   ├── request.py       # VirtualRequest, URL helpers
    │   ├── response.py      # OnceCallback, ResponseSink
    │   ├── mime_types.py    # MIME typing
    │   └── policy.py        # CSP and CORS
    ├── loaders/             # Asynchronous disk-backed content
    ├── pages/               # Generated HTML pages
    ├── middleware/          # Request middleware
    └── resources/           # Packaged HTML/JS

=============================================================================
QUICK START
=============================================================================

    from aboutui import AboutServer, AboutConfig

    with AboutServer(AboutConfig(chromeos=True)) as server:
        print(server.fetch("chrome://chrome-urls/").text)

=============================================================================
"""

from .server import AboutServer, SourceResponse
from .config import AboutConfig
from .capabilities import PlatformCapabilities
from .collaborators import Collaborators
from .errors import AboutUIError, CallbackAlreadyRunError, ConfigError, WrongContextError

__version__ = "1.0.0"

__all__ = [
    "AboutServer",
    "SourceResponse",
    "AboutConfig",
    "PlatformCapabilities",
    "Collaborators",
    "AboutUIError",
    "ConfigError",
    "WrongContextError",
    "CallbackAlreadyRunError",
    "__version__",
]
