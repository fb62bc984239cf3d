"""
=============================================================================
CONTENT SOURCE ROUTER
=============================================================================

Maps a (virtual host, path) pair to the strategy that produces its content.

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          ROUTING FLOW                                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   resolve("terms", "arc/terms", callback)                            │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  family_for(host, path)                                      │   │
    │   │                                                              │   │
    │   │  host table (built once from PlatformCapabilities)          │   │
    │   │  ┌────────────────────────────────────────────────────────┐ │   │
    │   │  │ chrome-urls        → URL_LISTING                       │ │   │
    │   │  │ credits            → CREDITS                           │ │   │
    │   │  │ os-credits         → OS_CREDITS          (ChromeOS)    │ │   │
    │   │  │ crostini-credits   → CROSTINI_CREDITS    (ChromeOS)    │ │   │
    │   │  │ terms              → TERMS / sub-path    ← MATCH       │ │   │
    │   │  │ linux-proxy-config → LINUX_PROXY_CONFIG  (Linux, BSD)  │ │   │
    │   │  └────────────────────────────────────────────────────────┘ │   │
    │   │                                                              │   │
    │   │  terms sub-paths: oem, arc/terms ← MATCH, arc/privacy_policy│   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   ARC_TERMS → ArcTermsLoader.start(path, callback, env)             │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Two kinds of strategy sit behind a family:

1. SYNCHRONOUS generators return the content directly; the router hands it
   to the response sink, which runs the callback inline.

2. LOADERS take ownership of the callback and answer later, after a
   worker-thread read.

Hosts that are not in the table, and terms sub-paths that are not
recognised, get one empty response.

=============================================================================
"""

import logging
from typing import Callable, Dict, Optional, Type

from ..capabilities import PlatformCapabilities
from ..collaborators import ResourceId
from ..loaders import (
    ArcPrivacyPolicyLoader,
    ArcTermsLoader,
    ContentLoader,
    CrostiniCreditsLoader,
    LoaderEnv,
    OemEulaLoader,
    OSCreditsLoader,
)
from ..pages.proxy_config import render_linux_proxy_config
from ..pages.url_listing import render_url_listing
from .constants import (
    ARC_PRIVACY_POLICY_PATH,
    ARC_TERMS_PATH,
    CHROME_URLS_HOST,
    CREDITS_HOST,
    CREDITS_JS_PATH,
    CROSTINI_CREDITS_HOST,
    KEYBOARD_UTILS_PATH,
    LINUX_PROXY_CONFIG_HOST,
    OEM_EULA_PATH,
    OS_CREDITS_HOST,
    TERMS_HOST,
)
from .mime_types import get_mime_type
from .request import ContentFamily, VirtualRequest
from .response import Content, OnceCallback


logger = logging.getLogger(__name__)


# Generator: request path → content
Generator = Callable[[str], Content]


_TERMS_SUB_PATHS: Dict[str, ContentFamily] = {
    OEM_EULA_PATH: ContentFamily.OEM_EULA,
    ARC_TERMS_PATH: ContentFamily.ARC_TERMS,
    ARC_PRIVACY_POLICY_PATH: ContentFamily.ARC_PRIVACY_POLICY,
}


class ContentSourceRouter:
    """
    Dispatches about-ui requests.

    Usage:
        router = ContentSourceRouter(env, PlatformCapabilities.detect())
        main.post(router.resolve, "credits", "", OnceCallback(on_body))

    resolve() must run on the main context.
    """

    def __init__(
        self,
        env: LoaderEnv,
        capabilities: Optional[PlatformCapabilities] = None,
        link_scheme: str = "chrome",
        display_scheme: str = "lt-browser",
        program_path: str = "aboutui",
    ):
        self.env = env
        self.capabilities = capabilities or PlatformCapabilities()
        self.link_scheme = link_scheme
        self.display_scheme = display_scheme
        self.program_path = program_path

        self._hosts = self._build_host_table()
        self._generators: Dict[ContentFamily, Generator] = self._build_generators()
        self._loaders: Dict[ContentFamily, Type[ContentLoader]] = self._build_loaders()

    # =========================================================================
    # TABLES
    # =========================================================================

    def _build_host_table(self) -> Dict[str, ContentFamily]:
        caps = self.capabilities
        hosts = {
            CHROME_URLS_HOST: ContentFamily.URL_LISTING,
            CREDITS_HOST: ContentFamily.CREDITS,
        }
        if caps.terms_page:
            hosts[TERMS_HOST] = ContentFamily.TERMS
        if caps.linux_proxy_config:
            hosts[LINUX_PROXY_CONFIG_HOST] = ContentFamily.LINUX_PROXY_CONFIG
        if caps.chromeos:
            hosts[OS_CREDITS_HOST] = ContentFamily.OS_CREDITS
            hosts[CROSTINI_CREDITS_HOST] = ContentFamily.CROSTINI_CREDITS
        return hosts

    def _build_generators(self) -> Dict[ContentFamily, Generator]:
        generators: Dict[ContentFamily, Generator] = {
            ContentFamily.URL_LISTING: self._url_listing,
            ContentFamily.CREDITS: self._credits,
            ContentFamily.TERMS: self._packaged_terms,
            ContentFamily.UNKNOWN: lambda path: "",
        }
        if self.capabilities.linux_proxy_config:
            generators[ContentFamily.LINUX_PROXY_CONFIG] = self._linux_proxy_config
        return generators

    def _build_loaders(self) -> Dict[ContentFamily, Type[ContentLoader]]:
        if not self.capabilities.chromeos:
            return {}
        return {
            ContentFamily.OS_CREDITS: OSCreditsLoader,
            ContentFamily.CROSTINI_CREDITS: CrostiniCreditsLoader,
            ContentFamily.OEM_EULA: OemEulaLoader,
            ContentFamily.ARC_TERMS: ArcTermsLoader,
            ContentFamily.ARC_PRIVACY_POLICY: ArcPrivacyPolicyLoader,
        }

    @property
    def hosts(self):
        """Hosts this router answers for, sorted."""
        return sorted(self._hosts)

    # =========================================================================
    # DISPATCH
    # =========================================================================

    def family_for(self, host: str, path: str) -> ContentFamily:
        """
        Content family for a request.

        Examples (ChromeOS):
            family_for("terms", "")          → TERMS
            family_for("terms", "oem")       → OEM_EULA
            family_for("terms", "bogus")     → UNKNOWN
            family_for("nope", "")           → UNKNOWN
        """
        family = self._hosts.get(host, ContentFamily.UNKNOWN)
        if family is ContentFamily.TERMS and path and self.capabilities.chromeos:
            return _TERMS_SUB_PATHS.get(path, ContentFamily.UNKNOWN)
        return family

    def resolve(self, host: str, path: str, callback: OnceCallback) -> None:
        """Produce content for (host, path) and deliver it to callback once."""
        self.env.main.check_current("ContentSourceRouter.resolve")
        family = self.family_for(host, path)
        logger.debug(f"Resolving {host}/{path} as {family.value}")

        loader = self._loaders.get(family)
        if loader is not None:
            loader.start(path, callback, self.env)
            return

        generator = self._generators.get(family, self._generators[ContentFamily.UNKNOWN])
        try:
            content = generator(path)
        except Exception as e:
            # The callback still runs once, with an empty body.
            logger.exception(f"Generator for {host}/{path} failed: {e}")
            content = ""
        self.env.sink.deliver(content, callback)

    def handle(self, request: VirtualRequest) -> None:
        """Resolve a VirtualRequest. Same contract as resolve()."""
        self.resolve(request.host, request.path, request.callback)

    def mime_type(self, path: str) -> str:
        return get_mime_type(path, chromeos=self.capabilities.chromeos)

    # =========================================================================
    # SYNCHRONOUS GENERATORS
    # =========================================================================

    def _url_listing(self, path: str) -> Content:
        return render_url_listing(
            self.env.collaborators.urls,
            link_scheme=self.link_scheme,
            display_scheme=self.display_scheme,
        )

    def _credits(self, path: str) -> Content:
        resources = self.env.collaborators.resources
        if path == CREDITS_JS_PATH:
            return resources.load_resource_string(ResourceId.ABOUT_UI_CREDITS_JS)
        if path == KEYBOARD_UTILS_PATH and self.capabilities.chromeos:
            return resources.load_resource_string(ResourceId.KEYBOARD_UTILS_JS)
        return self.env.collaborators.credits.get_credits(include_scripts=True)

    def _packaged_terms(self, path: str) -> Content:
        return self.env.collaborators.resources.load_localized_resource_string(ResourceId.TERMS_HTML)

    def _linux_proxy_config(self, path: str) -> Content:
        return render_linux_proxy_config(self.env.collaborators.strings, self.program_path)
