"""
=============================================================================
EXTERNAL COLLABORATORS
=============================================================================

Everything the about-ui source needs from the browser around it, expressed
as narrow interfaces. Nothing here is looked up globally: a Collaborators
bundle is built once and handed to the router and loaders.

    ┌────────────────────────┬──────────────────────────┬─────────────────┐
    │ Interface              │ Used by                  │ Default         │
    ├────────────────────────┼──────────────────────────┼─────────────────┤
    │ ResourceBundle         │ credits, terms, fallbacks│ packaged files  │
    │ LocalizedStrings       │ placeholder, proxy page  │ English table   │
    │ FileSystem             │ every loader             │ local disk      │
    │ ComponentManager       │ Crostini credits         │ directory tree  │
    │ CustomizationDocument  │ OEM EULA                 │ JSON manifest   │
    │ StatisticsProvider     │ ARC locale chain         │ static dict     │
    │ DemoResources          │ ARC terms/privacy policy │ directory       │
    │ CreditsProvider        │ credits host             │ packaged page   │
    │ UrlRegistry            │ URL listing              │ built-in list   │
    └────────────────────────┴──────────────────────────┴─────────────────┘

Each default is small enough to run the package stand-alone and to drive
from tests. Tests swap in fakes by constructing Collaborators directly.

=============================================================================
"""

import json
import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)
from urllib.parse import urlparse
from urllib.request import url2pathname

from .locale.fallback import extract_base_language


logger = logging.getLogger(__name__)


RESOURCES_DIR = Path(__file__).parent / "resources"


# =============================================================================
# RESOURCE BUNDLE
# =============================================================================

class ResourceId(Enum):
    """Packaged resources. The value is the file name under resources/."""
    TERMS_HTML = "terms.html"
    ABOUT_UI_CREDITS_HTML = "about_credits.html"
    ABOUT_UI_CREDITS_JS = "credits.js"
    KEYBOARD_UTILS_JS = "keyboard_utils.js"
    OS_CREDITS_HTML = "os_credits.html"


@runtime_checkable
class ResourceBundle(Protocol):
    """Packaged data. Both loads return "" when the resource is missing."""

    def load_resource_string(self, resource_id: ResourceId) -> str: ...

    def load_localized_resource_string(self, resource_id: ResourceId) -> str: ...


class PackagedResourceBundle:
    """
    Resources shipped inside the package.

    Localized lookups try, in order:

        resources/<locale>/<file>      e.g. resources/fr-ca/terms.html
        resources/<language>/<file>    e.g. resources/fr/terms.html
        resources/<file>
    """

    def __init__(self, locale: str = "en-US", root: Optional[Path] = None):
        self.locale = locale
        self.root = Path(root) if root is not None else RESOURCES_DIR

    def _read(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except OSError:
            return None
        except UnicodeDecodeError as e:
            logger.warning(f"Packaged resource is not valid UTF-8: {path}: {e}")
            return None

    def load_resource_string(self, resource_id: ResourceId) -> str:
        text = self._read(self.root / resource_id.value)
        if text is None:
            logger.warning(f"Missing packaged resource: {resource_id.value}")
            return ""
        return text

    def load_localized_resource_string(self, resource_id: ResourceId) -> str:
        locale = self.locale.strip().lower().replace("_", "-")
        language = extract_base_language(locale)
        for directory in dict.fromkeys(d for d in (locale, language) if d):
            text = self._read(self.root / directory / resource_id.value)
            if text is not None:
                return text
        return self.load_resource_string(resource_id)


# =============================================================================
# LOCALIZED STRINGS
# =============================================================================

class MessageId(Enum):
    CROSTINI_CREDITS_PLACEHOLDER = "crostini_credits_placeholder"
    ABOUT_LINUX_PROXY_CONFIG_TITLE = "about_linux_proxy_config_title"
    ABOUT_LINUX_PROXY_CONFIG_BODY = "about_linux_proxy_config_body"
    PRODUCT_NAME = "product_name"


@runtime_checkable
class LocalizedStrings(Protocol):
    def get_string(self, message_id: MessageId, *substitutions: str) -> str: ...


_ENGLISH_MESSAGES: Dict[MessageId, str] = {
    MessageId.CROSTINI_CREDITS_PLACEHOLDER: (
        "Linux credits are not available. Turn on Linux and try again."
    ),
    MessageId.ABOUT_LINUX_PROXY_CONFIG_TITLE: "Proxy Configuration Help",
    MessageId.ABOUT_LINUX_PROXY_CONFIG_BODY: (
        "<p>When running {0} under a supported desktop environment, the "
        "system proxy settings will be used. However, either your system is "
        "not supported or there was a problem launching your system "
        "configuration.</p><p>But you can still configure via the command "
        "line. Please see <code>man {1}</code> for more information on flags "
        "and environment variables.</p>"
    ),
    MessageId.PRODUCT_NAME: "LT Browser",
}


class DefaultStrings:
    """
    English message table. Substitutions fill {0}, {1}, ... in order.

    Usage:
        strings = DefaultStrings(product_name="LT Browser")
        strings.get_string(MessageId.ABOUT_LINUX_PROXY_CONFIG_BODY, "LT Browser", "lt")
    """

    def __init__(self, product_name: Optional[str] = None, overrides: Optional[Dict[MessageId, str]] = None):
        self._messages = dict(_ENGLISH_MESSAGES)
        if product_name:
            self._messages[MessageId.PRODUCT_NAME] = product_name
        if overrides:
            self._messages.update(overrides)

    def get_string(self, message_id: MessageId, *substitutions: str) -> str:
        template = self._messages.get(message_id, "")
        if not substitutions:
            return template
        return template.format(*substitutions)


# =============================================================================
# FILE SYSTEM
# =============================================================================

@runtime_checkable
class FileSystem(Protocol):
    def read_file(self, path: str) -> Tuple[bool, bytes]: ...


class LocalFileSystem:
    """Reads from local disk. Never raises; failure is (False, b"")."""

    def read_file(self, path) -> Tuple[bool, bytes]:
        if not path:
            return False, b""
        try:
            with open(path, "rb") as f:
                return True, f.read()
        except OSError as e:
            logger.debug(f"Read failed for {path}: {e}")
            return False, b""


# =============================================================================
# COMPONENT MANAGER
# =============================================================================

class MountPolicy(Enum):
    MOUNT = "mount"
    DONT_MOUNT = "dont_mount"


class UpdatePolicy(Enum):
    FORCE = "force"
    DONT_FORCE = "dont_force"
    SKIP = "skip"


class ComponentError(Enum):
    NONE = "none"
    UNKNOWN_COMPONENT = "unknown_component"
    NOT_FOUND = "not_found"
    MOUNT_FAILURE = "mount_failure"


ComponentCallback = Callable[[ComponentError, Optional[Path]], None]


@runtime_checkable
class ComponentManager(Protocol):
    """
    Loads OS components on demand.

    The callback may run on any thread; callers hop back to their own
    context before touching their state.
    """

    def load(
        self,
        name: str,
        mount_policy: MountPolicy,
        update_policy: UpdatePolicy,
        callback: ComponentCallback,
    ) -> None: ...


class DirectoryComponentManager:
    """
    Components are sub-directories of a root directory; "mounting" one
    returns its directory. Components can be restricted to a known set.
    """

    def __init__(self, root, known_components: Optional[List[str]] = None):
        self.root = Path(root)
        self.known_components = set(known_components) if known_components else None

    def load(
        self,
        name: str,
        mount_policy: MountPolicy,
        update_policy: UpdatePolicy,
        callback: ComponentCallback,
    ) -> None:
        if self.known_components is not None and name not in self.known_components:
            callback(ComponentError.UNKNOWN_COMPONENT, None)
            return

        path = self.root / name
        if not path.is_dir():
            logger.info(f"Component {name!r} not installed under {self.root}")
            callback(ComponentError.NOT_FOUND, None)
            return

        if mount_policy is MountPolicy.DONT_MOUNT:
            callback(ComponentError.NONE, None)
            return

        callback(ComponentError.NONE, path)


# =============================================================================
# CUSTOMIZATION DOCUMENT
# =============================================================================

@runtime_checkable
class CustomizationDocument(Protocol):
    def is_ready(self) -> bool: ...

    def get_eula_page(self, locale: str) -> str: ...


def file_url_to_path(url: str) -> Optional[str]:
    """
    Convert a file:// URL to a local path, or None for any other URL.

    Examples:
        >>> file_url_to_path("file:///usr/share/oem/eula%20en.html")
        '/usr/share/oem/eula en.html'

        >>> file_url_to_path("https://example.com/eula.html") is None
        True
    """
    if not url:
        return None
    parsed = urlparse(url)
    if parsed.scheme != "file" or not parsed.path:
        return None
    if parsed.netloc and parsed.netloc != "localhost":
        return None
    return url2pathname(parsed.path)


class JsonCustomizationDocument:
    """
    OEM customization manifest.

    Format:
        {
            "version": "1.0",
            "setup_content": {
                "default": {"eula_page": "file:///oem/eula/en-US/eula.html"},
                "fr":      {"eula_page": "file:///oem/eula/fr/eula.html"}
            }
        }

    The manifest is read on first use, which happens on a worker thread.
    A missing or malformed manifest leaves the document permanently
    not ready.
    """

    def __init__(self, manifest_path):
        self.manifest_path = Path(manifest_path)
        self._lock = threading.Lock()
        self._loaded = False
        self._manifest: Optional[Dict[str, Any]] = None

    def _load(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            if not self._loaded:
                self._loaded = True
                try:
                    data = json.loads(self.manifest_path.read_text(encoding="utf-8"))
                except (OSError, ValueError) as e:
                    logger.warning(f"Customization manifest unusable: {self.manifest_path}: {e}")
                    data = None
                self._manifest = data if isinstance(data, dict) else None
            return self._manifest

    def is_ready(self) -> bool:
        return self._load() is not None

    def get_eula_page(self, locale: str) -> str:
        manifest = self._load() or {}
        content = manifest.get("setup_content") or {}
        normalized = locale.strip()
        for key in (normalized, normalized.lower(), extract_base_language(normalized), "default"):
            section = content.get(key)
            if isinstance(section, dict) and section.get("eula_page"):
                return section["eula_page"]
        return ""


# =============================================================================
# STATISTICS / DEMO RESOURCES / CREDITS
# =============================================================================

@runtime_checkable
class StatisticsProvider(Protocol):
    def get_machine_statistic(self, key: str) -> Optional[str]: ...


class StaticStatisticsProvider:
    """Machine statistics from a plain dict."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self._values = dict(values or {})

    def get_machine_statistic(self, key: str) -> Optional[str]:
        return self._values.get(key)


@runtime_checkable
class DemoResources(Protocol):
    def get_preinstalled_path(self, relative_path: str) -> Optional[Path]: ...


class DemoResourcesDirectory:
    """
    Preinstalled demo-mode resources. Offline documents exist only during
    demo-mode setup, which is modelled as "a root directory is configured".
    """

    def __init__(self, root=None):
        self.root = Path(root) if root else None

    def get_preinstalled_path(self, relative_path: str) -> Optional[Path]:
        if self.root is None:
            return None
        return self.root / relative_path


@runtime_checkable
class CreditsProvider(Protocol):
    def get_credits(self, include_scripts: bool) -> str: ...


class PackagedCredits:
    """Credits page from the resource bundle, optionally with its script."""

    def __init__(self, bundle: ResourceBundle, link_scheme: str = "chrome"):
        self.bundle = bundle
        self.link_scheme = link_scheme

    def get_credits(self, include_scripts: bool) -> str:
        page = self.bundle.load_resource_string(ResourceId.ABOUT_UI_CREDITS_HTML)
        if not include_scripts:
            return page

        script = f'<script src="{self.link_scheme}://credits/credits.js"></script>\n'
        marker = "</body>"
        index = page.rfind(marker)
        if index == -1:
            return page + script
        return page[:index] + script + page[index:]


# =============================================================================
# URL REGISTRY
# =============================================================================

@dataclass
class UrlRegistry:
    """Pages listed on the URL listing host."""

    hosts: List[str] = field(default_factory=list)
    internals_paths: List[str] = field(default_factory=list)
    debug_urls: List[str] = field(default_factory=list)

    @classmethod
    def default(cls) -> "UrlRegistry":
        return cls(
            hosts=[
                "about",
                "chrome-urls",
                "credits",
                "crostini-credits",
                "downloads",
                "flags",
                "gpu",
                "history",
                "linux-proxy-config",
                "net-internals",
                "os-credits",
                "settings",
                "terms",
                "version",
            ],
            internals_paths=["media", "session-service", "web-app"],
            debug_urls=[
                "chrome://badcastcrash/",
                "chrome://inducebrowsercrashforrealz/",
                "chrome://crash/",
                "chrome://crashdump/",
                "chrome://kill/",
                "chrome://hang/",
                "chrome://shorthang/",
                "chrome://gpuclean/",
                "chrome://gpucrash/",
                "chrome://gpuhang/",
                "chrome://memory-exhaust/",
                "chrome://ppapiflashcrash/",
                "chrome://ppapiflashhang/",
                "chrome://quit/",
                "chrome://restart/",
            ],
        )


# =============================================================================
# BUNDLE
# =============================================================================

@dataclass
class Collaborators:
    """
    Everything the router and loaders use from outside.

    Optional members model collaborators that may legitimately be absent:
    no component manager, no customization, no machine statistics.
    """

    resources: ResourceBundle
    strings: LocalizedStrings
    file_system: FileSystem
    credits: CreditsProvider
    urls: UrlRegistry
    demo_resources: DemoResources
    component_manager: Optional[ComponentManager] = None
    customization: Optional[CustomizationDocument] = None
    statistics: Optional[StatisticsProvider] = None

    @classmethod
    def defaults(cls, config) -> "Collaborators":
        """Build the stand-alone collaborators described by an AboutConfig."""
        resources = PackagedResourceBundle(locale=config.application_locale)

        statistics = None
        if config.device_region is not None:
            statistics = StaticStatisticsProvider({"region": config.device_region})

        return cls(
            resources=resources,
            strings=DefaultStrings(product_name=config.product_name),
            file_system=LocalFileSystem(),
            credits=PackagedCredits(resources, link_scheme=config.link_scheme),
            urls=UrlRegistry.default(),
            demo_resources=DemoResourcesDirectory(config.demo_resources_dir),
            component_manager=(
                DirectoryComponentManager(config.component_root)
                if config.component_root else None
            ),
            customization=(
                JsonCustomizationDocument(config.customization_manifest)
                if config.customization_manifest else None
            ),
            statistics=statistics,
        )
