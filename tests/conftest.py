"""
pytest configuration and fixtures.
"""

import threading
from pathlib import Path
from typing import Dict, Generator, List, Optional

import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aboutui.capabilities import PlatformCapabilities
from aboutui.collaborators import (
    Collaborators,
    ComponentError,
    DefaultStrings,
    DemoResourcesDirectory,
    PackagedCredits,
    PackagedResourceBundle,
    StaticStatisticsProvider,
    UrlRegistry,
)
from aboutui.core import MainContext, ThreadPool
from aboutui.loaders import LoaderEnv
from aboutui.source.response import OnceCallback, RefCountedBytes
from aboutui.source.router import ContentSourceRouter


OS_CREDITS_PATH = "/opt/google/chrome/resources/about_os_credits.html"
DEMO_ROOT = "/demo"


# =============================================================================
# FAKE COLLABORATORS
# =============================================================================

class FakeFileSystem:
    """In-memory files. Records every path read, from any thread."""

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files = dict(files or {})
        self.reads: List[str] = []
        self._lock = threading.Lock()

    def read_file(self, path):
        path = str(path)
        with self._lock:
            self.reads.append(path)
        if path in self.files:
            return True, self.files[path]
        return False, b""


class FakeComponentManager:
    """Answers every load with a fixed result, inline or from another thread."""

    def __init__(self, error=ComponentError.NONE, mount_path=None, threaded=False):
        self.error = error
        self.mount_path = Path(mount_path) if mount_path else None
        self.threaded = threaded
        self.calls = []

    def load(self, name, mount_policy, update_policy, callback):
        self.calls.append((name, mount_policy, update_policy))
        if self.threaded:
            threading.Thread(target=callback, args=(self.error, self.mount_path)).start()
        else:
            callback(self.error, self.mount_path)


class FakeCustomization:
    def __init__(self, ready=True, eula_url=""):
        self.ready = ready
        self.eula_url = eula_url
        self.requested_locales: List[str] = []

    def is_ready(self):
        return self.ready

    def get_eula_page(self, locale):
        self.requested_locales.append(locale)
        return self.eula_url


class Recorder:
    """Collects deliveries and whether each ran on the main context."""

    def __init__(self, main: MainContext):
        self.main = main
        self.bodies: List[RefCountedBytes] = []
        self.on_main: List[bool] = []

    def callback(self, name: str = "recorder") -> OnceCallback:
        def record(body: RefCountedBytes) -> None:
            self.on_main.append(self.main.is_current())
            self.bodies.append(body)

        return OnceCallback(record, name=name)

    @property
    def count(self) -> int:
        return len(self.bodies)

    @property
    def text(self) -> str:
        assert self.count == 1, f"expected one delivery, got {self.count}"
        return self.bodies[0].decode()


def run_on_main(main: MainContext, func, *args, until=None, timeout: float = 5.0) -> bool:
    """Post func(*args) to the main context and drive it until `until()`."""
    main.post(func, *args)
    if until is None:
        main.run_until_idle()
        return True
    return main.run_until(until, timeout=timeout)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def main() -> MainContext:
    """A main context driven by the test thread."""
    return MainContext()


@pytest.fixture
def pool() -> Generator[ThreadPool, None, None]:
    pool = ThreadPool(min_workers=1, max_workers=2)
    pool.start()
    yield pool
    pool.shutdown(wait=True, timeout=5.0)


@pytest.fixture
def file_system() -> FakeFileSystem:
    return FakeFileSystem()


@pytest.fixture
def url_registry() -> UrlRegistry:
    return UrlRegistry(
        hosts=["terms", "credits", "chrome-urls", "credits"],
        internals_paths=["web-app", "media"],
        debug_urls=["chrome://crash/", "chrome://hang/"],
    )


@pytest.fixture
def collaborators(file_system, url_registry) -> Collaborators:
    resources = PackagedResourceBundle(locale="en-US")
    return Collaborators(
        resources=resources,
        strings=DefaultStrings(product_name="LT Browser"),
        file_system=file_system,
        credits=PackagedCredits(resources),
        urls=url_registry,
        demo_resources=DemoResourcesDirectory(DEMO_ROOT),
        component_manager=None,
        customization=None,
        statistics=StaticStatisticsProvider({"region": "us"}),
    )


@pytest.fixture
def env(main, pool, collaborators) -> LoaderEnv:
    return LoaderEnv(
        main=main,
        pool=pool,
        collaborators=collaborators,
        application_locale="en-US",
        os_credits_path=OS_CREDITS_PATH,
    )


@pytest.fixture
def recorder(main) -> Recorder:
    return Recorder(main)


@pytest.fixture
def chromeos() -> PlatformCapabilities:
    return PlatformCapabilities(chromeos=True, linux_proxy_config=True, terms_page=True)


@pytest.fixture
def router(env, chromeos) -> ContentSourceRouter:
    return ContentSourceRouter(env, chromeos, program_path="/usr/bin/lt-browser")
