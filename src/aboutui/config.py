"""
=============================================================================
ABOUT-UI CONFIGURATION
=============================================================================

Centralized configuration for the about-ui content source.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m aboutui chrome://terms/ --locale fr-CA          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── ABOUTUI_LOCALE=fr-CA python -m aboutui chrome://terms/    │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The values here replace what the embedding browser would otherwise hand
over through global state: the application locale, the device region, the
fixed on-disk paths and the branding used by the generated pages.

=============================================================================
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError


_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class AboutConfig:
    """
    Configuration for the about-ui content source.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    LOCALE
    - application_locale, device_region

    PLATFORM
    - chromeos

    ON-DISK CONTENT
    - os_credits_path, demo_resources_dir, customization_manifest,
      component_root

    THREADING
    - min_workers, max_workers

    LOGGING
    - log_level, log_format

    BRANDING
    - link_scheme, display_scheme, product_name, program_path, oobe_url

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOCALE
    # ─────────────────────────────────────────────────────────────────────

    application_locale: str = "en-US"
    """
    UI locale of the browser. Snapshotted by each loader when it is
    created; later changes do not affect loaders already in flight.
    """

    device_region: Optional[str] = None
    """
    Value reported for the "region" machine statistic. None means the
    statistic is absent and the locale chain defaults to "us".
    """

    # ─────────────────────────────────────────────────────────────────────
    # PLATFORM
    # ─────────────────────────────────────────────────────────────────────

    chromeos: bool = False
    """Enable the ChromeOS-only hosts and terms sub-paths."""

    # ─────────────────────────────────────────────────────────────────────
    # ON-DISK CONTENT
    # ─────────────────────────────────────────────────────────────────────

    os_credits_path: str = "/opt/google/chrome/resources/about_os_credits.html"
    """Fixed location of the OS credits page."""

    demo_resources_dir: Optional[str] = None
    """
    Preinstalled demo-mode resources directory holding offline Play Store
    terms. None outside demo-mode setup.
    """

    customization_manifest: Optional[str] = None
    """JSON manifest describing the OEM customization (EULA pages)."""

    component_root: Optional[str] = None
    """
    Directory where mountable components live, one sub-directory per
    component. None means no component manager is available.
    """

    # ─────────────────────────────────────────────────────────────────────
    # THREAD POOL SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    min_workers: int = 1
    """Worker threads created at startup for blocking reads."""

    max_workers: int = 4
    """Upper bound on worker threads. Reads are small and local."""

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    log_format: str = "text"
    """Access log format: 'json' or 'text'."""

    # ─────────────────────────────────────────────────────────────────────
    # BRANDING
    # ─────────────────────────────────────────────────────────────────────

    link_scheme: str = "chrome"
    """Scheme used in href attributes of the URL listing."""

    display_scheme: str = "lt-browser"
    """Scheme shown to the user in the URL listing."""

    product_name: str = "LT Browser"
    """Product name substituted into localized strings."""

    program_path: str = sys.argv[0] if sys.argv and sys.argv[0] else "aboutui"
    """Path of the running binary, named by the proxy configuration page."""

    oobe_url: str = "chrome://oobe/"
    """Origin allowed to read the terms host cross-origin."""

    @classmethod
    def from_env(cls) -> "AboutConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        ABOUTUI_LOCALE              Application locale (default: en-US)
        ABOUTUI_REGION              Device region statistic (default: unset)
        ABOUTUI_CHROMEOS            Enable ChromeOS hosts (default: false)
        ABOUTUI_OS_CREDITS_PATH     OS credits file
        ABOUTUI_DEMO_RESOURCES_DIR  Demo-mode resources directory
        ABOUTUI_CUSTOMIZATION       OEM customization manifest (JSON)
        ABOUTUI_COMPONENT_ROOT      Mountable components directory
        ABOUTUI_WORKERS             Max worker threads (default: 4)
        ABOUTUI_LOG_LEVEL           Logging level (default: INFO)
        ABOUTUI_LOG_FORMAT          Access log format (default: text)

        =====================================================================
        """
        defaults = cls()
        workers = os.getenv("ABOUTUI_WORKERS", str(defaults.max_workers))
        try:
            max_workers = int(workers)
        except ValueError:
            raise ConfigError(f"ABOUTUI_WORKERS must be an integer, got {workers!r}")

        return cls(
            application_locale=os.getenv("ABOUTUI_LOCALE", defaults.application_locale),
            device_region=os.getenv("ABOUTUI_REGION"),
            chromeos=_env_flag("ABOUTUI_CHROMEOS"),
            os_credits_path=os.getenv("ABOUTUI_OS_CREDITS_PATH", defaults.os_credits_path),
            demo_resources_dir=os.getenv("ABOUTUI_DEMO_RESOURCES_DIR"),
            customization_manifest=os.getenv("ABOUTUI_CUSTOMIZATION"),
            component_root=os.getenv("ABOUTUI_COMPONENT_ROOT"),
            max_workers=max_workers,
            log_level=os.getenv("ABOUTUI_LOG_LEVEL", defaults.log_level),
            log_format=os.getenv("ABOUTUI_LOG_FORMAT", defaults.log_format),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by AboutServer at construction so a bad value fails at
        startup rather than on the first request that needs it.
        """
        if not self.application_locale.strip():
            raise ConfigError("application_locale must not be empty")

        if self.min_workers < 1:
            raise ConfigError("min_workers must be >= 1")

        if self.max_workers < self.min_workers:
            raise ConfigError("max_workers must be >= min_workers")

        if self.log_format not in ("text", "json"):
            raise ConfigError(f"Invalid log_format: {self.log_format!r}. Use 'text' or 'json'.")

        if not self.os_credits_path:
            raise ConfigError("os_credits_path must not be empty")
