"""
Platform capabilities.

Which hosts and sub-paths exist depends on the platform the browser runs
on. Rather than branching on sys.platform all over the router, the answer is
computed once into a PlatformCapabilities value and passed in.

    ┌──────────────────────┬──────────┬────────┬────────┬─────────┐
    │ Capability           │ ChromeOS │ Linux  │ BSD    │ Android │
    ├──────────────────────┼──────────┼────────┼────────┼─────────┤
    │ chromeos             │   yes    │   no   │   no   │   no    │
    │ linux_proxy_config   │   yes    │  yes   │  yes   │   no    │
    │ terms_page           │   yes    │  yes   │  yes   │   no    │
    └──────────────────────┴──────────┴────────┴────────┴─────────┘
"""

import sys
from dataclasses import dataclass


_PROXY_CONFIG_PLATFORMS = ("linux", "openbsd")


@dataclass(frozen=True)
class PlatformCapabilities:
    chromeos: bool = False
    """OS/Crostini credits, keyboard utils and the terms sub-paths."""

    linux_proxy_config: bool = False
    """The proxy configuration help page."""

    terms_page: bool = True
    """The terms host. Absent on Android."""

    @classmethod
    def detect(cls, platform: str = sys.platform, chromeos: bool = False) -> "PlatformCapabilities":
        """
        Derive capabilities from a sys.platform-style string.

        ChromeOS cannot be told apart from Linux by sys.platform, so it is
        passed explicitly.
        """
        platform = platform.lower()
        android = platform == "android"
        proxy = chromeos or (not android and platform.startswith(_PROXY_CONFIG_PLATFORMS))
        return cls(
            chromeos=chromeos,
            linux_proxy_config=proxy,
            terms_page=not android,
        )

    @classmethod
    def from_config(cls, config) -> "PlatformCapabilities":
        return cls.detect(chromeos=config.chromeos)
