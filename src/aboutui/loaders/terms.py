"""
=============================================================================
TERMS LOADERS (ChromeOS)
=============================================================================

The terms host answers three sub-paths from disk. Online versions are
fetched by the setup UI itself; these loaders only ever read bundled or
preinstalled files.

    ┌────────────────────────┬──────────────────────────────┬─────────────────┐
    │ Sub-path               │ Source                       │ Fallback        │
    ├────────────────────────┼──────────────────────────────┼─────────────────┤
    │ oem                    │ OEM customization EULA page  │ packaged terms  │
    │ arc/terms              │ demo resources, locale chain │ nothing         │
    │ arc/privacy_policy     │ demo resources, locale chain │ nothing         │
    └────────────────────────┴──────────────────────────────┴─────────────────┘

The privacy policy is a PDF and is delivered base64-encoded so the page
that embeds it can build a data: URL.

=============================================================================
"""

import base64
import logging
from typing import ClassVar

from ..collaborators import ResourceId, file_url_to_path
from ..core.thread_pool import TaskPriority
from ..locale.fallback import build_locale_chain, read_device_region
from ..source.constants import ARC_PRIVACY_POLICY_PATH_FORMAT, ARC_TERMS_PATH_FORMAT
from ..source.response import Content
from .base import ContentLoader


logger = logging.getLogger(__name__)


class OemEulaLoader(ContentLoader):
    """EULA page named by the OEM customization document."""

    priority = TaskPriority.USER_VISIBLE

    def _begin(self) -> None:
        self._dispatch(self._load_oem_eula)

    def _load_oem_eula(self) -> bytes:
        customization = self.collaborators.customization
        if customization is None or not customization.is_ready():
            logger.debug("OEM customization not ready; using packaged terms")
            return b""

        url = customization.get_eula_page(self.locale)
        path = file_url_to_path(url)
        if path is None:
            logger.warning(f"OEM EULA page is not a local file: {url!r}")
            return b""

        ok, contents = self.collaborators.file_system.read_file(path)
        if not ok:
            logger.warning(f"Could not read OEM EULA from {path}")
            return b""
        return contents

    def _fallback_content(self) -> Content:
        return self.collaborators.resources.load_localized_resource_string(ResourceId.TERMS_HTML)


class LocalizedTermsLoader(ContentLoader):
    """
    Offline Play Store document looked up through the locale chain.

    The first locale whose file reads successfully wins. With no demo
    resources directory every probe fails.
    """

    priority = TaskPriority.USER_VISIBLE

    path_format: ClassVar[str] = ""
    document_name: ClassVar[str] = ""

    def _begin(self) -> None:
        self._dispatch(self._load_first_match)

    def _encode(self, contents: bytes) -> bytes:
        return contents

    def _load_first_match(self) -> bytes:
        region = read_device_region(self.collaborators.statistics)
        demo = self.collaborators.demo_resources

        for locale in build_locale_chain(self.locale, region):
            path = demo.get_preinstalled_path(self.path_format.format(locale=locale))
            if path is not None:
                ok, contents = self.collaborators.file_system.read_file(str(path))
                if ok:
                    logger.debug(f"Read offline Play Store {self.document_name} for: {locale}")
                    return self._encode(contents)
            logger.warning(f"Could not find offline Play Store {self.document_name} for: {locale}")

        logger.error(f"Failed to load offline Play Store {self.document_name}")
        return b""


class ArcTermsLoader(LocalizedTermsLoader):
    path_format = ARC_TERMS_PATH_FORMAT
    document_name = "terms"


class ArcPrivacyPolicyLoader(LocalizedTermsLoader):
    path_format = ARC_PRIVACY_POLICY_PATH_FORMAT
    document_name = "privacy policy"

    def _encode(self, contents: bytes) -> bytes:
        return base64.b64encode(contents)
