"""
Locale helpers: country-to-region classification and the fallback chain
used to find offline Play Store documents.
"""

from .region import Region, classify, COUNTRY_REGIONS
from .fallback import (
    LocaleProbe,
    build_locale_chain,
    extract_base_language,
    read_device_region,
    REGION_KEY,
)

__all__ = [
    "Region",
    "classify",
    "COUNTRY_REGIONS",
    "LocaleProbe",
    "build_locale_chain",
    "extract_base_language",
    "read_device_region",
    "REGION_KEY",
]
