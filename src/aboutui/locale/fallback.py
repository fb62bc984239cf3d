"""
=============================================================================
LOCALE FALLBACK CHAIN
=============================================================================

Offline Play Store documents live in per-locale directories. A request is
answered from the first directory that has the file, probing in this order:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                 build_locale_chain("de-AT", "at")                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   1. <ui base language>-<device region>   →  "de-at"                │
    │   2. region of the device country          →  "eu"                  │
    │   3. default                               →  "en-us"               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Step 2 is skipped for countries outside the region tables, and consecutive
repeats are collapsed so "en-US" on a US device probes "en-us" once.

The device region comes from the "region" machine statistic. Complex codes
such as "ca.ansi" only contribute their first piece.

=============================================================================
"""

import logging
import re
from typing import List, Optional, Tuple

from .region import classify


logger = logging.getLogger(__name__)


REGION_KEY = "region"
DEFAULT_REGION = "us"
DEFAULT_LOCALE = "en-us"

LocaleProbe = Tuple[str, ...]

_LOCALE_SEPARATORS = re.compile(r"[-_]")


def extract_base_language(locale: str) -> str:
    """
    Return the language part of a locale tag.

    Examples:
        >>> extract_base_language("fr-CA")
        'fr'

        >>> extract_base_language("zh_Hant_TW")
        'zh'
    """
    return _LOCALE_SEPARATORS.split(locale.strip(), maxsplit=1)[0]


def read_device_region(statistics) -> str:
    """
    Read the device region from the machine statistics.

    Args:
        statistics: A StatisticsProvider, or None when none is available.

    Returns:
        Lowercase country code; "us" when the statistic is missing.
    """
    region: Optional[str] = None
    if statistics is not None:
        region = statistics.get_machine_statistic(REGION_KEY)

    if region is None:
        logger.warning("Device region for Play Store ToS not found - defaulting to US.")
        return DEFAULT_REGION

    pieces = [piece.strip() for piece in region.split(".") if piece.strip()]
    if pieces:
        region = pieces[0]
    return region.strip().lower() or DEFAULT_REGION


def build_locale_chain(ui_locale: str, device_region: str) -> LocaleProbe:
    """
    Build the ordered locale probe list for offline documents.

    Args:
        ui_locale: Application locale, e.g. "fr-CA".
        device_region: Lowercase country code, e.g. "fr".

    Returns:
        Tuple of locale directory names, most specific first, always
        ending with "en-us".
    """
    region = device_region.strip().lower()
    candidates: List[str] = []

    language = extract_base_language(ui_locale).lower()
    if language:
        candidates.append(f"{language}-{region}")

    country_region = classify(region)
    if country_region is not None:
        candidates.append(country_region.value)

    candidates.append(DEFAULT_LOCALE)

    chain: List[str] = []
    for candidate in candidates:
        if not chain or chain[-1] != candidate:
            chain.append(candidate)
    return tuple(chain)
