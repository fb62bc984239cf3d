"""
=============================================================================
REGION CLASSIFIER
=============================================================================

Maps a two-letter country code to the coarse region used to pick offline
Play Store documents.

    ┌──────────┬──────────────────────────────────────────────────────────┐
    │ Region   │ Countries                                                │
    ├──────────┼──────────────────────────────────────────────────────────┤
    │ apac     │ au bd cn hk id in jp kh la lk mm mn my nz np ph sg th    │
    │          │ tw vn                                                    │
    │ emea     │ am az ch eg ge il is ke kg li mk na no rs ru tr tz ua    │
    │          │ ug za                                                    │
    │ eu       │ at be bg cz dk es fi gb gr hr hu ie it lt lu lv nl pl    │
    │          │ pt ro se si sk                                           │
    └──────────┴──────────────────────────────────────────────────────────┘

The Americas are deliberately absent: documents for them are the en-us
ones, which the fallback chain always ends with anyway. France has no
regional document of its own and is also left out, so a French device goes
straight from fr-fr to en-us.

=============================================================================
"""

from enum import Enum
from typing import Dict, Optional


class Region(str, Enum):
    """Coarse region. The value is the locale-directory name."""
    APAC = "apac"
    EMEA = "emea"
    EU = "eu"


APAC_COUNTRIES = (
    "au", "bd", "cn", "hk", "id", "in", "jp", "kh", "la", "lk",
    "mm", "mn", "my", "nz", "np", "ph", "sg", "th", "tw", "vn",
)

EMEA_COUNTRIES = (
    "na", "za", "am", "az", "ch", "eg", "ge", "il", "is", "ke",
    "kg", "li", "mk", "no", "rs", "ru", "tr", "tz", "ua", "ug",
)

EU_COUNTRIES = (
    "at", "be", "bg", "cz", "dk", "es", "fi", "gb", "gr", "hr",
    "hu", "ie", "it", "lt", "lu", "lv", "nl", "pl", "pt", "ro",
    "se", "si", "sk",
)


def _build_region_map() -> Dict[str, Region]:
    region_map: Dict[str, Region] = {}
    for codes, region in (
        (APAC_COUNTRIES, Region.APAC),
        (EMEA_COUNTRIES, Region.EMEA),
        (EU_COUNTRIES, Region.EU),
    ):
        for code in codes:
            # First table wins, matching insertion order above.
            region_map.setdefault(code, region)
    return region_map


COUNTRY_REGIONS: Dict[str, Region] = _build_region_map()


def classify(country_code: Optional[str]) -> Optional[Region]:
    """
    Return the region for a country code, or None when it has none.

    Examples:
        >>> classify("jp")
        <Region.APAC: 'apac'>

        >>> classify(" GB ")
        <Region.EU: 'eu'>

        >>> classify("us") is None
        True
    """
    if not country_code:
        return None
    return COUNTRY_REGIONS.get(country_code.strip().lower())
