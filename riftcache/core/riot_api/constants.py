"""Riot API constants and enum definitions."""

from enum import Enum
from typing import Dict, Union


class Region(str, Enum):
    """Riot API regions for regional routing."""

    AMERICAS = "americas"
    ASIA = "asia"
    EUROPE = "europe"
    SEA = "sea"


class Platform(str, Enum):
    """Riot API platforms for platform routing."""

    BR1 = "br1"
    EUN1 = "eun1"
    EUW1 = "euw1"
    JP1 = "jp1"
    KR = "kr"
    LA1 = "la1"
    LA2 = "la2"
    NA1 = "na1"
    OC1 = "oc1"
    PH2 = "ph2"
    RU = "ru"
    SG2 = "sg2"
    TH2 = "th2"
    TR1 = "tr1"
    TW2 = "tw2"
    VN2 = "vn2"


PLATFORM_TO_REGION: Dict[Platform, Region] = {
    Platform.EUW1: Region.EUROPE,
    Platform.EUN1: Region.EUROPE,
    Platform.TR1: Region.EUROPE,
    Platform.RU: Region.EUROPE,
    Platform.NA1: Region.AMERICAS,
    Platform.BR1: Region.AMERICAS,
    Platform.LA1: Region.AMERICAS,
    Platform.LA2: Region.AMERICAS,
    Platform.KR: Region.ASIA,
    Platform.JP1: Region.ASIA,
    Platform.OC1: Region.SEA,
    Platform.PH2: Region.SEA,
    Platform.SG2: Region.SEA,
    Platform.TH2: Region.SEA,
    Platform.TW2: Region.SEA,
    Platform.VN2: Region.SEA,
}

DEFAULT_REGION = Region.EUROPE


def parse_platform(value: Union[str, Platform]) -> Platform:
    """Parse a platform code such as 'EUW1'.

    :raises ValueError: If the code is not a known platform
    """
    if isinstance(value, Platform):
        return value
    try:
        return Platform(value.strip().lower())
    except ValueError:
        raise ValueError(f"Unknown platform region: {value!r}") from None


def regional_route(platform: Union[str, Platform]) -> Region:
    """Resolve the regional cluster serving a platform.

    Unrecognised platform codes fall back to Europe.
    """
    try:
        return PLATFORM_TO_REGION[parse_platform(platform)]
    except ValueError:
        return DEFAULT_REGION


# League queue identifier used when an entry omits its queueType
RANKED_SOLO_QUEUE = "RANKED_SOLO_5x5"
