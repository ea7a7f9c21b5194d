"""
Signal extractors for chain detection.

Each extractor is total: malformed input produces a sentinel (None, an
empty list) instead of an exception.
"""

import math
import re
from typing import Optional
from urllib.parse import urlsplit

from processing.chain_resolution.models import ChainRole, Coordinates
from processing.chain_resolution.patterns import ChainPatterns

EARTH_RADIUS_MILES = 3959.0

NON_DIGIT = re.compile(r"\D")
LOCATION_NUMBER = re.compile(r"#\d+")
# "Miami Subway", "Tampa Great Clips"
CITY_PREFIX = re.compile(r"^[A-Z][a-z]+\s+[A-Z]")
WHITESPACE = re.compile(r"\s")

LOCATION_NUMBER_LABEL = "location number (#)"
CITY_PREFIX_LABEL = "possible city prefix pattern"


class KnownChainMatcher:
    """Matches names against the table of well-known brand patterns."""

    def __init__(self, patterns: ChainPatterns):
        self.patterns = patterns.known_chains

    def match(self, name: str) -> Optional[str]:
        """Return the matched brand text from the first pattern that fires."""
        if not name:
            return None
        for pattern in self.patterns:
            found = pattern.search(name)
            if found:
                return found.group(0)
        return None


class FranchiseIndicatorDetector:
    """
    Detects franchise/location indicators in a business name.

    Terms are plain substrings of the lowercased name, so "east" fires in
    "Eastgate" and "of" in "Coffee". "#" only counts as "#<digits>".
    """

    def __init__(self, patterns: ChainPatterns):
        self.terms = patterns.franchise_indicators

    def detect(self, name: str) -> list[str]:
        """Return the de-duplicated indicators found, in vocabulary order."""
        if not name:
            return []

        lower_name = name.lower()
        found = []
        for term in self.terms:
            if term == "#":
                if LOCATION_NUMBER.search(name):
                    found.append(LOCATION_NUMBER_LABEL)
            elif term in lower_name:
                found.append(term)

        if CITY_PREFIX.match(name):
            found.append(CITY_PREFIX_LABEL)

        return list(dict.fromkeys(found))


def phone_prefix(phone: Optional[str], length: int = 7) -> Optional[str]:
    """Return the first `length` digits of a phone number (area code + exchange)."""
    if not phone:
        return None
    digits = NON_DIGIT.sub("", phone)
    return digits[:length] or None


def extract_domain(url: Optional[str]) -> Optional[str]:
    """
    Extract the hostname from a website, without a leading "www.".

    Schemeless input is treated as https and internationalized hostnames are
    returned in punycode. Malformed URLs return None.
    """
    if not url or not url.strip():
        return None

    url = url.strip()
    if not url.lower().startswith("http"):
        url = f"https://{url}"

    try:
        hostname = urlsplit(url).hostname
    except ValueError:
        return None

    if not hostname or WHITESPACE.search(hostname):
        return None
    if not hostname.isascii():
        try:
            hostname = hostname.encode("idna").decode("ascii")
        except UnicodeError:
            return None
    return re.sub(r"^www\.", "", hostname)


def haversine_miles(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in miles."""
    d_lat = math.radians(b.lat - a.lat)
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat))
        * math.cos(math.radians(b.lat))
        * math.sin(d_lng / 2) ** 2
    )
    h = min(1.0, h)
    return EARTH_RADIUS_MILES * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def classify_role(name: str, patterns: ChainPatterns) -> ChainRole:
    """Determine the role of a chain location from its name."""
    lower_name = (name or "").lower()

    if any(k in lower_name for k in patterns.headquarters_keywords):
        return ChainRole.HEADQUARTERS

    if any(k in lower_name for k in patterns.franchise_keywords) or LOCATION_NUMBER.search(name or ""):
        return ChainRole.FRANCHISE

    return ChainRole.BRANCH
