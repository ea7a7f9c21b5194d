"""
Business name normalization and canonicalization.

normalize() produces comparable text; canonicalize() additionally strips the
location-specific qualifiers that distinguish one store of a chain from
another, leaving the brand identity:

    "Subway #4521"          -> "subway"
    "Joe's Pizza - East"    -> "joe's pizza"
    "Great Clips of Tampa"  -> "great clips"
    "Jiffy Lube Store 12"   -> "jiffy lube"
"""

import re
from functools import lru_cache

APOSTROPHE_VARIANTS = re.compile(r"[‘’ʼ`´]")
NON_WORD = re.compile(r"[^\w\s']")
WHITESPACE = re.compile(r"\s+")

# Applied to the lowercased raw name, before punctuation is stripped
DIRECTIONAL_SUFFIX = re.compile(
    r"\s*[-–—]\s*(?:east|west|north|south|central|downtown|midtown)\b.*$"
)
LOCATION_NUMBER = re.compile(r"^\s*#\d+\s*|\s*#\d+\s*$")

# Applied to normalized text
TRAILING_CLAUSE = re.compile(r"\s+(?:of|at)\s+.+$")
LOCATION_TOKEN = re.compile(r"(?:^|\s+)(?:store|location|branch|unit)(?:\s*\d+)?$")


def _fold(name: str) -> str:
    return APOSTROPHE_VARIANTS.sub("'", (name or "").lower())


@lru_cache(maxsize=65536)
def normalize(name: str) -> str:
    """
    Normalize a business name for comparison.

    - Lowercase
    - Fold curly/backtick apostrophes to "'"
    - Replace punctuation other than apostrophes with spaces
    - Collapse whitespace
    """
    text = NON_WORD.sub(" ", _fold(name))
    return WHITESPACE.sub(" ", text).strip()


@lru_cache(maxsize=65536)
def canonicalize(name: str) -> str:
    """
    Extract the canonical (brand) name by removing location qualifiers.

    Returns the normalized name unchanged when nothing is stripped, and
    also when stripping would leave nothing behind.
    """
    text = _fold(name)
    text = DIRECTIONAL_SUFFIX.sub("", text)
    text = LOCATION_NUMBER.sub(" ", text)

    text = WHITESPACE.sub(" ", NON_WORD.sub(" ", text)).strip()
    text = TRAILING_CLAUSE.sub("", text)
    text = LOCATION_TOKEN.sub("", text).strip()

    return text or normalize(name)


def generate_cluster_id(canonical_name: str) -> str:
    """Generate a consistent cluster ID from a canonical name."""
    return "chain_" + WHITESPACE.sub("_", canonical_name.strip()).lower()
