"""
Name similarity scoring.
"""

from rapidfuzz.distance import Levenshtein

from processing.chain_resolution.canonicalizer import canonicalize, normalize

CANONICAL_MATCH_SCORE = 0.95


def levenshtein_distance(s1: str, s2: str) -> int:
    """Edit distance with unit cost for insertion, deletion and substitution."""
    return Levenshtein.distance(s1, s2)


def name_similarity(name1: str, name2: str) -> float:
    """
    Score how alike two business names are, from 0 to 1.

    - Identical after normalization: 1.0
    - Identical canonical names ("Subway #12" vs "Subway #40"): 0.95
    - Otherwise 1 - edit distance / length of the longer normalized name
    """
    clean1 = normalize(name1)
    clean2 = normalize(name2)

    if clean1 == clean2:
        return 1.0

    if canonicalize(name1) == canonicalize(name2):
        return CANONICAL_MATCH_SCORE

    max_len = max(len(clean1), len(clean2))
    if max_len == 0:
        return 1.0

    return 1 - levenshtein_distance(clean1, clean2) / max_len
