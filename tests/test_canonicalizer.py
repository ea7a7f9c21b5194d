"""
Tests for business name normalization and canonicalization.
"""

import pytest

from processing.chain_resolution.canonicalizer import (
    canonicalize,
    generate_cluster_id,
    normalize,
)


@pytest.mark.parametrize("raw, expected", [
    ("McDonald's", "mcdonald's"),
    ("McDonald’s", "mcdonald's"),
    ("  Joe's   Pizza!! ", "joe's pizza"),
    ("H&R Block", "h r block"),
    ("Subway #4521", "subway 4521"),
    ("", ""),
])
def test_normalize(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize("raw, expected", [
    ("Subway #4521", "subway"),
    ("Subway #892", "subway"),
    ("#12 Subway", "subway"),
    ("Joe's Pizza - East", "joe's pizza"),
    ("Joe's Pizza - West", "joe's pizza"),
    ("Subway - Downtown Miami", "subway"),
    ("Subway #12 - Midtown", "subway"),
    ("Great Clips of Tampa", "great clips"),
    ("Starbucks at Union Station", "starbucks"),
    ("Jiffy Lube Store 12", "jiffy lube"),
    ("Planet Fitness Location", "planet fitness"),
    ("Corner Drugstore", "corner drugstore"),
    ("Blue Bottle Coffee", "blue bottle coffee"),
])
def test_canonicalize_strips_location_qualifiers(raw, expected):
    assert canonicalize(raw) == expected


def test_canonicalize_keeps_hyphenated_non_directional_names():
    assert canonicalize("Coca-Cola Bottling") == "coca cola bottling"
    assert canonicalize("Five Guys - Eastern Ave") == "five guys eastern ave"


def test_canonicalize_never_returns_empty_for_non_empty_names():
    # Stripping would consume the whole name
    assert canonicalize("Store #5") == "store 5"
    assert canonicalize("") == ""


def test_cluster_id_is_pure_function_of_canonical_name():
    assert generate_cluster_id("joe's pizza") == "chain_joe's_pizza"
    assert generate_cluster_id(canonicalize("Subway #4521")) == generate_cluster_id(
        canonicalize("Subway #892")
    )
