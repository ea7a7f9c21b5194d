"""
Tests for resolver configuration and pattern loading.
"""

import pytest

from config.settings import Settings
from processing.chain_resolution.config import ResolverConfig
from processing.chain_resolution.patterns import ChainPatterns, load_chain_patterns


def test_defaults_match_documented_constants():
    config = ResolverConfig()
    assert config.known_chain_weight == 0.4
    assert config.franchise_indicator_weight == 0.2
    assert config.similar_name_weight == 0.15
    assert config.shared_phone_weight == 0.1
    assert config.shared_domain_weight == 0.25
    assert config.proximity_weight == 0.1
    assert config.name_similarity_threshold == 0.75
    assert config.confidence_threshold == 0.5
    assert config.phone_prefix_length == 7
    assert config.proximity_radius_miles == 50.0
    assert config.clustering_mode == "sweep"


@pytest.mark.parametrize("overrides", [
    {"known_chain_weight": 1.5},
    {"shared_domain_weight": -0.1},
    {"confidence_threshold": 2.0},
    {"phone_prefix_length": 0},
    {"proximity_radius_miles": -1},
    {"workers": 0},
    {"min_matches": 0},
    {"clustering_mode": "transitive"},
])
def test_invalid_values_rejected(overrides):
    with pytest.raises(ValueError):
        ResolverConfig(**overrides)


def test_from_settings():
    settings = Settings(
        CHAIN_SHARED_DOMAIN_WEIGHT=0.3,
        CHAIN_PHONE_PREFIX_LENGTH=6,
        CHAIN_CLUSTERING_MODE="CONNECTED",
        CHAIN_WORKERS=3,
    )
    config = ResolverConfig.from_settings(settings)
    assert config.shared_domain_weight == 0.3
    assert config.phone_prefix_length == 6
    assert config.clustering_mode == "connected"
    assert config.workers == 3


def test_default_pattern_file(patterns):
    assert len(patterns.known_chains) == 11
    assert "#" in patterns.franchise_indicators
    assert "hq" in patterns.headquarters_keywords
    assert "licensed" in patterns.franchise_keywords


def test_load_custom_pattern_file(tmp_path):
    path = tmp_path / "patterns.yaml"
    path.write_text(
        "known_chains:\n  - 'waffle\\s*house'\n"
        "franchise_indicators:\n  - express\n",
        encoding="utf-8",
    )
    patterns = load_chain_patterns(path)
    assert patterns.known_chains[0].search("WAFFLE HOUSE #9")
    assert patterns.franchise_indicators == ("express",)
    assert patterns.headquarters_keywords == ()


@pytest.mark.parametrize("data", [
    None,
    ["subway"],
    {"known_chains": ["subway"]},
    {"known_chains": ["(unclosed"], "franchise_indicators": []},
])
def test_malformed_pattern_config(data):
    with pytest.raises(ValueError):
        ChainPatterns.from_dict(data)
