"""
Shared fixtures for chain resolution tests.
"""

import sys
from pathlib import Path

import pytest

# Ensure the project packages are importable when running pytest from the repo root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from processing.chain_resolution import (  # noqa: E402
    BusinessRecord,
    ChainResolver,
    ClusterBuilder,
    Coordinates,
    ResolverConfig,
    load_chain_patterns,
)

PATTERNS_PATH = ROOT / "config" / "chain_patterns.yaml"


@pytest.fixture
def patterns():
    return load_chain_patterns(PATTERNS_PATH)


@pytest.fixture
def config():
    return ResolverConfig()


@pytest.fixture
def resolver(config, patterns):
    return ChainResolver(config, patterns)


@pytest.fixture
def make_builder(patterns):
    """Build a ClusterBuilder with config overrides."""
    def _make(**overrides):
        return ClusterBuilder(ChainResolver(ResolverConfig(**overrides), patterns))
    return _make


@pytest.fixture
def miami_records():
    """Subway and McDonald's locations plus two independents."""
    return [
        BusinessRecord("sub-4521", "Subway #4521", phone="305-555-1000", city="Miami",
                       coordinates=Coordinates(25.7617, -80.1918)),
        BusinessRecord("sub-892", "Subway #892", phone="305-555-2000", city="Miami",
                       coordinates=Coordinates(25.7907, -80.1300)),
        BusinessRecord("sub-miami", "Miami Subway", phone="305-555-1999", city="Miami Beach"),
        BusinessRecord("blue-bottle", "Blue Bottle Coffee", phone="415-495-3394", city="Oakland"),
        BusinessRecord("mcd-100", "McDonald's #100", phone="212-555-0001", city="New York"),
        BusinessRecord("mcd-200", "McDonald's #200", phone="212-555-0099", city="Brooklyn"),
        BusinessRecord("red-rooster", "Red Rooster Diner", phone="646-792-9001", city="Harlem"),
    ]
