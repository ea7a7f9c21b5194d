"""
Pattern tables for chain detection.

Loaded from config/chain_patterns.yaml so the brand list and franchise
vocabulary can be tuned without redeploying the engine.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml

from config.settings import settings


@dataclass(frozen=True)
class ChainPatterns:
    """Immutable pattern configuration consumed by the signal extractors."""
    known_chains: tuple[re.Pattern, ...]
    franchise_indicators: tuple[str, ...]
    headquarters_keywords: tuple[str, ...]
    franchise_keywords: tuple[str, ...]

    @classmethod
    def from_dict(cls, data: dict) -> "ChainPatterns":
        """
        Build patterns from a parsed YAML document.

        Raises:
            ValueError: if a section is missing or a regex does not compile
        """
        if not isinstance(data, dict):
            raise ValueError("Chain pattern config must be a mapping")

        try:
            raw_chains = data["known_chains"]
            raw_indicators = data["franchise_indicators"]
            role_keywords = data.get("role_keywords") or {}
        except KeyError as e:
            raise ValueError(f"Chain pattern config missing section: {e}") from e

        compiled = []
        for pattern in raw_chains or []:
            try:
                compiled.append(re.compile(str(pattern), re.IGNORECASE))
            except re.error as e:
                raise ValueError(f"Invalid known-chain pattern {pattern!r}: {e}") from e

        return cls(
            known_chains=tuple(compiled),
            franchise_indicators=tuple(str(t).lower() for t in raw_indicators or []),
            headquarters_keywords=tuple(
                str(k).lower() for k in role_keywords.get("headquarters", [])
            ),
            franchise_keywords=tuple(
                str(k).lower() for k in role_keywords.get("franchise", [])
            ),
        )


def load_chain_patterns(path: Optional[Union[str, Path]] = None) -> ChainPatterns:
    """Load chain patterns from YAML config."""
    config_path = Path(path or settings.CHAIN_PATTERNS_PATH)
    with open(config_path, "r", encoding="utf-8") as f:
        return ChainPatterns.from_dict(yaml.safe_load(f))


_DEFAULT_PATTERNS: Optional[ChainPatterns] = None


def default_patterns() -> ChainPatterns:
    """Return the patterns from the configured YAML file, loading once."""
    global _DEFAULT_PATTERNS
    if _DEFAULT_PATTERNS is None:
        _DEFAULT_PATTERNS = load_chain_patterns()
    return _DEFAULT_PATTERNS
