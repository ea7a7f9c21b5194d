"""
Tunable parameters for chain resolution.
"""

from dataclasses import dataclass
from typing import Optional

from config.settings import Settings, settings as default_settings

CLUSTERING_MODES = ("sweep", "connected")


@dataclass(frozen=True)
class ResolverConfig:
    """Configuration for chain resolution."""
    # Confidence increments
    known_chain_weight: float = 0.4
    franchise_indicator_weight: float = 0.2
    similar_name_weight: float = 0.15
    shared_phone_weight: float = 0.1
    shared_domain_weight: float = 0.25
    proximity_weight: float = 0.1

    # Minimum name similarity for a candidate to count as a match
    name_similarity_threshold: float = 0.75

    # A record is a chain at this confidence, or with this many matches
    confidence_threshold: float = 0.5
    min_matches: int = 2

    # Area code + exchange
    phone_prefix_length: int = 7
    proximity_radius_miles: float = 50.0

    # "sweep" = single left-to-right pass, "connected" = union-find components
    clustering_mode: str = "sweep"

    # Restrict name scoring to records sharing a blocking key
    use_blocking: bool = False

    # Threads used to scan the candidate pool
    workers: int = 1

    def __post_init__(self):
        weights = {
            "known_chain_weight": self.known_chain_weight,
            "franchise_indicator_weight": self.franchise_indicator_weight,
            "similar_name_weight": self.similar_name_weight,
            "shared_phone_weight": self.shared_phone_weight,
            "shared_domain_weight": self.shared_domain_weight,
            "proximity_weight": self.proximity_weight,
            "name_similarity_threshold": self.name_similarity_threshold,
            "confidence_threshold": self.confidence_threshold,
        }
        for name, value in weights.items():
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be between 0 and 1, got {value}")

        if self.min_matches < 1:
            raise ValueError(f"min_matches must be at least 1, got {self.min_matches}")
        if self.phone_prefix_length < 1:
            raise ValueError(
                f"phone_prefix_length must be at least 1, got {self.phone_prefix_length}"
            )
        if self.proximity_radius_miles < 0:
            raise ValueError(
                f"proximity_radius_miles cannot be negative, got {self.proximity_radius_miles}"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if self.clustering_mode not in CLUSTERING_MODES:
            raise ValueError(
                f"clustering_mode must be one of {CLUSTERING_MODES}, got {self.clustering_mode!r}"
            )

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ResolverConfig":
        """Build a config from environment-driven settings."""
        s = settings or default_settings
        return cls(
            known_chain_weight=s.CHAIN_KNOWN_CHAIN_WEIGHT,
            franchise_indicator_weight=s.CHAIN_FRANCHISE_INDICATOR_WEIGHT,
            similar_name_weight=s.CHAIN_SIMILAR_NAME_WEIGHT,
            shared_phone_weight=s.CHAIN_SHARED_PHONE_WEIGHT,
            shared_domain_weight=s.CHAIN_SHARED_DOMAIN_WEIGHT,
            proximity_weight=s.CHAIN_PROXIMITY_WEIGHT,
            name_similarity_threshold=s.CHAIN_NAME_SIMILARITY_THRESHOLD,
            confidence_threshold=s.CHAIN_CONFIDENCE_THRESHOLD,
            min_matches=s.CHAIN_MIN_MATCHES,
            phone_prefix_length=s.CHAIN_PHONE_PREFIX_LENGTH,
            proximity_radius_miles=s.CHAIN_PROXIMITY_RADIUS_MILES,
            clustering_mode=s.CHAIN_CLUSTERING_MODE.lower(),
            use_blocking=s.CHAIN_USE_BLOCKING,
            workers=s.CHAIN_WORKERS,
        )
