"""
Chain Resolution Module

Groups business listings that are locations of the same chain, combining:
- Known brand patterns and franchise indicators in names
- Levenshtein name similarity over canonicalized names
- Shared phone prefixes and website domains
- Geographic proximity (Haversine)
"""

from processing.chain_resolution.clustering import ClusterBuilder, DisjointSet
from processing.chain_resolution.config import ResolverConfig
from processing.chain_resolution.models import (
    BusinessRecord,
    ChainCluster,
    ChainDetectionResult,
    ChainRole,
    ClusterMember,
    ClusterMetadata,
    Coordinates,
    EvidenceKind,
    MatchEvidence,
)
from processing.chain_resolution.patterns import ChainPatterns, load_chain_patterns
from processing.chain_resolution.resolver import ChainResolver
from processing.chain_resolution.service import (
    ChainIntelligenceService,
    cluster_businesses,
    detect_chain,
)

__all__ = [
    "BusinessRecord",
    "ChainCluster",
    "ChainDetectionResult",
    "ChainIntelligenceService",
    "ChainPatterns",
    "ChainResolver",
    "ChainRole",
    "ClusterBuilder",
    "ClusterMember",
    "ClusterMetadata",
    "Coordinates",
    "DisjointSet",
    "EvidenceKind",
    "MatchEvidence",
    "ResolverConfig",
    "cluster_businesses",
    "detect_chain",
    "load_chain_patterns",
]
