"""
Data models for chain resolution.

Records come in, detection results and clusters go out. Nothing here is
persisted; every object is created fresh per call.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ChainRole(Enum):
    """Role of a business within a chain."""
    HEADQUARTERS = "headquarters"
    BRANCH = "branch"
    FRANCHISE = "franchise"
    INDEPENDENT = "independent"


class EvidenceKind(Enum):
    """Signal that contributed confidence during resolution."""
    KNOWN_CHAIN = "known_chain"
    FRANCHISE_INDICATORS = "franchise_indicators"
    SIMILAR_NAME = "similar_name"
    SHARED_PHONE = "shared_phone"
    SHARED_DOMAIN = "shared_domain"
    GEO_CLUSTER = "geo_cluster"


@dataclass(frozen=True)
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""
    lat: float
    lng: float


@dataclass(frozen=True)
class BusinessRecord:
    """A business listing supplied by a collector."""
    id: str
    name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    website: Optional[str] = None
    coordinates: Optional[Coordinates] = None


@dataclass
class MatchEvidence:
    """One reason plus the confidence it added."""
    kind: EvidenceKind
    reason: str
    contribution: float


@dataclass
class ChainDetectionResult:
    """Result of resolving a single record against a candidate pool."""
    is_chain: bool = False
    confidence: float = 0.0
    cluster_id: Optional[str] = None
    total_locations: int = 1
    role: ChainRole = ChainRole.INDEPENDENT
    match_reasons: list[str] = field(default_factory=list)
    matched_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "is_chain": self.is_chain,
            "confidence": self.confidence,
            "cluster_id": self.cluster_id,
            "total_locations": self.total_locations,
            "role": self.role.value,
            "match_reasons": list(self.match_reasons),
        }

    def __repr__(self) -> str:
        if self.is_chain:
            return (
                f"<ChainDetectionResult({self.cluster_id}, {self.role.value}, "
                f"conf={self.confidence:.2f}, locations={self.total_locations})>"
            )
        return f"<ChainDetectionResult(independent, conf={self.confidence:.2f})>"


@dataclass
class ClusterMember:
    """A record assigned to a chain cluster."""
    id: str
    name: str
    role: ChainRole
    match_reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "match_reasons": list(self.match_reasons),
        }


@dataclass
class ClusterMetadata:
    """
    Aggregate contact data observed across a cluster's members.

    website_domain is None both when no member had a domain and when members
    disagree; once cleared by a conflicting domain it stays None.
    """
    phone_patterns: list[str] = field(default_factory=list)
    address_cities: list[str] = field(default_factory=list)
    website_domain: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "phone_patterns": list(self.phone_patterns),
            "address_cities": list(self.address_cities),
            "website_domain": self.website_domain,
        }


@dataclass
class ChainCluster:
    """A group of records resolved to the same chain."""
    cluster_id: str
    canonical_name: str
    confidence: float
    members: list[ClusterMember] = field(default_factory=list)
    metadata: ClusterMetadata = field(default_factory=ClusterMetadata)

    @property
    def total_locations(self) -> int:
        return len(self.members)

    @property
    def member_ids(self) -> list[str]:
        return [m.id for m in self.members]

    def to_dict(self) -> dict:
        return {
            "cluster_id": self.cluster_id,
            "canonical_name": self.canonical_name,
            "confidence": self.confidence,
            "total_locations": self.total_locations,
            "members": [m.to_dict() for m in self.members],
            "metadata": self.metadata.to_dict(),
        }

    def __repr__(self) -> str:
        return (
            f"<ChainCluster({self.cluster_id}, members={self.total_locations}, "
            f"conf={self.confidence:.2f})>"
        )
