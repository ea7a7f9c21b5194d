"""
Chain Intelligence Service

Public entry points consumed by the ingestion pipeline (incremental
single-record detection) and by batch re-clustering jobs.
"""

from typing import Iterable, Optional, Sequence

from processing.chain_resolution.clustering import ClusterBuilder
from processing.chain_resolution.config import ResolverConfig
from processing.chain_resolution.models import BusinessRecord, ChainCluster, ChainDetectionResult
from processing.chain_resolution.patterns import ChainPatterns
from processing.chain_resolution.resolver import ChainResolver


class ChainIntelligenceService:
    """
    Detects franchises and chain businesses.

    Stateless between calls: every call computes from the records it is
    given. Keeping clusters consistent across runs is the caller's job.

    Usage:
        service = ChainIntelligenceService()
        result = service.detect_chain(new_record, known_records)
        clusters = service.cluster_businesses(all_records)
    """

    def __init__(
        self,
        config: Optional[ResolverConfig] = None,
        patterns: Optional[ChainPatterns] = None,
    ):
        self.resolver = ChainResolver(config, patterns)
        self.builder = ClusterBuilder(self.resolver)

    @property
    def config(self) -> ResolverConfig:
        return self.resolver.config

    def detect_chain(
        self,
        subject: BusinessRecord,
        pool: Sequence[BusinessRecord],
    ) -> ChainDetectionResult:
        """Analyze a single business against a candidate pool."""
        return self.resolver.resolve(subject, pool)

    def cluster_businesses(self, records: Iterable[BusinessRecord]) -> list[ChainCluster]:
        """Cluster a batch of businesses into chain groups."""
        return self.builder.build(records)


_default_service: Optional[ChainIntelligenceService] = None


def get_service() -> ChainIntelligenceService:
    """Return the shared service built from environment settings."""
    global _default_service
    if _default_service is None:
        _default_service = ChainIntelligenceService()
    return _default_service


def detect_chain(
    subject: BusinessRecord,
    pool: Sequence[BusinessRecord],
    config: Optional[ResolverConfig] = None,
) -> ChainDetectionResult:
    """Resolve one record against a pool using the default or given config."""
    service = ChainIntelligenceService(config) if config else get_service()
    return service.detect_chain(subject, pool)


def cluster_businesses(
    records: Iterable[BusinessRecord],
    config: Optional[ResolverConfig] = None,
) -> list[ChainCluster]:
    """Cluster a batch of records using the default or given config."""
    service = ChainIntelligenceService(config) if config else get_service()
    return service.cluster_businesses(records)
