"""
Chain cluster construction over a batch of records.

Two strategies:
- sweep: single left-to-right pass. Each chain-positive record joins the
  cluster keyed by its own canonical name.
- connected: union-find over the match graph. Records linked by any
  positive match (directly or transitively) end up in the same cluster,
  independent of input order.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import nullcontext
from typing import Hashable, Iterable, Optional

from processing.chain_resolution.blocking import CandidateIndex
from processing.chain_resolution.canonicalizer import canonicalize
from processing.chain_resolution.config import ResolverConfig
from processing.chain_resolution.models import (
    BusinessRecord,
    ChainCluster,
    ChainDetectionResult,
    ChainRole,
    ClusterMember,
)
from processing.chain_resolution.resolver import ChainResolver
from processing.chain_resolution.signals import classify_role, extract_domain, phone_prefix

logger = logging.getLogger(__name__)


class DisjointSet:
    """Union-find with path compression and union by rank."""

    def __init__(self):
        self.parent: dict[Hashable, Hashable] = {}
        self.rank: dict[Hashable, int] = {}

    def add(self, x: Hashable):
        if x not in self.parent:
            self.parent[x] = x
            self.rank[x] = 0

    def find(self, x: Hashable) -> Hashable:
        self.add(x)
        root = x
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[x] != root:
            self.parent[x], x = root, self.parent[x]
        return root

    def union(self, x: Hashable, y: Hashable):
        rx, ry = self.find(x), self.find(y)
        if rx == ry:
            return
        if self.rank[rx] < self.rank[ry]:
            rx, ry = ry, rx
        self.parent[ry] = rx
        if self.rank[rx] == self.rank[ry]:
            self.rank[rx] += 1

    def connected(self, x: Hashable, y: Hashable) -> bool:
        return self.find(x) == self.find(y)


class ClusterBuilder:
    """
    Groups a record set into chain clusters.

    Usage:
        builder = ClusterBuilder()
        clusters = builder.build(records)
    """

    def __init__(
        self,
        resolver: Optional[ChainResolver] = None,
        config: Optional[ResolverConfig] = None,
    ):
        self.resolver = resolver or ChainResolver(config)
        self.config = self.resolver.config

    def build(self, records: Iterable[BusinessRecord]) -> list[ChainCluster]:
        """Resolve every record and return the resulting clusters."""
        records = list(records)
        cfg = self.config

        index = CandidateIndex(records, cfg.phone_prefix_length) if cfg.use_blocking else None
        executor_context = (
            ThreadPoolExecutor(max_workers=cfg.workers) if cfg.workers > 1 else nullcontext()
        )

        with executor_context as executor:
            if cfg.clustering_mode == "connected":
                clusters = self._build_connected(records, index, executor)
            else:
                clusters = self._build_sweep(records, index, executor)

        logger.info(
            f"Clustered {len(records)} businesses into {len(clusters)} chain groups "
            f"(mode={cfg.clustering_mode}, blocking={cfg.use_blocking})"
        )
        return clusters

    def _build_sweep(self, records, index, executor) -> list[ChainCluster]:
        clusters: dict[str, ChainCluster] = {}
        domain_conflicts: set[str] = set()
        processed: set[str] = set()

        for record in records:
            if record.id in processed:
                continue

            result = self.resolver.resolve(record, records, index=index, executor=executor)
            if not result.is_chain:
                continue

            cluster = clusters.get(result.cluster_id)
            if cluster is None:
                cluster = ChainCluster(
                    cluster_id=result.cluster_id,
                    canonical_name=canonicalize(record.name),
                    confidence=result.confidence,
                )
                clusters[result.cluster_id] = cluster

            self._add_member(cluster, record, result.role, result.match_reasons, domain_conflicts)
            processed.add(record.id)

        return list(clusters.values())

    def _build_connected(self, records, index, executor) -> list[ChainCluster]:
        results: dict[str, ChainDetectionResult] = {}
        unique: list[BusinessRecord] = []
        anchors: dict[str, str] = {}
        components = DisjointSet()

        for record in records:
            if record.id in results:
                continue
            unique.append(record)
            components.add(record.id)

            result = self.resolver.resolve(record, records, index=index, executor=executor)
            results[record.id] = result
            if not result.is_chain:
                continue

            for matched_id in result.matched_ids:
                components.union(record.id, matched_id)
            # Same canonical name means same chain even without a direct match
            anchor = anchors.setdefault(result.cluster_id, record.id)
            components.union(anchor, record.id)

        groups: dict[Hashable, list[BusinessRecord]] = {}
        for record in unique:
            groups.setdefault(components.find(record.id), []).append(record)

        clusters = []
        domain_conflicts: set[str] = set()
        for members in groups.values():
            founders = [r for r in members if results[r.id].is_chain]
            if not founders:
                continue

            founder = founders[0]
            founder_result = results[founder.id]
            cluster = ChainCluster(
                cluster_id=founder_result.cluster_id,
                canonical_name=canonicalize(founder.name),
                confidence=founder_result.confidence,
            )
            for record in members:
                result = results[record.id]
                role = result.role
                if role == ChainRole.INDEPENDENT:
                    # Pulled in through another member's evidence
                    role = classify_role(record.name, self.resolver.patterns)
                self._add_member(cluster, record, role, result.match_reasons, domain_conflicts)
            clusters.append(cluster)

        return clusters

    def _add_member(
        self,
        cluster: ChainCluster,
        record: BusinessRecord,
        role: ChainRole,
        reasons: list[str],
        domain_conflicts: set[str],
    ):
        """Append a member and fold its contact data into cluster metadata."""
        cluster.members.append(ClusterMember(
            id=record.id,
            name=record.name,
            role=role,
            match_reasons=list(reasons),
        ))

        metadata = cluster.metadata
        if record.city and record.city not in metadata.address_cities:
            metadata.address_cities.append(record.city)

        prefix = phone_prefix(record.phone, self.config.phone_prefix_length)
        if prefix and prefix not in metadata.phone_patterns:
            metadata.phone_patterns.append(prefix)

        domain = extract_domain(record.website)
        if domain and cluster.cluster_id not in domain_conflicts:
            if metadata.website_domain is None:
                metadata.website_domain = domain
            elif metadata.website_domain != domain:
                logger.debug(
                    f"Conflicting domains in {cluster.cluster_id}: "
                    f"{metadata.website_domain} vs {domain}"
                )
                metadata.website_domain = None
                domain_conflicts.add(cluster.cluster_id)
