"""
Chain Resolver

Decides whether a single business record belongs to a chain by combining
independent signals into a bounded confidence score.
"""

import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from typing import Optional, Sequence

from processing.chain_resolution.blocking import CandidateIndex
from processing.chain_resolution.canonicalizer import canonicalize, generate_cluster_id
from processing.chain_resolution.config import ResolverConfig
from processing.chain_resolution.models import (
    BusinessRecord,
    ChainDetectionResult,
    ChainRole,
    EvidenceKind,
    MatchEvidence,
)
from processing.chain_resolution.patterns import ChainPatterns, default_patterns
from processing.chain_resolution.signals import (
    FranchiseIndicatorDetector,
    KnownChainMatcher,
    classify_role,
    extract_domain,
    haversine_miles,
    phone_prefix,
)
from processing.chain_resolution.similarity import name_similarity

logger = logging.getLogger(__name__)


class ChainResolver:
    """
    Multi-signal chain resolver.

    Resolution strategy (weights from ResolverConfig):
    1. Known brand pattern in the name            +0.40
    2. Franchise/location indicators in the name  +0.20
    3. Each pool record with a similar name       +0.15 each
    4. Pool records sharing the phone prefix      +0.10
    5. Pool records sharing the website domain    +0.25
    6. Matched records within the proximity radius +0.10

    Confidence is capped at 1.0. A record is a chain when confidence reaches
    the threshold or it matched at least `min_matches` other records.

    Usage:
        resolver = ChainResolver()
        result = resolver.resolve(record, pool)
        if result.is_chain:
            print(result.cluster_id, result.role)
    """

    def __init__(
        self,
        config: Optional[ResolverConfig] = None,
        patterns: Optional[ChainPatterns] = None,
    ):
        self.config = config or ResolverConfig.from_settings()
        self.patterns = patterns or default_patterns()
        self.known_chain_matcher = KnownChainMatcher(self.patterns)
        self.indicator_detector = FranchiseIndicatorDetector(self.patterns)

    def resolve(
        self,
        subject: BusinessRecord,
        pool: Sequence[BusinessRecord],
        index: Optional[CandidateIndex] = None,
        executor: Optional[Executor] = None,
    ) -> ChainDetectionResult:
        """
        Resolve one record against a candidate pool.

        Args:
            subject: Record to classify
            pool: Candidate records (may include the subject itself)
            index: Blocking index over `pool`, built on demand when blocking is on
            executor: Thread pool used when `config.workers > 1`

        Returns:
            ChainDetectionResult with confidence, role and cluster ID
        """
        cfg = self.config
        evidence: list[MatchEvidence] = []
        matched: dict[str, BusinessRecord] = {}

        if cfg.use_blocking and index is None:
            index = CandidateIndex(pool, cfg.phone_prefix_length)

        # 1. Known chain patterns
        brand = self.known_chain_matcher.match(subject.name)
        if brand:
            evidence.append(MatchEvidence(
                EvidenceKind.KNOWN_CHAIN,
                f"Known chain pattern: {brand}",
                cfg.known_chain_weight,
            ))

        # 2. Franchise indicators in the name
        indicators = self.indicator_detector.detect(subject.name)
        if indicators:
            evidence.append(MatchEvidence(
                EvidenceKind.FRANCHISE_INDICATORS,
                f"Franchise indicators: {', '.join(indicators)}",
                cfg.franchise_indicator_weight,
            ))

        # 3. Similar names
        candidates = index.candidates_for(subject) if index is not None else pool
        for other, score in self._similar_names(subject, candidates, executor):
            matched.setdefault(other.id, other)
            evidence.append(MatchEvidence(
                EvidenceKind.SIMILAR_NAME,
                f'Similar name: "{other.name}" ({round(score * 100)}% match)',
                cfg.similar_name_weight,
            ))

        # 4. Shared phone prefix
        prefix = phone_prefix(subject.phone, cfg.phone_prefix_length)
        if prefix:
            if index is not None:
                phone_pool = index.lookup(("phone", prefix))
            else:
                phone_pool = [
                    r for r in pool
                    if phone_prefix(r.phone, cfg.phone_prefix_length) == prefix
                ]
            phone_matches = self._others(subject, phone_pool)
            if phone_matches:
                evidence.append(MatchEvidence(
                    EvidenceKind.SHARED_PHONE,
                    f"Shared phone pattern with {len(phone_matches)} businesses",
                    cfg.shared_phone_weight,
                ))
                for other in phone_matches:
                    matched.setdefault(other.id, other)

        # 5. Shared website domain
        domain = extract_domain(subject.website)
        if domain:
            if index is not None:
                domain_pool = index.lookup(("domain", domain))
            else:
                domain_pool = [r for r in pool if extract_domain(r.website) == domain]
            domain_matches = self._others(subject, domain_pool)
            if domain_matches:
                evidence.append(MatchEvidence(
                    EvidenceKind.SHARED_DOMAIN,
                    f"Shared website domain with {len(domain_matches)} businesses",
                    cfg.shared_domain_weight,
                ))
                for other in domain_matches:
                    matched.setdefault(other.id, other)

        # 6. Geographic clustering among matched records
        if subject.coordinates is not None:
            nearby = [
                r for r in matched.values()
                if r.coordinates is not None
                and haversine_miles(subject.coordinates, r.coordinates) <= cfg.proximity_radius_miles
            ]
            if nearby:
                evidence.append(MatchEvidence(
                    EvidenceKind.GEO_CLUSTER,
                    f"Geographic cluster: {len(nearby)} locations within "
                    f"{cfg.proximity_radius_miles:g} miles",
                    cfg.proximity_weight,
                ))

        confidence = 0.0
        for item in evidence:
            confidence += item.contribution
        # Rounded so accumulated float error cannot flip a threshold decision
        confidence = round(max(0.0, min(confidence, 1.0)), 6)

        is_chain = confidence >= cfg.confidence_threshold or len(matched) >= cfg.min_matches

        result = ChainDetectionResult(
            is_chain=is_chain,
            confidence=confidence,
            total_locations=len(matched) + 1 if is_chain else 1,
            match_reasons=[e.reason for e in evidence],
            matched_ids=list(matched),
        )
        if is_chain:
            result.role = classify_role(subject.name, self.patterns)
            result.cluster_id = generate_cluster_id(canonicalize(subject.name))
        else:
            result.role = ChainRole.INDEPENDENT

        for item in evidence:
            logger.debug(f"  [{item.kind.value}] +{item.contribution:.2f} {item.reason}")
        logger.info(
            f'Chain detection for "{subject.name}": is_chain={is_chain}, '
            f"confidence={confidence:.2f}, locations={result.total_locations}",
            extra={
                "record_id": subject.id,
                "is_chain": is_chain,
                "confidence": confidence,
                "cluster_id": result.cluster_id,
                "total_locations": result.total_locations,
            },
        )

        return result

    def _similar_names(
        self,
        subject: BusinessRecord,
        candidates: Sequence[BusinessRecord],
        executor: Optional[Executor] = None,
    ) -> list[tuple[BusinessRecord, float]]:
        """
        Find candidates whose names clear the similarity threshold.

        With multiple workers the candidates are split into contiguous shards;
        shard results are concatenated in shard order, so the output matches a
        serial scan exactly.
        """
        workers = self.config.workers
        if workers <= 1 or len(candidates) < workers * 2:
            return self._scan_names(subject, candidates)

        size = -(-len(candidates) // workers)
        shards = [candidates[i:i + size] for i in range(0, len(candidates), size)]
        scan = partial(self._scan_names, subject)

        if executor is not None:
            results = list(executor.map(scan, shards))
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool_executor:
                results = list(pool_executor.map(scan, shards))

        return [match for shard in results for match in shard]

    def _scan_names(
        self,
        subject: BusinessRecord,
        candidates: Sequence[BusinessRecord],
    ) -> list[tuple[BusinessRecord, float]]:
        threshold = self.config.name_similarity_threshold
        matches = []
        for other in candidates:
            if other.id == subject.id:
                continue
            score = name_similarity(subject.name, other.name)
            if score >= threshold:
                matches.append((other, score))
        return matches

    @staticmethod
    def _others(subject: BusinessRecord, records: Sequence[BusinessRecord]) -> list[BusinessRecord]:
        return [r for r in records if r.id != subject.id]
