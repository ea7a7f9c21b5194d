"""
Tests for the public chain intelligence entry points.
"""

from processing.chain_resolution import (
    BusinessRecord,
    ChainIntelligenceService,
    ResolverConfig,
    cluster_businesses,
    detect_chain,
)


def test_service_entry_points(patterns, miami_records):
    service = ChainIntelligenceService(ResolverConfig(), patterns)

    result = service.detect_chain(miami_records[0], miami_records)
    assert result.is_chain
    assert result.cluster_id == "chain_subway"

    clusters = service.cluster_businesses(miami_records)
    assert {c.cluster_id for c in clusters} == {"chain_subway", "chain_miami_subway", "chain_mcdonald's"}


def test_incremental_detection_against_existing_pool(miami_records):
    new_record = BusinessRecord("mcd-300", "McDonald's #300", phone="212-555-0150")
    result = detect_chain(new_record, miami_records, config=ResolverConfig())

    assert result.is_chain
    assert result.cluster_id == "chain_mcdonald's"
    assert result.total_locations == 3


def test_module_level_clustering(miami_records):
    clusters = cluster_businesses(miami_records, config=ResolverConfig(clustering_mode="connected"))
    assert [c.cluster_id for c in clusters] == ["chain_subway", "chain_mcdonald's"]


def test_result_serialization(miami_records):
    result = detect_chain(miami_records[3], miami_records, config=ResolverConfig())
    data = result.to_dict()

    assert data["is_chain"] is False
    assert data["role"] == "independent"
    assert data["cluster_id"] is None
    assert data["total_locations"] == 1
