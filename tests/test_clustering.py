"""
Tests for batch chain clustering.
"""

import pytest

from processing.chain_resolution import BusinessRecord, ChainRole, DisjointSet


def member_sets(clusters):
    return {frozenset(c.member_ids) for c in clusters}


class TestDisjointSet:

    def test_union_and_find(self):
        ds = DisjointSet()
        ds.union("a", "b")
        ds.union("c", "d")
        assert ds.connected("a", "b")
        assert not ds.connected("a", "c")

        ds.union("b", "d")
        assert ds.connected("a", "c")

    def test_singletons(self):
        ds = DisjointSet()
        ds.add("x")
        assert ds.find("x") == "x"
        assert ds.find("y") == "y"


class TestSweepClustering:

    def test_clusters(self, make_builder, miami_records):
        clusters = make_builder().build(miami_records)

        assert [c.cluster_id for c in clusters] == [
            "chain_subway", "chain_miami_subway", "chain_mcdonald's",
        ]
        subway = clusters[0]
        assert subway.member_ids == ["sub-4521", "sub-892"]
        assert subway.canonical_name == "subway"
        assert subway.confidence == pytest.approx(0.95)
        assert subway.metadata.phone_patterns == ["3055551", "3055552"]
        assert subway.metadata.address_cities == ["Miami"]
        assert subway.metadata.website_domain is None
        assert all(m.role == ChainRole.FRANCHISE for m in subway.members)

    def test_independents_produce_no_cluster(self, make_builder, miami_records):
        clustered = {i for c in make_builder().build(miami_records) for i in c.member_ids}
        assert "blue-bottle" not in clustered
        assert "red-rooster" not in clustered

    def test_invariants(self, make_builder, miami_records):
        clusters = make_builder().build(miami_records)
        seen = []
        for cluster in clusters:
            assert cluster.total_locations == len(cluster.members)
            assert 0.0 <= cluster.confidence <= 1.0
            seen.extend(cluster.member_ids)
        assert len(seen) == len(set(seen))

    def test_idempotent(self, make_builder, miami_records):
        builder = make_builder()
        first = [c.to_dict() for c in builder.build(miami_records)]
        second = [c.to_dict() for c in builder.build(miami_records)]
        assert first == second

    def test_duplicate_ids_clustered_once(self, make_builder):
        records = [
            BusinessRecord("1", "Subway #1"),
            BusinessRecord("1", "Subway #1"),
            BusinessRecord("2", "Subway #2"),
        ]
        clusters = make_builder().build(records)
        assert clusters[0].member_ids == ["1", "2"]

    def test_consistent_domain(self, make_builder):
        records = [
            BusinessRecord("1", "Subway #1", website="subway.com"),
            BusinessRecord("2", "Subway #2", website="https://www.subway.com/locations/2"),
        ]
        clusters = make_builder().build(records)
        assert clusters[0].metadata.website_domain == "subway.com"

    def test_conflicting_domains_cleared(self, make_builder):
        records = [
            BusinessRecord("1", "Subway #1", website="subway.com"),
            BusinessRecord("2", "Subway #2", website="subwayfranchisee.net"),
            BusinessRecord("3", "Subway #3", website="subway.com"),
        ]
        clusters = make_builder().build(records)
        assert clusters[0].total_locations == 3
        assert clusters[0].metadata.website_domain is None

    def test_parallel_and_blocking_match_default(self, make_builder, miami_records):
        expected = [c.to_dict() for c in make_builder().build(miami_records)]
        assert [c.to_dict() for c in make_builder(workers=3).build(miami_records)] == expected
        assert [c.to_dict() for c in make_builder(use_blocking=True).build(miami_records)] == expected


class TestConnectedClustering:

    def test_transitive_matches_merge(self, make_builder, miami_records):
        clusters = make_builder(clustering_mode="connected").build(miami_records)

        assert [c.cluster_id for c in clusters] == ["chain_subway", "chain_mcdonald's"]
        subway = clusters[0]
        # "Miami Subway" shares a phone prefix with Subway #4521
        assert subway.member_ids == ["sub-4521", "sub-892", "sub-miami"]
        assert subway.metadata.address_cities == ["Miami", "Miami Beach"]
        assert subway.confidence == pytest.approx(0.95)

    def test_order_independent(self, make_builder, miami_records):
        builder = make_builder(clustering_mode="connected")
        forward = builder.build(miami_records)
        backward = builder.build(list(reversed(miami_records)))
        assert member_sets(forward) == member_sets(backward)

    def test_pulled_in_member_gets_chain_role(self, make_builder):
        records = [
            BusinessRecord("sub-1", "Subway #1", phone="305-555-1000"),
            BusinessRecord("cafe", "corner cafe", phone="305-555-1234"),
        ]

        sweep = make_builder().build(records)
        assert sweep[0].member_ids == ["sub-1"]

        connected = make_builder(clustering_mode="connected").build(records)
        assert connected[0].member_ids == ["sub-1", "cafe"]
        assert connected[0].members[1].role == ChainRole.BRANCH

    def test_invariants(self, make_builder, miami_records):
        clusters = make_builder(clustering_mode="connected").build(miami_records)
        seen = [i for c in clusters for i in c.member_ids]
        assert len(seen) == len(set(seen))
        for cluster in clusters:
            assert cluster.total_locations == len(cluster.members)
