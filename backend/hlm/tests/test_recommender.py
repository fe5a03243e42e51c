"""
Tests for recommendation synthesis.
"""

import pytest

from hlm.contracts.recommendations import RecommendationType
from hlm.contracts.topology import (
    ClusterSuggestion,
    Gap,
    Orphan,
    Redundancy,
    Topology,
)
from hlm.recommender import generate_recommendations
from hlm.topo import topology_map


def _gap(tag_a="nlp", tag_b="vision", count_a=2, count_b=2):
    return Gap(
        gap_id="gap_0000000001",
        cluster_id="clst_0000000001",
        cluster_name="ml-nlp-vision",
        tag_a=tag_a,
        tag_b=tag_b,
        tag_a_count=count_a,
        tag_b_count=count_b,
    )


def _redundancy(similarity):
    return Redundancy(
        redundancy_id="rdnd_0000000001",
        unit_a="a",
        unit_b="b",
        similarity=similarity,
        keep_id="b",
        merge_id="a",
        keep_authority=0.8,
        merge_authority=0.1,
    )


class TestFillGap:

    def test_priority_grows_with_support(self):
        topology = Topology(topology_id="topo_0000000001", gaps=(_gap(), _gap(count_a=5, count_b=5)))
        recs = generate_recommendations(topology).recommendations

        assert [r.priority for r in recs] == [pytest.approx(0.7), pytest.approx(0.58)]

    def test_priority_clamped(self):
        topology = Topology(topology_id="topo_0000000001", gaps=(_gap(count_a=20, count_b=10),))
        rec = generate_recommendations(topology).recommendations[0]
        assert rec.priority == 1.0

    def test_payload(self):
        topology = Topology(topology_id="topo_0000000001", gaps=(_gap(),))
        rec = generate_recommendations(topology).recommendations[0]

        assert rec.rec_type is RecommendationType.FILL_GAP
        assert rec.data["suggested_tags"] == ["nlp", "vision"]
        assert rec.data["cluster_id"] == "clst_0000000001"
        assert rec.rec_id.startswith("rec_")


class TestMergeRedundant:

    def test_priority_is_similarity(self):
        topology = Topology(topology_id="topo_0000000001", redundancies=(_redundancy(0.87),))
        rec = generate_recommendations(topology).recommendations[0]

        assert rec.rec_type is RecommendationType.MERGE_REDUNDANT
        assert rec.priority == pytest.approx(0.87)
        assert rec.data["keep_id"] == "b"
        assert rec.data["merge_id"] == "a"
        assert rec.data["suggest_mega"] is False

    def test_mega_merge_flag(self):
        topology = Topology(topology_id="topo_0000000001", redundancies=(_redundancy(0.9),))
        rec = generate_recommendations(topology).recommendations[0]
        assert rec.data["suggest_mega"] is True


class TestRescueOrphan:

    def test_only_orphans_with_suggestion(self):
        orphans = (
            Orphan(orphan_id="orph_0000000001", unit_id="lost"),
            Orphan(
                orphan_id="orph_0000000002",
                unit_id="found",
                suggested_cluster=ClusterSuggestion("clst_0000000001", "ml-nlp", 0.333),
            ),
        )
        recs = generate_recommendations(
            Topology(topology_id="topo_0000000001", orphans=orphans)
        ).recommendations

        assert len(recs) == 1
        assert recs[0].rec_type is RecommendationType.RESCUE_ORPHAN
        assert recs[0].data["unit_id"] == "found"
        assert recs[0].priority == pytest.approx(0.333)


class TestGenerateRecommendations:

    def test_sorted_by_priority(self, library_units):
        result = generate_recommendations(topology_map(library_units))

        assert result.ok
        priorities = [r.priority for r in result.recommendations]
        assert priorities == sorted(priorities, reverse=True)
        assert [r.rec_type for r in result.recommendations] == [
            RecommendationType.MERGE_REDUNDANT,
            RecommendationType.RESCUE_ORPHAN,
        ]

    def test_of_type(self, library_units):
        result = generate_recommendations(topology_map(library_units))
        assert len(result.of_type(RecommendationType.FILL_GAP)) == 0
        assert len(result.of_type(RecommendationType.RESCUE_ORPHAN)) == 1

    def test_empty_topology(self):
        result = generate_recommendations(topology_map([]))
        assert result.ok
        assert result.recommendations == ()

    def test_requires_topology(self):
        result = generate_recommendations({"gaps": []})
        assert not result.ok
        assert result.error == "topology_required"
