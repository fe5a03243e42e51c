"""
Tests for cluster analysis.

These tests verify:
- The union rule (>= min_shared_tags shared tags, or lineage)
- Partition completeness: clusters + unassigned cover every id once
- Minimum size, cap and ordering
- Naming and primary domain
- Malformed input degrades to an empty result
"""

import pytest

from hlm.params import EngineParams
from hlm.topo import cluster_analysis
from hlm.topo.union_find import UnionFind


def _all_ids(result):
    ids = [m for c in result.clusters for m in c.members]
    ids.extend(result.unassigned)
    return ids


class TestUnionFind:

    def test_union_and_find(self):
        forest = UnionFind(4)
        assert forest.union(0, 1)
        assert not forest.union(1, 0)
        assert forest.connected(0, 1)
        assert not forest.connected(0, 2)

    def test_groups_in_first_member_order(self):
        forest = UnionFind(5)
        forest.union(3, 1)
        forest.union(4, 0)
        assert forest.groups() == [[0, 4], [1, 3], [2]]


class TestClusterScenario:
    """ml/nlp x2, ml/vision, robotics x2 with min_cluster_size=3."""

    def test_two_shared_tags_rule_leaves_no_cluster(self, ml_robotics_units):
        result = cluster_analysis(ml_robotics_units, EngineParams(min_cluster_size=3))

        # Only u1-u2 share two tags; u3 shares a single tag with them
        assert result.ok
        assert result.clusters == ()
        assert result.unassigned == ("u1", "u2", "u3", "u4", "u5")

    def test_single_shared_tag_rule_forms_ml_cluster(self, ml_robotics_units):
        result = cluster_analysis(ml_robotics_units, EngineParams(min_shared_tags=1))

        assert len(result.clusters) == 1
        cluster = result.clusters[0]
        assert cluster.members == ("u1", "u2", "u3")
        assert cluster.size == 3
        assert result.unassigned == ("u4", "u5")

    def test_lineage_links_ml_vision_unit(self, ml_robotics_units):
        ml_robotics_units[2]["parent_id"] = "u1"

        result = cluster_analysis(ml_robotics_units)

        assert [c.member_set for c in result.clusters] == [frozenset({"u1", "u2", "u3"})]
        assert set(result.unassigned) == {"u4", "u5"}


class TestClusterInvariants:

    @pytest.fixture
    def mixed_units(self, unit):
        return [
            unit("a1", ["x", "y"]),
            unit("a2", ["x", "y", "z"]),
            unit("a3", ["y", "z"]),
            unit("a4", ["y", "z", "w"]),
            unit("b1", ["p", "q"], parent_id="root"),
            unit("b2", [], parent_id="root"),
            unit("b3", ["q"], parent_id="b1"),
            unit("root", ["r"]),
            unit("c1", ["solo"]),
            unit("c2", []),
        ]

    def test_partition_complete_and_disjoint(self, mixed_units):
        result = cluster_analysis(mixed_units)

        ids = _all_ids(result)
        assert sorted(ids) == sorted(u["id"] for u in mixed_units)
        assert len(ids) == len(set(ids))

    def test_every_cluster_meets_minimum_size(self, mixed_units):
        params = EngineParams(min_cluster_size=3)
        result = cluster_analysis(mixed_units, params)

        assert result.clusters
        assert all(c.size >= params.min_cluster_size for c in result.clusters)

    def test_expected_membership(self, mixed_units):
        result = cluster_analysis(mixed_units)

        members = sorted(sorted(c.members) for c in result.clusters)
        assert members == [
            ["a1", "a2", "a3", "a4"],
            ["b1", "b2", "b3", "root"],
        ]
        assert set(result.unassigned) == {"c1", "c2"}

    def test_members_are_input_ids(self, mixed_units):
        result = cluster_analysis(mixed_units)
        input_ids = {u["id"] for u in mixed_units}
        for cluster in result.clusters:
            assert cluster.member_set <= input_ids


class TestClusterOrderingAndCap:

    @pytest.fixture
    def three_groups(self, unit):
        units = []
        for size, tag_pair in ((3, ("a", "b")), (5, ("c", "d")), (4, ("e", "f"))):
            for i in range(size):
                units.append(unit(f"{tag_pair[0]}{i}", list(tag_pair)))
        return units

    def test_sorted_by_size_descending(self, three_groups):
        result = cluster_analysis(three_groups)
        assert [c.size for c in result.clusters] == [5, 4, 3]

    def test_capped_at_max_clusters(self, three_groups):
        result = cluster_analysis(three_groups, EngineParams(max_clusters=2))

        assert [c.size for c in result.clusters] == [5, 4]
        assert sorted(result.unassigned) == ["a0", "a1", "a2"]

    def test_small_partitions_unassigned(self, three_groups):
        result = cluster_analysis(three_groups, EngineParams(min_cluster_size=5))
        assert [c.size for c in result.clusters] == [5]
        assert len(result.unassigned) == 7


class TestClusterNaming:

    def test_name_from_top_three_tags(self, unit):
        units = [
            unit("a", ["ml", "nlp", "vision"], domain="ai"),
            unit("b", ["ml", "nlp"], domain="ai"),
            unit("c", ["ml", "nlp", "speech"], domain="linguistics"),
        ]
        cluster = cluster_analysis(units).clusters[0]

        assert cluster.name == "ml-nlp-vision"
        assert cluster.top_tags == ("ml", "nlp", "vision", "speech")
        assert cluster.primary_domain == "ai"

    def test_top_tags_capped(self, unit):
        tags = ["t1", "t2", "t3", "t4", "t5", "t6", "t7"]
        units = [unit(f"u{i}", tags) for i in range(3)]
        cluster = cluster_analysis(units, EngineParams(top_tag_count=5)).clusters[0]
        assert len(cluster.top_tags) == 5

    def test_fallback_name_and_domain(self, unit):
        units = [
            unit("p", []),
            unit("c1", [], parent_id="p"),
            unit("c2", [], parent_id="p"),
        ]
        cluster = cluster_analysis(units).clusters[0]

        assert cluster.name == "cluster-0"
        assert cluster.top_tags == ()
        assert cluster.primary_domain == "general"

    def test_cluster_ids_are_prefixed(self, ml_robotics_units):
        result = cluster_analysis(ml_robotics_units, EngineParams(min_shared_tags=1))
        assert result.clusters[0].cluster_id.startswith("clst_")


class TestClusterMalformedInput:

    @pytest.mark.parametrize("raw", [None, "units", 42, {"id": "a"}])
    def test_non_sequence(self, raw):
        result = cluster_analysis(raw)

        assert not result.ok
        assert result.error == "units_must_be_sequence"
        assert result.clusters == ()
        assert result.unassigned == ()

    def test_empty_snapshot(self):
        result = cluster_analysis([])
        assert result.ok
        assert result.clusters == ()

    def test_bad_elements_skipped(self, unit):
        units = [
            None,
            "not a unit",
            {"tags": ["a", "b"]},
            {"id": "", "tags": ["a", "b"]},
            unit("a", ["x", "y"]),
            unit("b", ["x", "y"]),
            unit("c", ["x", "y"]),
        ]
        result = cluster_analysis(units)

        assert len(result.clusters) == 1
        assert result.clusters[0].members == ("a", "b", "c")
        assert result.unassigned == ()
