"""
Tests for TopologyMapper and topology_map.

These tests verify:
- One topology carries every structural view plus matching stats
- Steps supplied by the caller are reused, not recomputed
- Empty and malformed input give a well-formed empty topology
"""

import pytest

from hlm.contracts.topology import RedundancyResult
from hlm.params import EngineParams
from hlm.topo import (
    TopologyMapper,
    topology_map,
    cluster_analysis,
    gap_analysis,
)


class TestTopologyMap:

    def test_library_topology(self, library_units):
        topology = topology_map(library_units)

        assert topology.ok
        assert topology.topology_id.startswith("topo_")
        assert [c.name for c in topology.clusters] == [
            "graphs-algorithms-trees",
            "cells-genetics-proteins",
        ]
        assert set(topology.unassigned) == {"x1", "o1", "l1"}
        assert [r.pair for r in topology.redundancies] == [frozenset({"g1", "g2"})]
        assert [o.unit_id for o in topology.orphans] == ["o1"]
        assert topology.gaps == ()
        assert topology.hubs[0].unit_id == "x1"
        assert topology.hubs[0].connection_count == 8

    def test_stats_match_contents(self, library_units):
        topology = topology_map(library_units)
        stats = topology.stats

        assert stats.total_units == len(library_units)
        assert stats.cluster_count == len(topology.clusters)
        assert stats.orphan_count == len(topology.orphans)
        assert stats.bridge_count == len(topology.bridges)
        assert stats.hub_count == len(topology.hubs)
        assert stats.gap_count == len(topology.gaps)
        assert stats.redundancy_count == len(topology.redundancies)

    def test_reuses_supplied_steps(self, library_units):
        clusters = cluster_analysis(library_units)
        gaps = gap_analysis(clusters, library_units)
        no_redundancies = RedundancyResult()

        topology = TopologyMapper().map(
            library_units,
            clusters=clusters,
            gaps=gaps,
            redundancies=no_redundancies,
        )

        assert topology.clusters == clusters.clusters
        assert topology.redundancies == ()

    def test_same_result_without_index(self, library_units):
        indexed = topology_map(library_units, EngineParams(use_tag_index=True))
        exhaustive = topology_map(library_units, EngineParams(use_tag_index=False))

        assert [c.members for c in indexed.clusters] == [c.members for c in exhaustive.clusters]
        assert [r.pair for r in indexed.redundancies] == [r.pair for r in exhaustive.redundancies]
        assert [h.unit_id for h in indexed.hubs] == [h.unit_id for h in exhaustive.hubs]

    def test_to_dict(self, library_units):
        data = topology_map(library_units).to_dict()
        assert data["stats"]["cluster_count"] == 2
        assert len(data["clusters"]) == 2


class TestEmptyTopology:

    def test_empty_snapshot(self):
        topology = topology_map([])

        assert topology.ok
        assert topology.is_empty
        assert topology.stats.total_units == 0
        assert topology.clusters == ()

    @pytest.mark.parametrize("raw", [None, "dtus", 3.5])
    def test_malformed_snapshot(self, raw):
        topology = topology_map(raw)

        assert not topology.ok
        assert topology.error == "units_must_be_sequence"
        assert topology.is_empty
        assert topology.stats.cluster_count == 0
