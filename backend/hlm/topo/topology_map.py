"""
TopologyMapper - one topology snapshot from one unit snapshot.

Orchestrates:
1. Cluster analysis
2. Gap analysis (per cluster)
3. Redundancy sweep (whole snapshot)
4. Bridges (needs all clusters)
5. Hubs
6. Orphan rescue (needs all clusters)

Pure - no I/O, no shared state. Steps already computed by the caller
(the pass orchestrator) are passed in and reused, never recomputed.
"""

import logging
from typing import Optional

from utils.datetime_utils import utc_now
from utils.id_generator import generate_topology_id

from ..contracts.units import UnitSnapshot, coerce_units
from ..contracts.topology import (
    ClusterResult,
    GapResult,
    RedundancyResult,
    Topology,
    TopologyStats,
)
from ..params import EngineParams, DEFAULT_PARAMS
from .clusters import cluster_analysis
from .gaps import gap_analysis
from .redundancy import redundancy_detection
from .orphans import orphan_rescue
from .connectivity import find_bridges, find_hubs
from .index import TagIndex

logger = logging.getLogger(__name__)


def empty_topology(error: Optional[str] = None) -> Topology:
    """Well-formed topology with nothing in it."""
    return Topology(
        topology_id=generate_topology_id(),
        created_at=utc_now(),
        ok=error is None,
        error=error,
    )


class TopologyMapper:
    """Builds Topology snapshots.

    Usage:
        mapper = TopologyMapper(params)
        topology = mapper.map(units)
    """

    def __init__(self, params: EngineParams = DEFAULT_PARAMS):
        self.params = params

    def map(
        self,
        units,
        clusters: Optional[ClusterResult] = None,
        gaps: Optional[GapResult] = None,
        redundancies: Optional[RedundancyResult] = None,
        index: Optional[TagIndex] = None,
    ) -> Topology:
        """Map a snapshot, reusing any step results supplied by the caller."""
        snapshot: UnitSnapshot = coerce_units(units)
        if not snapshot.ok:
            return empty_topology(snapshot.error)
        if not snapshot.units:
            return empty_topology()

        unit_list = snapshot.units
        if index is None and self.params.use_tag_index:
            index = TagIndex(unit_list)

        # Step 1: Clusters
        if clusters is None:
            clusters = cluster_analysis(snapshot, self.params, index=index)

        # Step 2: Gaps
        if gaps is None:
            gaps = gap_analysis(clusters, snapshot)

        # Step 3: Redundancies
        if redundancies is None:
            redundancies = redundancy_detection(snapshot, self.params, index=index)

        # Step 4: Bridges
        bridges = find_bridges(unit_list, clusters.clusters, self.params)

        # Step 5: Hubs
        hubs = find_hubs(unit_list, self.params, index=index)

        # Step 6: Orphans
        orphans = orphan_rescue(snapshot, clusters, self.params)

        stats = TopologyStats(
            total_units=len(unit_list),
            cluster_count=len(clusters.clusters),
            orphan_count=len(orphans.orphans),
            bridge_count=len(bridges),
            hub_count=len(hubs),
            gap_count=len(gaps.gaps),
            redundancy_count=len(redundancies.redundancies),
        )
        logger.debug(f"Topology mapped: {stats.to_dict()}")

        return Topology(
            topology_id=generate_topology_id(),
            clusters=clusters.clusters,
            unassigned=clusters.unassigned,
            bridges=tuple(bridges),
            hubs=tuple(hubs),
            gaps=gaps.gaps,
            redundancies=redundancies.redundancies,
            orphans=orphans.orphans,
            stats=stats,
            created_at=utc_now(),
        )


def topology_map(units, params: EngineParams = DEFAULT_PARAMS) -> Topology:
    """Full topology for a snapshot. Empty input gives an empty topology."""
    return TopologyMapper(params).map(units)
