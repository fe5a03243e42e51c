"""
HLM topology - pure structure computation.

This module contains pure functions over a unit snapshot.
NO database imports. NO LLM calls. NO network access.
"""

from .union_find import UnionFind
from .index import TagIndex
from .clusters import cluster_analysis
from .gaps import gap_analysis
from .redundancy import redundancy_detection
from .orphans import orphan_rescue, suggest_cluster, is_orphan
from .connectivity import find_bridges, find_hubs, cluster_affinity
from .topology_map import TopologyMapper, topology_map, empty_topology

__all__ = [
    # Building blocks
    "UnionFind",
    "TagIndex",
    # Analyses
    "cluster_analysis",
    "gap_analysis",
    "redundancy_detection",
    "orphan_rescue",
    "suggest_cluster",
    "is_orphan",
    "find_bridges",
    "find_hubs",
    "cluster_affinity",
    # Topology
    "TopologyMapper",
    "topology_map",
    "empty_topology",
]
