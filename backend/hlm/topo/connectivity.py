"""
Bridges and Hubs
================

Two cross-cluster views that need the full cluster list.

BRIDGES: units with tag affinity to two or more clusters.
- affinity to a cluster the unit belongs to = 1.0
- otherwise = |unit tags ∩ cluster top tags| / |cluster top tags|
- clusters with affinity >= bridge_affinity_threshold qualify
- >= 2 qualifying clusters → Bridge, strength = mean affinity
Sorted by qualifying-cluster count (descending), capped at max_bridges.

HUBS: units ranked by connection count, the number of OTHER units that
share at least one tag (each neighbour counted once). Units without tags
are not ranked. Top max_hubs.

Both are effectively degree centralities over the tag co-occurrence graph.
"""

import logging
from collections.abc import Sequence
from typing import Dict, List, Optional, Tuple

import numpy as np

from utils.datetime_utils import utc_now
from utils.id_generator import generate_bridge_id, generate_hub_id

from ..contracts.units import KnowledgeUnit, coerce_units
from ..contracts.topology import Bridge, Cluster, ClusterAffinity, ClusterResult, Hub
from ..params import EngineParams, DEFAULT_PARAMS
from .index import TagIndex

logger = logging.getLogger(__name__)

UNKNOWN_DOMAIN = "unknown"
MIN_BRIDGE_CLUSTERS = 2


def cluster_affinity(unit: KnowledgeUnit, cluster: Cluster) -> float:
    """Fraction of the cluster's top tags the unit carries."""
    if not cluster.top_tags:
        return 0.0
    overlap = sum(1 for t in cluster.top_tags if t in unit.tag_set)
    return overlap / len(cluster.top_tags)


def _cluster_list(clusters) -> List[Cluster]:
    if isinstance(clusters, ClusterResult):
        clusters = clusters.clusters
    if not isinstance(clusters, Sequence) or isinstance(clusters, (str, bytes)):
        return []
    return [c for c in clusters if isinstance(c, Cluster)]


def find_bridges(
    units,
    clusters,
    params: EngineParams = DEFAULT_PARAMS,
) -> List[Bridge]:
    """Units with qualifying affinity to >= 2 clusters.

    Malformed input (non-sequence units or clusters) yields no bridges.
    """
    clusters = _cluster_list(clusters)
    if len(clusters) < MIN_BRIDGE_CLUSTERS:
        return []
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return []
    units = snapshot.units

    membership: Dict[str, int] = {}
    for position, cluster in enumerate(clusters):
        for member_id in cluster.members:
            membership[member_id] = position

    detected_at = utc_now()
    bridges: List[Bridge] = []

    for unit in units:
        home = membership.get(unit.id)
        affinities: List[ClusterAffinity] = []

        for position, cluster in enumerate(clusters):
            if position == home:
                affinities.append(ClusterAffinity(
                    cluster_id=cluster.cluster_id,
                    cluster_name=cluster.name,
                    score=1.0,
                    is_member=True,
                ))
                continue
            score = cluster_affinity(unit, cluster)
            if score >= params.bridge_affinity_threshold:
                affinities.append(ClusterAffinity(
                    cluster_id=cluster.cluster_id,
                    cluster_name=cluster.name,
                    score=round(score, 3),
                ))

        if len(affinities) < MIN_BRIDGE_CLUSTERS:
            continue

        strength = float(np.mean([a.score for a in affinities]))
        bridges.append(Bridge(
            bridge_id=generate_bridge_id(),
            unit_id=unit.id,
            domain=unit.domain or UNKNOWN_DOMAIN,
            connected_clusters=tuple(affinities),
            strength=max(0.0, min(1.0, strength)),
            detected_at=detected_at,
        ))

    bridges.sort(key=lambda b: len(b.connected_clusters), reverse=True)
    return bridges[:params.max_bridges]


def _connection_count_exhaustive(units: Sequence[KnowledgeUnit], i: int) -> int:
    unit = units[i]
    return sum(
        1
        for j, other in enumerate(units)
        if j != i and not unit.tag_set.isdisjoint(other.tag_set)
    )


def find_hubs(
    units,
    params: EngineParams = DEFAULT_PARAMS,
    index: Optional[TagIndex] = None,
) -> List[Hub]:
    """Top units by number of tag-sharing neighbours. [] for malformed input."""
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return []
    units = snapshot.units
    if params.use_tag_index and (index is None or len(index) != len(units)):
        index = TagIndex(units)

    scored: List[Tuple[int, int]] = []
    for i, unit in enumerate(units):
        if not unit.tags:
            continue
        if params.use_tag_index:
            count = len(index.tag_neighbors(i))
        else:
            count = _connection_count_exhaustive(units, i)
        scored.append((count, i))

    scored.sort(key=lambda s: s[0], reverse=True)
    return [
        Hub(
            hub_id=generate_hub_id(),
            unit_id=units[i].id,
            domain=units[i].domain or UNKNOWN_DOMAIN,
            connection_count=count,
            tag_count=len(units[i].tags),
            tier=units[i].tier,
        )
        for count, i in scored[:params.max_hubs]
    ]
