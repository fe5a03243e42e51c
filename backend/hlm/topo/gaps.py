"""
Gap Analyzer
============

A gap is a statement about one cluster's internal coherence:
two tags that each appear on >= 2 members of the cluster, while no
single member carries both. "Cluster X has units about A and B but
nothing connecting them."

Gaps are never computed across clusters.
"""

import logging
from collections.abc import Sequence
from datetime import datetime
from typing import Dict, List, Mapping, Set

from utils.datetime_utils import utc_now
from utils.id_generator import generate_gap_id

from ..contracts.units import KnowledgeUnit, coerce_units
from ..contracts.topology import Cluster, ClusterResult, Gap, GapResult

logger = logging.getLogger(__name__)

ERROR_CLUSTERS_NOT_SEQUENCE = "clusters_must_be_sequence"

# A tag must be carried by at least this many members to take part in a gap
MIN_TAG_SUPPORT = 2


def _cluster_gaps(
    cluster: Cluster,
    units_by_id: Mapping[str, KnowledgeUnit],
    detected_at: datetime,
) -> List[Gap]:
    tag_members: Dict[str, Set[str]] = {}
    for member_id in cluster.members:
        unit = units_by_id.get(member_id)
        if unit is None:
            continue
        for tag in unit.tags:
            tag_members.setdefault(tag, set()).add(member_id)

    supported = [t for t, ids in tag_members.items() if len(ids) >= MIN_TAG_SUPPORT]

    gaps: List[Gap] = []
    for i, tag_a in enumerate(supported):
        carriers_a = tag_members[tag_a]
        for tag_b in supported[i + 1:]:
            carriers_b = tag_members[tag_b]
            if carriers_a.isdisjoint(carriers_b):
                gaps.append(Gap(
                    gap_id=generate_gap_id(),
                    cluster_id=cluster.cluster_id,
                    cluster_name=cluster.name,
                    tag_a=tag_a,
                    tag_b=tag_b,
                    tag_a_count=len(carriers_a),
                    tag_b_count=len(carriers_b),
                    detected_at=detected_at,
                ))
    return gaps


def gap_analysis(clusters, units) -> GapResult:
    """Find unconnected tag pairs inside each cluster.

    Args:
        clusters: ClusterResult or sequence of Cluster
        units: Snapshot the clusters were computed from

    Returns:
        GapResult; empty (ok=False) when either input is malformed
    """
    if isinstance(clusters, ClusterResult):
        clusters = clusters.clusters
    if not isinstance(clusters, Sequence) or isinstance(clusters, (str, bytes)):
        return GapResult(ok=False, error=ERROR_CLUSTERS_NOT_SEQUENCE)

    snapshot = coerce_units(units)
    if not snapshot.ok:
        return GapResult(ok=False, error=snapshot.error)

    units_by_id = snapshot.by_id()
    detected_at = utc_now()
    gaps: List[Gap] = []

    for cluster in clusters:
        if not isinstance(cluster, Cluster) or not cluster.members:
            continue
        gaps.extend(_cluster_gaps(cluster, units_by_id, detected_at))

    logger.debug(f"Gap analysis: {len(gaps)} gaps across {len(clusters)} clusters")
    return GapResult(gaps=tuple(gaps))
