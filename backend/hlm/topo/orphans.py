"""
Orphan Rescuer
==============

An orphan is a unit that:
- has no parent,
- is not a member of any cluster,
- carries fewer than two (normalized) tags.

Each orphan gets the cluster whose members it matches best on average
tag similarity as a placement suggestion; no suggestion when no cluster
scores above zero. First cluster wins ties.
"""

import logging
from collections.abc import Sequence
from typing import List, Mapping, Optional

import numpy as np

from utils.datetime_utils import utc_now
from utils.id_generator import generate_orphan_id

from ..contracts.units import KnowledgeUnit, coerce_units
from ..contracts.topology import (
    Cluster,
    ClusterResult,
    ClusterSuggestion,
    Orphan,
    OrphanResult,
)
from ..params import EngineParams, DEFAULT_PARAMS
from ..similarity import jaccard
from .clusters import cluster_analysis
from .index import TagIndex

logger = logging.getLogger(__name__)

ORPHAN_MAX_TAGS = 1
UNKNOWN_DOMAIN = "unknown"


def is_orphan(unit: KnowledgeUnit, assigned_ids) -> bool:
    return (
        not unit.parent_id
        and unit.id not in assigned_ids
        and len(unit.tags) <= ORPHAN_MAX_TAGS
    )


def suggest_cluster(
    unit: KnowledgeUnit,
    clusters: Sequence[Cluster],
    units_by_id: Mapping[str, KnowledgeUnit],
) -> Optional[ClusterSuggestion]:
    """Best cluster by mean tag similarity to its members."""
    if not unit.tags:
        return None

    best: Optional[Cluster] = None
    best_score = 0.0
    for cluster in clusters:
        scores = [
            jaccard(unit.tag_set, units_by_id[m].tag_set)
            for m in cluster.members
            if m in units_by_id
        ]
        avg = float(np.mean(scores)) if scores else 0.0
        if avg > best_score:
            best, best_score = cluster, avg

    if best is None:
        return None
    return ClusterSuggestion(
        cluster_id=best.cluster_id,
        cluster_name=best.name,
        affinity=round(best_score, 3),
    )


def orphan_rescue(
    units,
    clusters=None,
    params: EngineParams = DEFAULT_PARAMS,
    index: Optional[TagIndex] = None,
) -> OrphanResult:
    """Find orphans and suggest a cluster for each.

    Args:
        units: Snapshot
        clusters: Precomputed ClusterResult / sequence of Cluster; when
            None, clusters are computed from `units`
        params: Engine parameters (used only when clustering on demand)
        index: Prebuilt TagIndex (used only when clustering on demand)
    """
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return OrphanResult(ok=False, error=snapshot.error)
    if not snapshot.units:
        return OrphanResult()

    if clusters is None:
        clusters = cluster_analysis(snapshot, params, index=index).clusters
    elif isinstance(clusters, ClusterResult):
        clusters = clusters.clusters
    if not isinstance(clusters, Sequence) or isinstance(clusters, (str, bytes)):
        clusters = ()
    clusters = [c for c in clusters if isinstance(c, Cluster)]

    assigned_ids = {m for c in clusters for m in c.members}
    units_by_id = snapshot.by_id()
    detected_at = utc_now()

    orphans: List[Orphan] = []
    for unit in snapshot.units:
        if not is_orphan(unit, assigned_ids):
            continue
        orphans.append(Orphan(
            orphan_id=generate_orphan_id(),
            unit_id=unit.id,
            domain=unit.domain or UNKNOWN_DOMAIN,
            tags=unit.raw_tags,
            suggested_cluster=suggest_cluster(unit, clusters, units_by_id),
            detected_at=detected_at,
        ))

    rescued = sum(1 for o in orphans if o.suggested_cluster is not None)
    logger.debug(f"Orphan rescue: {len(orphans)} orphans, {rescued} with a suggested cluster")
    return OrphanResult(orphans=tuple(orphans))
