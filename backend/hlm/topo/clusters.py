"""
Cluster Analyzer
================

Partitions units into named clusters with a union-find forest.

Union rule (for every unordered pair):
- the pair shares >= min_shared_tags normalized tags, OR
- share_lineage() holds (siblings, or direct parent/child)

Partitions smaller than min_cluster_size are dropped, the rest sorted by
size descending and capped at max_clusters. Every dropped unit lands in
`unassigned`: clusters + unassigned cover the snapshot exactly once.

Naming:
- name = 3 most frequent member tags joined by "-" (fallback cluster-<idx>)
- top_tags = 5 most frequent member tags
- primary_domain = majority domain among members (fallback "general")
Frequency ties keep first-appearance order, so output is deterministic
given the snapshot order.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import Iterator, List, Optional, Sequence, Tuple

from utils.datetime_utils import utc_now
from utils.id_generator import generate_cluster_id

from ..contracts.units import KnowledgeUnit, coerce_units
from ..contracts.topology import Cluster, ClusterResult
from ..params import EngineParams, DEFAULT_PARAMS
from ..similarity import share_lineage, shared_tag_count
from .index import TagIndex
from .union_find import UnionFind

logger = logging.getLogger(__name__)

FALLBACK_DOMAIN = "general"
NAME_TAG_COUNT = 3


def _exhaustive_links(
    units: Sequence[KnowledgeUnit],
    params: EngineParams,
) -> Iterator[Tuple[int, int]]:
    """Reference O(n²) pair loop."""
    n = len(units)
    for i in range(n):
        a = units[i]
        for j in range(i + 1, n):
            b = units[j]
            if shared_tag_count(a, b) >= params.min_shared_tags or share_lineage(a, b):
                yield i, j


def _indexed_links(
    index: TagIndex,
    params: EngineParams,
) -> Iterator[Tuple[int, int]]:
    """Same links, visiting only pairs that share a tag or a lineage edge."""
    for i in range(len(index)):
        for j, shared in index.shared_tag_counts(i).items():
            if shared >= params.min_shared_tags:
                yield i, j
        for j in index.lineage_partners(i):
            if j > i:
                yield i, j


def _build_cluster(
    members: List[KnowledgeUnit],
    position: int,
    params: EngineParams,
    created_at: datetime,
) -> Cluster:
    tag_freq: Counter = Counter()
    domains: Counter = Counter()
    for unit in members:
        tag_freq.update(unit.tags)
        if unit.domain:
            domains[unit.domain] += 1

    # Counter keeps insertion order; a stable sort keeps first-seen on ties
    ranked = sorted(tag_freq.items(), key=lambda kv: kv[1], reverse=True)
    top_tags = tuple(tag for tag, _ in ranked[:params.top_tag_count])

    primary_domain = FALLBACK_DOMAIN
    if domains:
        primary_domain = sorted(domains.items(), key=lambda kv: kv[1], reverse=True)[0][0]

    name = "-".join(top_tags[:NAME_TAG_COUNT]) if top_tags else f"cluster-{position}"

    return Cluster(
        cluster_id=generate_cluster_id(),
        name=name,
        members=tuple(u.id for u in members),
        top_tags=top_tags,
        primary_domain=primary_domain,
        created_at=created_at,
    )


def cluster_analysis(
    units,
    params: EngineParams = DEFAULT_PARAMS,
    index: Optional[TagIndex] = None,
) -> ClusterResult:
    """Cluster a unit snapshot by tag overlap and lineage.

    Args:
        units: Snapshot (sequence of KnowledgeUnit or store mappings)
        params: Engine parameters
        index: Prebuilt TagIndex for this snapshot (optional)

    Returns:
        ClusterResult; empty (ok=False) when the snapshot is malformed
    """
    snapshot = coerce_units(units)
    if not snapshot.ok:
        return ClusterResult(ok=False, error=snapshot.error)
    if not snapshot.units:
        return ClusterResult()

    unit_list = snapshot.units
    forest = UnionFind(len(unit_list))

    if params.use_tag_index:
        links = _indexed_links(index or TagIndex(unit_list), params)
    else:
        links = _exhaustive_links(unit_list, params)

    unions = 0
    for i, j in links:
        if forest.union(i, j):
            unions += 1

    partitions = [g for g in forest.groups() if len(g) >= params.min_cluster_size]
    partitions.sort(key=len, reverse=True)
    kept = partitions[:params.max_clusters]
    if len(partitions) > len(kept):
        logger.debug(f"Cluster cap reached: dropped {len(partitions) - len(kept)} partitions")

    assigned = {i for group in kept for i in group}
    unassigned = tuple(u.id for i, u in enumerate(unit_list) if i not in assigned)

    now = utc_now()
    clusters = tuple(
        _build_cluster([unit_list[i] for i in group], position, params, now)
        for position, group in enumerate(kept)
    )

    logger.debug(
        f"Cluster analysis: {len(unit_list)} units, {unions} unions, "
        f"{len(clusters)} clusters, {len(unassigned)} unassigned"
    )
    return ClusterResult(clusters=clusters, unassigned=unassigned)
