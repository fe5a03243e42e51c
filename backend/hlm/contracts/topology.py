"""
Topology Contracts - Structure imposed on a unit snapshot.

Every record here is derived, immutable, and references units by id.
Artefact ids (clst_, gap_, ...) are fresh per pass; what is stable
between identical passes is the composition: cluster members, gap
tag pairs, redundancy unit pairs.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional, Tuple

from utils.datetime_utils import isoformat_or_none


# =============================================================================
# CLUSTERS
# =============================================================================

@dataclass(frozen=True)
class Cluster:
    """A union-find partition of units above the minimum size.

    members keeps snapshot order; membership is what matters.
    """

    cluster_id: str
    name: str
    members: Tuple[str, ...]
    top_tags: Tuple[str, ...] = ()
    primary_domain: str = "general"
    created_at: Optional[datetime] = None

    @property
    def size(self) -> int:
        return len(self.members)

    @property
    def member_set(self) -> FrozenSet[str]:
        return frozenset(self.members)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "name": self.name,
            "members": list(self.members),
            "size": self.size,
            "top_tags": list(self.top_tags),
            "primary_domain": self.primary_domain,
            "created_at": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class ClusterResult:
    """clusters + unassigned partition the snapshot's unit ids exactly once."""

    clusters: Tuple[Cluster, ...] = ()
    unassigned: Tuple[str, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "clusters": [c.to_dict() for c in self.clusters],
            "unassigned": list(self.unassigned),
        }


# =============================================================================
# GAPS
# =============================================================================

@dataclass(frozen=True)
class Gap:
    """Two tags each carried by >=2 members of one cluster, never together."""

    gap_id: str
    cluster_id: str
    cluster_name: str
    tag_a: str
    tag_b: str
    tag_a_count: int
    tag_b_count: int
    detected_at: Optional[datetime] = None

    @property
    def tag_pair(self) -> FrozenSet[str]:
        return frozenset((self.tag_a, self.tag_b))

    @property
    def description(self) -> str:
        return (
            f'Cluster "{self.cluster_name}" has DTUs about "{self.tag_a}" '
            f'and "{self.tag_b}" but nothing connecting them'
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gap_id": self.gap_id,
            "cluster_id": self.cluster_id,
            "cluster_name": self.cluster_name,
            "tag_a": self.tag_a,
            "tag_b": self.tag_b,
            "tag_a_count": self.tag_a_count,
            "tag_b_count": self.tag_b_count,
            "description": self.description,
            "detected_at": isoformat_or_none(self.detected_at),
        }


@dataclass(frozen=True)
class GapResult:
    gaps: Tuple[Gap, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "error": self.error, "gaps": [g.to_dict() for g in self.gaps]}


# =============================================================================
# REDUNDANCIES
# =============================================================================

@dataclass(frozen=True)
class Redundancy:
    """Near-duplicate pair. unit_a < unit_b by id, so the record is
    independent of snapshot order."""

    redundancy_id: str
    unit_a: str
    unit_b: str
    similarity: float
    keep_id: str
    merge_id: str
    keep_authority: float
    merge_authority: float
    detected_at: Optional[datetime] = None

    @property
    def pair(self) -> FrozenSet[str]:
        return frozenset((self.unit_a, self.unit_b))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "redundancy_id": self.redundancy_id,
            "unit_a": self.unit_a,
            "unit_b": self.unit_b,
            "similarity": self.similarity,
            "keep_id": self.keep_id,
            "merge_id": self.merge_id,
            "keep_authority": self.keep_authority,
            "merge_authority": self.merge_authority,
            "detected_at": isoformat_or_none(self.detected_at),
        }


@dataclass(frozen=True)
class RedundancyResult:
    redundancies: Tuple[Redundancy, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "redundancies": [r.to_dict() for r in self.redundancies],
        }


# =============================================================================
# ORPHANS
# =============================================================================

@dataclass(frozen=True)
class ClusterSuggestion:
    cluster_id: str
    cluster_name: str
    affinity: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "cluster_name": self.cluster_name,
            "affinity": self.affinity,
        }


@dataclass(frozen=True)
class Orphan:
    """Parent-less, cluster-less unit with fewer than two tags."""

    orphan_id: str
    unit_id: str
    domain: str = "unknown"
    tags: Tuple[str, ...] = ()
    suggested_cluster: Optional[ClusterSuggestion] = None
    detected_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "orphan_id": self.orphan_id,
            "unit_id": self.unit_id,
            "domain": self.domain,
            "tags": list(self.tags),
            "suggested_cluster": (
                self.suggested_cluster.to_dict() if self.suggested_cluster else None
            ),
            "detected_at": isoformat_or_none(self.detected_at),
        }


@dataclass(frozen=True)
class OrphanResult:
    orphans: Tuple[Orphan, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": self.ok, "error": self.error, "orphans": [o.to_dict() for o in self.orphans]}


# =============================================================================
# BRIDGES & HUBS
# =============================================================================

@dataclass(frozen=True)
class ClusterAffinity:
    cluster_id: str
    cluster_name: str
    score: float
    is_member: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cluster_id": self.cluster_id,
            "cluster_name": self.cluster_name,
            "score": self.score,
            "is_member": self.is_member,
        }


@dataclass(frozen=True)
class Bridge:
    """Unit with qualifying tag affinity to two or more clusters."""

    bridge_id: str
    unit_id: str
    domain: str
    connected_clusters: Tuple[ClusterAffinity, ...]
    strength: float
    detected_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bridge_id": self.bridge_id,
            "unit_id": self.unit_id,
            "domain": self.domain,
            "connected_clusters": [a.to_dict() for a in self.connected_clusters],
            "strength": self.strength,
            "detected_at": isoformat_or_none(self.detected_at),
        }


@dataclass(frozen=True)
class Hub:
    """Unit ranked by how many other units share at least one tag with it."""

    hub_id: str
    unit_id: str
    domain: str
    connection_count: int
    tag_count: int
    tier: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hub_id": self.hub_id,
            "unit_id": self.unit_id,
            "domain": self.domain,
            "connection_count": self.connection_count,
            "tag_count": self.tag_count,
            "tier": self.tier,
        }


# =============================================================================
# TOPOLOGY SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class TopologyStats:
    total_units: int = 0
    cluster_count: int = 0
    orphan_count: int = 0
    bridge_count: int = 0
    hub_count: int = 0
    gap_count: int = 0
    redundancy_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_units": self.total_units,
            "cluster_count": self.cluster_count,
            "orphan_count": self.orphan_count,
            "bridge_count": self.bridge_count,
            "hub_count": self.hub_count,
            "gap_count": self.gap_count,
            "redundancy_count": self.redundancy_count,
        }


@dataclass(frozen=True)
class Topology:
    """One topology map. An empty topology means "nothing to report"."""

    topology_id: str
    clusters: Tuple[Cluster, ...] = ()
    unassigned: Tuple[str, ...] = ()
    bridges: Tuple[Bridge, ...] = ()
    hubs: Tuple[Hub, ...] = ()
    gaps: Tuple[Gap, ...] = ()
    redundancies: Tuple[Redundancy, ...] = ()
    orphans: Tuple[Orphan, ...] = ()
    stats: TopologyStats = field(default_factory=TopologyStats)
    created_at: Optional[datetime] = None
    ok: bool = True
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.stats.total_units == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "topology_id": self.topology_id,
            "ok": self.ok,
            "error": self.error,
            "clusters": [c.to_dict() for c in self.clusters],
            "unassigned": list(self.unassigned),
            "bridges": [b.to_dict() for b in self.bridges],
            "hubs": [h.to_dict() for h in self.hubs],
            "gaps": [g.to_dict() for g in self.gaps],
            "redundancies": [r.to_dict() for r in self.redundancies],
            "orphans": [o.to_dict() for o in self.orphans],
            "stats": self.stats.to_dict(),
            "created_at": isoformat_or_none(self.created_at),
        }
