"""
Record Contracts - Pass output and engine metrics.

PassRecord is the ONLY output of a full pass. It is assembled once,
at pass end, and never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from utils.datetime_utils import isoformat_or_none

from .topology import ClusterResult, GapResult, RedundancyResult, OrphanResult, Topology
from .recommendations import RecommendationResult
from .audits import (
    CensusResult,
    FreshnessResult,
    HierarchyResult,
    TagNormalizationResult,
    LineageResult,
)


@dataclass(frozen=True)
class PassSummary:
    total_units: int = 0
    skipped_units: int = 0
    cluster_count: int = 0
    unassigned_count: int = 0
    gap_count: int = 0
    redundancy_count: int = 0
    orphan_count: int = 0
    recommendation_count: int = 0
    stale_unit_count: int = 0
    hierarchy_issue_count: int = 0
    tag_issue_count: int = 0
    lineage_issue_count: int = 0
    domain_imbalance_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_units": self.total_units,
            "skipped_units": self.skipped_units,
            "cluster_count": self.cluster_count,
            "unassigned_count": self.unassigned_count,
            "gap_count": self.gap_count,
            "redundancy_count": self.redundancy_count,
            "orphan_count": self.orphan_count,
            "recommendation_count": self.recommendation_count,
            "stale_unit_count": self.stale_unit_count,
            "hierarchy_issue_count": self.hierarchy_issue_count,
            "tag_issue_count": self.tag_issue_count,
            "lineage_issue_count": self.lineage_issue_count,
            "domain_imbalance_count": self.domain_imbalance_count,
        }


@dataclass(frozen=True)
class PassRecord:
    """Immutable snapshot of one full HLM pass."""

    pass_id: str
    started_at: datetime
    completed_at: datetime
    topology: Topology
    clusters: ClusterResult
    gaps: GapResult
    redundancies: RedundancyResult
    orphans: OrphanResult
    recommendations: RecommendationResult
    domain_census: CensusResult
    freshness: FreshnessResult
    hierarchy: HierarchyResult
    tag_normalization: TagNormalizationResult
    lineage: LineageResult
    summary: PassSummary = field(default_factory=PassSummary)
    ok: bool = True
    error: Optional[str] = None

    @property
    def duration_seconds(self) -> float:
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pass_id": self.pass_id,
            "ok": self.ok,
            "error": self.error,
            "started_at": isoformat_or_none(self.started_at),
            "completed_at": isoformat_or_none(self.completed_at),
            "topology": self.topology.to_dict(),
            "clusters": self.clusters.to_dict(),
            "gaps": self.gaps.to_dict(),
            "redundancies": self.redundancies.to_dict(),
            "orphans": self.orphans.to_dict(),
            "recommendations": self.recommendations.to_dict(),
            "domain_census": self.domain_census.to_dict(),
            "freshness": self.freshness.to_dict(),
            "hierarchy": self.hierarchy.to_dict(),
            "tag_normalization": self.tag_normalization.to_dict(),
            "lineage": self.lineage.to_dict(),
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class EngineMetrics:
    """Cumulative totals across passes. No per-unit detail."""

    total_passes: int = 0
    total_clusters: int = 0
    total_orphans: int = 0
    total_redundancies: int = 0
    total_gaps: int = 0
    total_recommendations: int = 0
    last_pass_at: Optional[datetime] = None
    last_pass_id: Optional[str] = None
    stored_passes: int = 0
    stored_recommendations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_passes": self.total_passes,
            "total_clusters": self.total_clusters,
            "total_orphans": self.total_orphans,
            "total_redundancies": self.total_redundancies,
            "total_gaps": self.total_gaps,
            "total_recommendations": self.total_recommendations,
            "last_pass_at": isoformat_or_none(self.last_pass_at),
            "last_pass_id": self.last_pass_id,
            "stored_passes": self.stored_passes,
            "stored_recommendations": self.stored_recommendations,
        }
