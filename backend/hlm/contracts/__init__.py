"""
HLM Contracts - Immutable data passed into and out of the engine.

- units: KnowledgeUnit snapshot (input)
- topology: clusters, gaps, redundancies, orphans, bridges, hubs
- recommendations: actionable suggestions
- audits: integrity findings
- records: PassRecord and EngineMetrics
"""

from .units import (
    KnowledgeUnit,
    UnitSnapshot,
    coerce_units,
    normalize_tag,
    normalize_tags,
    KNOWN_TIERS,
    UNKNOWN_TIER,
    ERROR_NOT_SEQUENCE,
)
from .topology import (
    Cluster,
    ClusterResult,
    Gap,
    GapResult,
    Redundancy,
    RedundancyResult,
    ClusterSuggestion,
    Orphan,
    OrphanResult,
    ClusterAffinity,
    Bridge,
    Hub,
    TopologyStats,
    Topology,
)
from .recommendations import (
    RecommendationType,
    Recommendation,
    RecommendationResult,
)
from .audits import (
    ImbalanceType,
    DomainCount,
    DomainImbalance,
    CensusResult,
    StaleUnit,
    FreshnessResult,
    HierarchyIssueType,
    HierarchyIssue,
    HierarchyResult,
    TagVariantGroup,
    TagNormalizationResult,
    LineageIssueType,
    LineageIssue,
    LineageResult,
)
from .records import PassSummary, PassRecord, EngineMetrics

__all__ = [
    # Units
    "KnowledgeUnit",
    "UnitSnapshot",
    "coerce_units",
    "normalize_tag",
    "normalize_tags",
    "KNOWN_TIERS",
    "UNKNOWN_TIER",
    "ERROR_NOT_SEQUENCE",
    # Topology
    "Cluster",
    "ClusterResult",
    "Gap",
    "GapResult",
    "Redundancy",
    "RedundancyResult",
    "ClusterSuggestion",
    "Orphan",
    "OrphanResult",
    "ClusterAffinity",
    "Bridge",
    "Hub",
    "TopologyStats",
    "Topology",
    # Recommendations
    "RecommendationType",
    "Recommendation",
    "RecommendationResult",
    # Audits
    "ImbalanceType",
    "DomainCount",
    "DomainImbalance",
    "CensusResult",
    "StaleUnit",
    "FreshnessResult",
    "HierarchyIssueType",
    "HierarchyIssue",
    "HierarchyResult",
    "TagVariantGroup",
    "TagNormalizationResult",
    "LineageIssueType",
    "LineageIssue",
    "LineageResult",
    # Records
    "PassSummary",
    "PassRecord",
    "EngineMetrics",
]
