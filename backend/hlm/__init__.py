"""
HLM Knowledge Topology Engine
=============================

Periodic structural analysis of a knowledge-unit (DTU) collection.
Reads a snapshot, never mutates it, and reports:

    Units → Clusters → Gaps / Redundancies / Orphans
          → Topology (bridges, hubs, stats)
          → Recommendations
    Units → Audits (census, freshness, hierarchy, tags, lineage)

Everything above is pure. HLMEngine assembles one PassRecord per pass
and keeps bounded history in an injected PassRepository.

PUBLIC API:
- HLMEngine: run_pass / run_pass_async and the query surface
- EngineParams: algorithm constants
- topo.*, audits.*, recommender: independently callable analyses
"""

# =============================================================================
# PUBLIC API
# =============================================================================

from .params import EngineParams, DEFAULT_PARAMS
from .contracts import (
    KnowledgeUnit,
    coerce_units,
    Cluster,
    ClusterResult,
    Gap,
    GapResult,
    Redundancy,
    RedundancyResult,
    Orphan,
    OrphanResult,
    Bridge,
    Hub,
    Topology,
    RecommendationType,
    Recommendation,
    RecommendationResult,
    PassRecord,
    PassSummary,
    EngineMetrics,
)
from .similarity import tag_similarity, text_similarity, unit_similarity, share_lineage
from .topo import (
    cluster_analysis,
    gap_analysis,
    redundancy_detection,
    orphan_rescue,
    topology_map,
    find_bridges,
    find_hubs,
)
from .recommender import generate_recommendations
from .audits import (
    domain_census,
    freshness_check,
    hierarchy_check,
    tag_normalization,
    lineage_audit,
)
from .repositories import PassRepository
from .engine import HLMEngine

__all__ = [
    # Engine
    'HLMEngine',
    'PassRepository',
    'EngineParams',
    'DEFAULT_PARAMS',
    # Contracts
    'KnowledgeUnit',
    'coerce_units',
    'Cluster',
    'ClusterResult',
    'Gap',
    'GapResult',
    'Redundancy',
    'RedundancyResult',
    'Orphan',
    'OrphanResult',
    'Bridge',
    'Hub',
    'Topology',
    'RecommendationType',
    'Recommendation',
    'RecommendationResult',
    'PassRecord',
    'PassSummary',
    'EngineMetrics',
    # Similarity
    'tag_similarity',
    'text_similarity',
    'unit_similarity',
    'share_lineage',
    # Analyses
    'cluster_analysis',
    'gap_analysis',
    'redundancy_detection',
    'orphan_rescue',
    'topology_map',
    'find_bridges',
    'find_hubs',
    'generate_recommendations',
    # Audits
    'domain_census',
    'freshness_check',
    'hierarchy_check',
    'tag_normalization',
    'lineage_audit',
]
