"""
Recommendation Generator
========================

Turns one Topology into prioritized, typed recommendations:

- fill_gap         one per Gap: create a bridging unit for the tag pair.
                   priority = 0.5 + 0.02 * (tag_a_count + tag_b_count)
- merge_redundant  one per Redundancy: merge into the higher-authority unit.
                   priority = similarity; suggest_mega when >= 0.9
- rescue_orphan    one per Orphan WITH a suggested cluster.
                   priority = suggestion affinity

All priorities clamped to [0, 1]; output sorted by priority descending
(stable, so equal priorities keep gap → merge → orphan order).
"""

import logging
from typing import List

from utils.datetime_utils import utc_now
from utils.id_generator import generate_recommendation_id

from .contracts.topology import Gap, Orphan, Redundancy, Topology
from .contracts.recommendations import (
    Recommendation,
    RecommendationResult,
    RecommendationType,
)
from .params import MEGA_MERGE_SIMILARITY

logger = logging.getLogger(__name__)

ERROR_NO_TOPOLOGY = "topology_required"

GAP_BASE_PRIORITY = 0.5
GAP_PRIORITY_PER_UNIT = 0.02


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, float(v)))


def _fill_gap(gap: Gap, created_at) -> Recommendation:
    priority = GAP_BASE_PRIORITY + (gap.tag_a_count + gap.tag_b_count) * GAP_PRIORITY_PER_UNIT
    return Recommendation(
        rec_id=generate_recommendation_id(),
        rec_type=RecommendationType.FILL_GAP,
        priority=_clamp01(priority),
        description=(
            f'Create bridging DTU connecting "{gap.tag_a}" and "{gap.tag_b}" '
            f'in cluster "{gap.cluster_name}"'
        ),
        data={
            "cluster_id": gap.cluster_id,
            "cluster_name": gap.cluster_name,
            "tag_a": gap.tag_a,
            "tag_b": gap.tag_b,
            "suggested_tags": [gap.tag_a, gap.tag_b],
        },
        created_at=created_at,
    )


def _merge_redundant(r: Redundancy, created_at) -> Recommendation:
    return Recommendation(
        rec_id=generate_recommendation_id(),
        rec_type=RecommendationType.MERGE_REDUNDANT,
        priority=_clamp01(r.similarity),
        description=(
            f"Merge near-duplicate DTUs {r.unit_a} and {r.unit_b} "
            f"(similarity: {r.similarity}). Keep {r.keep_id} (higher authority)."
        ),
        data={
            "keep_id": r.keep_id,
            "merge_id": r.merge_id,
            "similarity": r.similarity,
            "keep_authority": r.keep_authority,
            "suggest_mega": r.similarity >= MEGA_MERGE_SIMILARITY,
        },
        created_at=created_at,
    )


def _rescue_orphan(o: Orphan, created_at) -> Recommendation:
    s = o.suggested_cluster
    return Recommendation(
        rec_id=generate_recommendation_id(),
        rec_type=RecommendationType.RESCUE_ORPHAN,
        priority=_clamp01(s.affinity),
        description=(
            f'Place orphan DTU {o.unit_id} into cluster "{s.cluster_name}" '
            f"(affinity: {s.affinity})"
        ),
        data={
            "unit_id": o.unit_id,
            "cluster_id": s.cluster_id,
            "cluster_name": s.cluster_name,
            "affinity": s.affinity,
        },
        created_at=created_at,
    )


def generate_recommendations(topology: Topology) -> RecommendationResult:
    """Pure recommendation synthesis. Storing them is the engine's job."""
    if not isinstance(topology, Topology):
        return RecommendationResult(ok=False, error=ERROR_NO_TOPOLOGY)

    created_at = utc_now()
    recommendations: List[Recommendation] = []
    recommendations.extend(_fill_gap(g, created_at) for g in topology.gaps)
    recommendations.extend(_merge_redundant(r, created_at) for r in topology.redundancies)
    recommendations.extend(
        _rescue_orphan(o, created_at) for o in topology.orphans if o.suggested_cluster
    )

    recommendations.sort(key=lambda r: r.priority, reverse=True)

    logger.debug(f"Generated {len(recommendations)} recommendations")
    return RecommendationResult(recommendations=tuple(recommendations))
