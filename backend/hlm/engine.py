"""
HLMEngine - pass orchestrator and query surface.

One pass:
1. Cluster analysis
2. Gap analysis
3. Redundancy sweep
4. Topology map (reuses 1-3)
5. Recommendations
6. Audits (census, freshness, hierarchy, tag normalization, lineage)
7. Assemble one PassRecord, then commit it to the repository

compute() is pure: it reads the snapshot and returns a PassRecord.
commit() is the only step that touches shared state.

Usage:
    engine = HLMEngine()
    record = engine.run_pass(units)
    engine.list_recommendations(limit=10)
"""

import asyncio
import logging
from typing import List, Optional

from utils.datetime_utils import utc_now
from utils.id_generator import generate_pass_id

from .contracts.units import UnitSnapshot, coerce_units
from .contracts.topology import ClusterResult, GapResult, OrphanResult, RedundancyResult, Topology
from .contracts.recommendations import Recommendation, RecommendationResult, RecommendationType
from .contracts.audits import (
    CensusResult,
    FreshnessResult,
    HierarchyResult,
    LineageResult,
    TagNormalizationResult,
)
from .contracts.records import EngineMetrics, PassRecord, PassSummary
from .params import EngineParams
from .repositories import PassRepository
from .recommender import generate_recommendations
from .topo import TagIndex, TopologyMapper, cluster_analysis, gap_analysis, redundancy_detection
from .topo.topology_map import empty_topology
from .audits import (
    domain_census,
    freshness_check,
    hierarchy_check,
    lineage_audit,
    tag_normalization,
)

logger = logging.getLogger(__name__)


class HLMEngine:
    """Runs passes and answers queries over stored results.

    Args:
        params: Algorithm constants (default: from EngineSettings)
        repository: Pass/recommendation store (default: a fresh one sized
            from EngineSettings)
    """

    def __init__(
        self,
        params: Optional[EngineParams] = None,
        repository: Optional[PassRepository] = None,
        settings=None,
    ):
        if params is None or repository is None:
            if settings is None:
                from config.settings import get_settings
                settings = get_settings()
        self.params = params or EngineParams.from_settings(settings)
        self.repository = repository or PassRepository.from_settings(settings)
        self.mapper = TopologyMapper(self.params)

    # =========================================================================
    # PASS
    # =========================================================================

    def _failed_pass(self, snapshot: UnitSnapshot, started_at) -> PassRecord:
        error = snapshot.error
        return PassRecord(
            pass_id=generate_pass_id(),
            started_at=started_at,
            completed_at=utc_now(),
            topology=empty_topology(error),
            clusters=ClusterResult(ok=False, error=error),
            gaps=GapResult(ok=False, error=error),
            redundancies=RedundancyResult(ok=False, error=error),
            orphans=OrphanResult(ok=False, error=error),
            recommendations=RecommendationResult(ok=False, error=error),
            domain_census=CensusResult(ok=False, error=error),
            freshness=FreshnessResult(ok=False, error=error),
            hierarchy=HierarchyResult(ok=False, error=error),
            tag_normalization=TagNormalizationResult(ok=False, error=error),
            lineage=LineageResult(ok=False, error=error),
            ok=False,
            error=error,
        )

    def compute(self, units) -> PassRecord:
        """Run every analysis over one snapshot. No shared state is touched."""
        started_at = utc_now()
        pass_id = generate_pass_id()

        snapshot = coerce_units(units)
        if not snapshot.ok:
            logger.warning(f"Pass aborted: {snapshot.error}")
            return self._failed_pass(snapshot, started_at)

        logger.info(
            f"HLM pass {pass_id} started: {len(snapshot)} units"
            + (f" ({snapshot.skipped} skipped)" if snapshot.skipped else "")
        )

        index = TagIndex(snapshot.units) if self.params.use_tag_index else None

        # Step 1-3: structure
        clusters = cluster_analysis(snapshot, self.params, index=index)
        gaps = gap_analysis(clusters, snapshot)
        redundancies = redundancy_detection(snapshot, self.params, index=index)

        # Step 4: topology, reusing the steps above
        topology = self.mapper.map(
            snapshot,
            clusters=clusters,
            gaps=gaps,
            redundancies=redundancies,
            index=index,
        )
        orphans = OrphanResult(orphans=topology.orphans)

        # Step 5: recommendations
        recommendations = generate_recommendations(topology)

        # Step 6: audits
        census = domain_census(snapshot)
        freshness = freshness_check(snapshot, stale_days=self.params.stale_days, now=started_at)
        hierarchy = hierarchy_check(snapshot)
        tags = tag_normalization(snapshot)
        lineage = lineage_audit(snapshot)

        summary = PassSummary(
            total_units=len(snapshot),
            skipped_units=snapshot.skipped,
            cluster_count=len(clusters.clusters),
            unassigned_count=len(clusters.unassigned),
            gap_count=len(gaps.gaps),
            redundancy_count=len(redundancies.redundancies),
            orphan_count=len(orphans.orphans),
            recommendation_count=len(recommendations.recommendations),
            stale_unit_count=freshness.stale_count,
            hierarchy_issue_count=len(hierarchy.issues),
            tag_issue_count=len(tags.normalizations),
            lineage_issue_count=len(lineage.issues),
            domain_imbalance_count=len(census.imbalances),
        )

        record = PassRecord(
            pass_id=pass_id,
            started_at=started_at,
            completed_at=utc_now(),
            topology=topology,
            clusters=clusters,
            gaps=gaps,
            redundancies=redundancies,
            orphans=orphans,
            recommendations=recommendations,
            domain_census=census,
            freshness=freshness,
            hierarchy=hierarchy,
            tag_normalization=tags,
            lineage=lineage,
            summary=summary,
        )

        logger.info(
            f"HLM pass {pass_id} complete in {record.duration_seconds:.3f}s: "
            f"{summary.cluster_count} clusters, {summary.gap_count} gaps, "
            f"{summary.redundancy_count} redundancies, {summary.orphan_count} orphans, "
            f"{summary.recommendation_count} recommendations"
        )
        return record

    def commit(self, record: PassRecord) -> None:
        """Store a computed pass. Failed passes are not stored."""
        if not record.ok:
            return
        self.repository.commit(record)

    def run_pass(self, units) -> PassRecord:
        record = self.compute(units)
        self.commit(record)
        return record

    async def run_pass_async(self, units) -> PassRecord:
        """Compute in a worker thread; commit only once the computation returns.

        Cancelling the awaiting task before that point leaves the
        repository untouched.
        """
        record = await asyncio.to_thread(self.compute, units)
        self.commit(record)
        return record

    # =========================================================================
    # RECOMMENDATIONS
    # =========================================================================

    def get_recommendations(self, topology: Topology) -> RecommendationResult:
        """Generate recommendations for a topology and keep them for lookup."""
        result = generate_recommendations(topology)
        if result.ok:
            self.repository.save_recommendations(result.recommendations)
        return result

    def list_recommendations(
        self,
        rec_type: Optional[RecommendationType] = None,
        limit: Optional[int] = None,
    ) -> List[Recommendation]:
        return self.repository.list_recommendations(rec_type=rec_type, limit=limit)

    def get_recommendation(self, rec_id: str) -> Optional[Recommendation]:
        return self.repository.get_recommendation(rec_id)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def get_pass(self, pass_id: str) -> Optional[PassRecord]:
        return self.repository.get_pass(pass_id)

    def list_passes(self) -> List[PassRecord]:
        return self.repository.list_passes()

    def get_metrics(self) -> EngineMetrics:
        return self.repository.metrics()
