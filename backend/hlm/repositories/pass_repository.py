"""
Pass Repository - In-memory bounded storage for pass records

Storage strategy:
- Pass history: insertion-ordered, keyed by pass_id
- Recommendations: insertion-ordered, keyed by rec_id
- Metrics: cumulative totals only, no per-unit detail

Both stores are bounded: when a store exceeds its cap, the oldest
entries are dropped until it is back down to the trim target.

All state sits behind one lock; the engine computes a pass without
holding it and only takes it to commit.
"""
import logging
from collections import OrderedDict
from datetime import datetime
from threading import Lock
from typing import Iterable, List, Optional, Sequence

from ..contracts.records import EngineMetrics, PassRecord
from ..contracts.recommendations import Recommendation, RecommendationType

logger = logging.getLogger(__name__)


class PassRepository:
    """
    Repository for pass records, recommendations and engine metrics.

    Usage:
        repo = PassRepository(pass_cap=100, pass_trim_to=50)
        repo.commit(record)
    """

    def __init__(
        self,
        pass_cap: int = 100,
        pass_trim_to: int = 50,
        recommendation_cap: int = 1000,
        recommendation_trim_to: int = 500,
    ):
        if not 0 <= pass_trim_to < pass_cap:
            raise ValueError(f"pass_trim_to must be in [0, {pass_cap}), got {pass_trim_to}")
        if not 0 <= recommendation_trim_to < recommendation_cap:
            raise ValueError(
                f"recommendation_trim_to must be in [0, {recommendation_cap}), "
                f"got {recommendation_trim_to}"
            )

        self.pass_cap = pass_cap
        self.pass_trim_to = pass_trim_to
        self.recommendation_cap = recommendation_cap
        self.recommendation_trim_to = recommendation_trim_to

        self.lock = Lock()
        self._passes: "OrderedDict[str, PassRecord]" = OrderedDict()
        self._recommendations: "OrderedDict[str, Recommendation]" = OrderedDict()

        self._total_passes = 0
        self._total_clusters = 0
        self._total_orphans = 0
        self._total_redundancies = 0
        self._total_gaps = 0
        self._total_recommendations = 0
        self._last_pass_at: Optional[datetime] = None
        self._last_pass_id: Optional[str] = None

    @classmethod
    def from_settings(cls, settings) -> "PassRepository":
        return cls(
            pass_cap=settings.pass_history_cap,
            pass_trim_to=settings.pass_history_trim_to,
            recommendation_cap=settings.recommendation_store_cap,
            recommendation_trim_to=settings.recommendation_trim_to,
        )

    @staticmethod
    def _trim(store: OrderedDict, cap: int, trim_to: int) -> int:
        """Drop oldest entries once the store exceeds cap. Returns number evicted."""
        if len(store) <= cap:
            return 0
        evicted = 0
        while len(store) > trim_to:
            store.popitem(last=False)
            evicted += 1
        return evicted

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def _store_pass(self, record: PassRecord) -> int:
        self._passes[record.pass_id] = record
        return self._trim(self._passes, self.pass_cap, self.pass_trim_to)

    def _store_recommendations(self, recommendations: Iterable[Recommendation]) -> int:
        for rec in recommendations:
            self._recommendations[rec.rec_id] = rec
        return self._trim(
            self._recommendations, self.recommendation_cap, self.recommendation_trim_to
        )

    def _fold_metrics(self, record: PassRecord) -> None:
        summary = record.summary
        self._total_passes += 1
        self._total_clusters += summary.cluster_count
        self._total_orphans += summary.orphan_count
        self._total_redundancies += summary.redundancy_count
        self._total_gaps += summary.gap_count
        self._last_pass_at = record.completed_at
        self._last_pass_id = record.pass_id

    @staticmethod
    def _log_evictions(passes: int, recommendations: int) -> None:
        if passes:
            logger.debug(f"Pass history trimmed: evicted {passes} oldest passes")
        if recommendations:
            logger.debug(f"Recommendation store trimmed: evicted {recommendations} oldest")

    def commit(self, record: PassRecord) -> None:
        """
        Store a completed pass in one step.

        The pass, its recommendations and the metric totals are written
        under a single lock acquisition, so readers see either none or
        all of the pass.
        """
        recommendations = record.recommendations.recommendations
        with self.lock:
            passes_evicted = self._store_pass(record)
            recs_evicted = self._store_recommendations(recommendations)
            self._fold_metrics(record)
            self._total_recommendations += len(recommendations)
        self._log_evictions(passes_evicted, recs_evicted)

    def save_recommendations(self, recommendations: Sequence[Recommendation]) -> None:
        """Store recommendations and count them in the totals."""
        with self.lock:
            evicted = self._store_recommendations(recommendations)
            self._total_recommendations += len(recommendations)
        self._log_evictions(0, evicted)

    def add_pass(self, record: PassRecord) -> None:
        with self.lock:
            evicted = self._store_pass(record)
        self._log_evictions(evicted, 0)

    def add_recommendations(self, recommendations: Iterable[Recommendation]) -> None:
        with self.lock:
            evicted = self._store_recommendations(recommendations)
        self._log_evictions(0, evicted)

    def record_metrics(self, record: PassRecord) -> None:
        """Fold one pass into the cumulative totals."""
        with self.lock:
            self._fold_metrics(record)

    def record_recommendations(self, count: int) -> None:
        with self.lock:
            self._total_recommendations += count

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def get_pass(self, pass_id: str) -> Optional[PassRecord]:
        with self.lock:
            return self._passes.get(pass_id)

    def list_passes(self) -> List[PassRecord]:
        """Stored passes, newest first."""
        with self.lock:
            return list(reversed(self._passes.values()))

    def get_recommendation(self, rec_id: str) -> Optional[Recommendation]:
        with self.lock:
            return self._recommendations.get(rec_id)

    def list_recommendations(
        self,
        rec_type: Optional[RecommendationType] = None,
        limit: Optional[int] = None,
    ) -> List[Recommendation]:
        """
        Stored recommendations, highest priority first.

        Args:
            rec_type: Only recommendations of this type
            limit: Max number returned (None = all)
        """
        with self.lock:
            recs = list(self._recommendations.values())
        if rec_type is not None:
            recs = [r for r in recs if r.rec_type is rec_type]
        recs.sort(key=lambda r: r.priority, reverse=True)
        if limit is not None:
            recs = recs[:max(0, limit)]
        return recs

    def metrics(self) -> EngineMetrics:
        with self.lock:
            return EngineMetrics(
                total_passes=self._total_passes,
                total_clusters=self._total_clusters,
                total_orphans=self._total_orphans,
                total_redundancies=self._total_redundancies,
                total_gaps=self._total_gaps,
                total_recommendations=self._total_recommendations,
                last_pass_at=self._last_pass_at,
                last_pass_id=self._last_pass_id,
                stored_passes=len(self._passes),
                stored_recommendations=len(self._recommendations),
            )
