"""
Recommendation Contracts - Actionable output of a topology.

Recommendations are derived suggestions, not authoritative state.
Downstream consumers (unit store, UI) decide whether to act on them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from utils.datetime_utils import isoformat_or_none


class RecommendationType(Enum):
    """What the consumer is asked to do."""

    FILL_GAP = "fill_gap"  # Create a bridging unit for a tag pair
    MERGE_REDUNDANT = "merge_redundant"  # Merge a near-duplicate pair
    RESCUE_ORPHAN = "rescue_orphan"  # Place an orphan into a cluster


@dataclass(frozen=True)
class Recommendation:
    rec_id: str
    rec_type: RecommendationType
    priority: float  # [0, 1], higher first
    description: str
    data: Dict[str, Any] = field(default_factory=dict)  # Type-specific payload
    created_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rec_id": self.rec_id,
            "type": self.rec_type.value,
            "priority": self.priority,
            "description": self.description,
            "data": dict(self.data),
            "created_at": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class RecommendationResult:
    recommendations: Tuple[Recommendation, ...] = ()
    ok: bool = True
    error: Optional[str] = None

    def of_type(self, rec_type: RecommendationType) -> Tuple[Recommendation, ...]:
        return tuple(r for r in self.recommendations if r.rec_type is rec_type)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "error": self.error,
            "recommendations": [r.to_dict() for r in self.recommendations],
        }
