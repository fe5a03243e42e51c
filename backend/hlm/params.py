"""
Engine parameters - fixed algorithm constants, tunable at construction.

Every analysis step takes EngineParams explicitly; the outputs of a pass
are deterministic given (snapshot, params).
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from config.settings import EngineSettings

# Fixed weights of the combined unit similarity
TAG_WEIGHT = 0.5
TEXT_WEIGHT = 0.3
DOMAIN_WEIGHT = 0.2

# Merge recommendations at or above this similarity suggest a MEGA merge
MEGA_MERGE_SIMILARITY = 0.9

# Tier promotion thresholds: tier -> (min authority, min children)
TIER_REQUIREMENTS = {
    "mega": (0.5, 2),
    "hyper": (0.7, 3),
}


@dataclass(frozen=True)
class EngineParams:
    """Algorithm constants for one engine."""

    min_cluster_size: int = 3
    max_clusters: int = 100
    min_shared_tags: int = 2
    top_tag_count: int = 5
    redundancy_similarity_threshold: float = 0.85
    bridge_affinity_threshold: float = 0.4
    max_bridges: int = 50
    max_hubs: int = 20
    stale_days: int = 90
    use_tag_index: bool = True

    @property
    def redundancy_needs_shared_tag(self) -> bool:
        """Above the non-tag ceiling only tag-sharing pairs can qualify.

        Text and domain together contribute at most 0.5, so a pair with
        zero tag overlap can never reach a threshold above that.
        """
        return self.redundancy_similarity_threshold > TEXT_WEIGHT + DOMAIN_WEIGHT

    @classmethod
    def from_settings(cls, settings: Optional["EngineSettings"] = None) -> "EngineParams":
        if settings is None:
            from config.settings import get_settings
            settings = get_settings()
        return cls(
            min_cluster_size=settings.min_cluster_size,
            max_clusters=settings.max_clusters,
            min_shared_tags=settings.min_shared_tags,
            top_tag_count=settings.top_tag_count,
            redundancy_similarity_threshold=settings.redundancy_similarity_threshold,
            bridge_affinity_threshold=settings.bridge_affinity_threshold,
            max_bridges=settings.max_bridges,
            max_hubs=settings.max_hubs,
            stale_days=settings.stale_days,
            use_tag_index=settings.use_tag_index,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_PARAMS = EngineParams()
