from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
from functools import lru_cache


class EngineSettings(BaseSettings):
    """
    HLM engine settings loaded from environment variables.

    Environment variables can come from:
    - .env file
    - System environment

    Variable names carry the HLM_ prefix:
    - HLM_MIN_CLUSTER_SIZE, HLM_MAX_CLUSTERS (clustering)
    - HLM_REDUNDANCY_SIMILARITY_THRESHOLD (near-duplicate sweep)
    - HLM_STALE_DAYS (freshness check)
    """

    # Logging
    log_level: str = "INFO"

    # Clustering
    min_cluster_size: int = 3
    max_clusters: int = 100
    min_shared_tags: int = 2
    top_tag_count: int = 5

    # Redundancy sweep
    redundancy_similarity_threshold: float = 0.85

    # Bridges / hubs
    bridge_affinity_threshold: float = 0.4
    max_bridges: int = 50
    max_hubs: int = 20

    # Freshness
    stale_days: int = 90

    # Bounded stores
    pass_history_cap: int = 100
    pass_history_trim_to: int = 50
    recommendation_store_cap: int = 1000
    recommendation_trim_to: int = 500

    # Candidate-pair index (same results as the exhaustive pair loops)
    use_tag_index: bool = True

    model_config = SettingsConfigDict(
        env_prefix="HLM_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore extra env vars
    )

    @field_validator('redundancy_similarity_threshold', 'bridge_affinity_threshold')
    @classmethod
    def check_unit_interval(cls, v):
        """Thresholds are similarity/affinity scores in [0, 1]"""
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {v}")
        return v

    @field_validator(
        'min_cluster_size', 'max_clusters', 'min_shared_tags', 'top_tag_count',
        'max_bridges', 'max_hubs', 'stale_days',
        'pass_history_cap', 'recommendation_store_cap',
    )
    @classmethod
    def check_positive(cls, v):
        if v < 1:
            raise ValueError(f"value must be >= 1, got {v}")
        return v

    @field_validator('pass_history_trim_to')
    @classmethod
    def check_pass_trim(cls, v, info):
        """Trim target must leave room below the cap"""
        cap = info.data.get('pass_history_cap', 100)
        if not 0 <= v < cap:
            raise ValueError(f"pass_history_trim_to must be in [0, {cap}), got {v}")
        return v

    @field_validator('recommendation_trim_to')
    @classmethod
    def check_recommendation_trim(cls, v, info):
        cap = info.data.get('recommendation_store_cap', 1000)
        if not 0 <= v < cap:
            raise ValueError(f"recommendation_trim_to must be in [0, {cap}), got {v}")
        return v


@lru_cache()
def get_settings() -> EngineSettings:
    """Get cached settings instance"""
    return EngineSettings()
