"""
Ranking configuration: scorer weights, niche targeting, diversity, and limits.

RankingConfig defaults are defined here. The server may pass a dict
(e.g. loaded from RANKING_CONFIG_PATH); from_dict() merges it with these defaults
and accepts the camelCase section names used by the web frontend.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CollaborativeFilteringConfig(BaseModel):
    """Collaborative-proxy signal. Thresholds are kept for a future real CF model."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    min_users: int = Field(10, alias="minUsers")
    min_interactions: int = Field(5, alias="minInteractions")
    similarity_threshold: float = Field(0.3, ge=0.0, le=1.0, alias="similarityThreshold")


class ContentBasedConfig(BaseModel):
    """Weights inside the content-based signal."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    embedding_weight: float = Field(0.4, ge=0.0, le=1.0, alias="embeddingWeight")
    category_weight: float = Field(0.3, ge=0.0, le=1.0, alias="categoryWeight")
    price_weight: float = Field(0.2, ge=0.0, le=1.0, alias="priceWeight")
    rating_weight: float = Field(0.1, ge=0.0, le=1.0, alias="ratingWeight")


class DeepLearningConfig(BaseModel):
    """Placeholder model signal. Off until a trained model exists."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    enabled: bool = False
    model_path: str = Field("./models/recommendation-model.json", alias="modelPath")
    batch_size: int = Field(32, alias="batchSize")
    prediction_threshold: float = Field(0.5, ge=0.0, le=1.0, alias="predictionThreshold")


class HybridConfig(BaseModel):
    """Stage weights applied to each signal before summing into final_score."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    collaborative_weight: float = Field(0.3, ge=0.0, le=1.0, alias="collaborativeWeight")
    content_weight: float = Field(0.4, ge=0.0, le=1.0, alias="contentWeight")
    deep_weight: float = Field(0.2, ge=0.0, le=1.0, alias="deepWeight")
    demographic_weight: float = Field(0.1, ge=0.0, le=1.0, alias="demographicWeight")
    # When True, final_score is divided by the sum of weights of enabled signals.
    # Off by default; a disabled signal lowers the achievable total.
    renormalize_weights: bool = Field(False, alias="renormalizeWeights")


class NicheTargetingConfig(BaseModel):
    """Niche bonus and diversity/novelty boosts."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = True
    niche_threshold: float = Field(0.7, ge=0.0, le=1.0, alias="nicheThreshold")
    # Defaults to the threshold value; the web app added the threshold itself as the bonus.
    niche_bonus: float = Field(0.7, ge=0.0, le=1.0, alias="nicheBonus")
    diversity_boost: float = Field(0.1, ge=0.0, le=1.0, alias="diversityBoost")
    novelty_boost: float = Field(0.15, ge=0.0, le=1.0, alias="noveltyBoost")
    novelty_recency_threshold: float = Field(0.8, ge=0.0, le=1.0, alias="noveltyRecencyThreshold")


class DislikePenaltyConfig(BaseModel):
    """Negative signal from disliked categories. Off by default."""

    model_config = ConfigDict(populate_by_name=True)

    enabled: bool = False
    weight: float = Field(0.1, ge=0.0, le=1.0)


_SECTION_ALIASES = {
    "collaborativeFiltering": "collaborative_filtering",
    "contentBased": "content_based",
    "deepLearning": "deep_learning",
    "nicheTargeting": "niche_targeting",
    "dislikePenalty": "dislike_penalty",
}


class RankingConfig(BaseModel):
    """Configuration for the recommendation ranking pipeline."""

    # -------------------------------------------------------------------------
    # Scoring signals
    # -------------------------------------------------------------------------

    collaborative_filtering: CollaborativeFilteringConfig = Field(
        default_factory=CollaborativeFilteringConfig
    )
    content_based: ContentBasedConfig = Field(default_factory=ContentBasedConfig)
    deep_learning: DeepLearningConfig = Field(default_factory=DeepLearningConfig)
    hybrid: HybridConfig = Field(default_factory=HybridConfig)
    niche_targeting: NicheTargetingConfig = Field(default_factory=NicheTargetingConfig)
    dislike_penalty: DislikePenaltyConfig = Field(default_factory=DislikePenaltyConfig)

    # -------------------------------------------------------------------------
    # Retrieval and pagination
    # -------------------------------------------------------------------------

    # Page size when the caller does not pass one.
    default_page_size: int = Field(20, ge=1)
    # Candidates fetched per request = candidate_multiplier * page_size.
    candidate_multiplier: int = Field(3, ge=1)
    # Hard cap on the diversified list, independent of page size.
    max_diversified: int = Field(100, ge=1)

    # -------------------------------------------------------------------------
    # Data layer
    # -------------------------------------------------------------------------

    # Upper bound on each catalog / interaction-history call.
    data_timeout_seconds: float = Field(5.0, gt=0.0)
    # Max preference profiles held by the default in-process cache.
    preference_cache_size: int = Field(1024, ge=1)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "RankingConfig":
        """Create config from dictionary (e.g., loaded from JSON). Missing keys keep defaults."""
        flat: Dict[str, Any] = {}
        for key, value in config_dict.items():
            if key.startswith("_"):
                continue
            flat[_SECTION_ALIASES.get(key, key)] = value
        allowed = set(cls.model_fields)
        filtered = {k: v for k, v in flat.items() if k in allowed}
        return cls.model_validate(filtered)


DEFAULT_CONFIG = RankingConfig()


def resolve_config(config: Optional[RankingConfig]) -> RankingConfig:
    """Return config or DEFAULT_CONFIG when none is provided."""
    return config if config is not None else DEFAULT_CONFIG
