"""
Scoring strategies: one per signal blended into final_score.

Each strategy reports whether it is enabled for a config, the stage weight it
contributes with, and a raw score for a (product, preferences) pair.
Adding a signal means adding a strategy to DEFAULT_STRATEGIES; the aggregator
in core.py does not change.

Cold start (preferences is None): content, collaborative, and demographic
signals all resolve to NEUTRAL_SCORE.
"""

from typing import Optional, Protocol, Tuple

from giftrank.models.config import RankingConfig
from giftrank.models.preferences import UserPreferences
from giftrank.models.product import CandidateProduct
from giftrank.utils.scores import (
    NEUTRAL_SCORE,
    category_overlap,
    normalize_percent,
    price_fit,
)


class ScoringStrategy(Protocol):
    """Protocol for one scoring signal."""

    name: str

    def enabled(self, config: RankingConfig) -> bool:
        ...

    def weight(self, config: RankingConfig) -> float:
        ...

    def score(
        self,
        product: CandidateProduct,
        preferences: Optional[UserPreferences],
        config: RankingConfig,
    ) -> float:
        ...


class ContentBasedStrategy:
    """
    Category overlap, price fit, quality, and retrieval similarity, each with
    its own content_based weight. Capped at 1.0.
    """

    name = "content"

    def enabled(self, config: RankingConfig) -> bool:
        return config.content_based.enabled

    def weight(self, config: RankingConfig) -> float:
        return config.hybrid.content_weight

    def score(
        self,
        product: CandidateProduct,
        preferences: Optional[UserPreferences],
        config: RankingConfig,
    ) -> float:
        if preferences is None:
            return NEUTRAL_SCORE
        cb = config.content_based
        prices = preferences.price_range

        category_score = category_overlap(product.categories, preferences.categories)
        price_score = price_fit(product.price, prices.min, prices.max, prices.preferred)
        rating_score = normalize_percent(product.quality_score)
        embedding_score = product.similarity or 0.0

        total = (
            category_score * cb.category_weight
            + price_score * cb.price_weight
            + rating_score * cb.rating_weight
            + embedding_score * cb.embedding_weight
        )
        return min(total, 1.0)


class CollaborativeProxyStrategy:
    """
    Average of normalized popularity and quality.

    Stands in for collaborative filtering until an interaction matrix exists.
    """

    name = "collaborative"

    def enabled(self, config: RankingConfig) -> bool:
        return config.collaborative_filtering.enabled

    def weight(self, config: RankingConfig) -> float:
        return config.hybrid.collaborative_weight

    def score(
        self,
        product: CandidateProduct,
        preferences: Optional[UserPreferences],
        config: RankingConfig,
    ) -> float:
        if preferences is None:
            return NEUTRAL_SCORE
        popularity = normalize_percent(product.popularity_score)
        quality = normalize_percent(product.quality_score)
        return (popularity + quality) / 2


class NeutralStrategy:
    """
    Constant NEUTRAL_SCORE for a signal without a model behind it.

    enabled_flag / weight_field select the config switches; used for the
    deep-learning slot, which is off by default.
    """

    def __init__(self, name: str, enabled_flag: Tuple[str, str], weight_field: Tuple[str, str]):
        self.name = name
        self._enabled_flag = enabled_flag
        self._weight_field = weight_field

    def enabled(self, config: RankingConfig) -> bool:
        section, field = self._enabled_flag
        return bool(getattr(getattr(config, section), field))

    def weight(self, config: RankingConfig) -> float:
        section, field = self._weight_field
        return float(getattr(getattr(config, section), field))

    def score(
        self,
        product: CandidateProduct,
        preferences: Optional[UserPreferences],
        config: RankingConfig,
    ) -> float:
        return NEUTRAL_SCORE


# (category, age group) -> bonus over the neutral base; first match wins.
DEMOGRAPHIC_BONUSES = (
    ("Electronics", "18-34", 0.2),
    ("Books", "35-54", 0.15),
)


class DemographicStrategy:
    """Neutral base plus fixed bonuses for known category / age-group affinities."""

    name = "demographic"

    def enabled(self, config: RankingConfig) -> bool:
        return True

    def weight(self, config: RankingConfig) -> float:
        return config.hybrid.demographic_weight

    def score(
        self,
        product: CandidateProduct,
        preferences: Optional[UserPreferences],
        config: RankingConfig,
    ) -> float:
        if preferences is None:
            return NEUTRAL_SCORE
        age_group = preferences.demographics.age_group
        for category, group, bonus in DEMOGRAPHIC_BONUSES:
            if category in product.categories and age_group == group:
                return NEUTRAL_SCORE + bonus
        return NEUTRAL_SCORE


class DislikePenaltyStrategy:
    """Negative overlap between product categories and disliked categories. Off by default."""

    name = "dislike_penalty"
    penalty = True

    def enabled(self, config: RankingConfig) -> bool:
        return config.dislike_penalty.enabled

    def weight(self, config: RankingConfig) -> float:
        return config.dislike_penalty.weight

    def score(
        self,
        product: CandidateProduct,
        preferences: Optional[UserPreferences],
        config: RankingConfig,
    ) -> float:
        if preferences is None or not preferences.disliked_categories:
            return 0.0
        return -category_overlap(product.categories, preferences.disliked_categories)


DEFAULT_STRATEGIES: Tuple[ScoringStrategy, ...] = (
    ContentBasedStrategy(),
    CollaborativeProxyStrategy(),
    NeutralStrategy(
        "deep_learning",
        enabled_flag=("deep_learning", "enabled"),
        weight_field=("hybrid", "deep_weight"),
    ),
    DemographicStrategy(),
    DislikePenaltyStrategy(),
)
