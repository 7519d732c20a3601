"""Data models for the ranking pipeline."""

from .config import DEFAULT_CONFIG, RankingConfig, resolve_config
from .interaction import (
    Interaction,
    InteractionAction,
    UserHistory,
    ensure_interactions,
)
from .niche import NicheProfile
from .preferences import (
    BehaviorRates,
    Demographics,
    PreferenceHistory,
    PriceRange,
    UserPreferences,
)
from .product import (
    CandidateProduct,
    CatalogProduct,
    RankedProduct,
    ensure_products,
)
from .results import RecommendationResult
from .session import SessionConstraints, SessionProfile, ensure_session

__all__ = [
    "DEFAULT_CONFIG",
    "BehaviorRates",
    "CandidateProduct",
    "CatalogProduct",
    "Demographics",
    "Interaction",
    "InteractionAction",
    "NicheProfile",
    "PreferenceHistory",
    "PriceRange",
    "RankedProduct",
    "RankingConfig",
    "RecommendationResult",
    "SessionConstraints",
    "SessionProfile",
    "UserHistory",
    "UserPreferences",
    "ensure_interactions",
    "ensure_products",
    "ensure_session",
    "resolve_config",
]
