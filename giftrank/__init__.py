"""
giftrank: gift recommendation ranking pipeline

Single entry point for the ranking package:
- models/: RankingConfig, SessionProfile, CatalogProduct, RankedProduct, UserPreferences
- stages/: preference loader, candidate retriever, scoring, niche boost, diversity, paginator
- recommendation_engine: RecommendationEngine facade
- ingestion: catalog ingestion with duplicate detection
"""

from .cache import LRUPreferenceCache, PreferenceCache
from .errors import (
    CandidateRetrievalFailure,
    GiftRankError,
    InvalidArgument,
    PipelineFailure,
    ProfileLoadFailure,
)
from .ingestion import IngestionEngine, IngestionResult, IngestionStats, IncomingProduct
from .models import (
    DEFAULT_CONFIG,
    CandidateProduct,
    CatalogProduct,
    Interaction,
    InteractionAction,
    NicheProfile,
    RankedProduct,
    RankingConfig,
    RecommendationResult,
    SessionConstraints,
    SessionProfile,
    UserHistory,
    UserPreferences,
)
from .recommendation_engine import RecommendationEngine
from .sources import CatalogSink, CatalogSource, InteractionSource

__all__ = [
    "DEFAULT_CONFIG",
    "CandidateProduct",
    "CandidateRetrievalFailure",
    "CatalogProduct",
    "CatalogSink",
    "CatalogSource",
    "GiftRankError",
    "IncomingProduct",
    "IngestionEngine",
    "IngestionResult",
    "IngestionStats",
    "Interaction",
    "InteractionAction",
    "InteractionSource",
    "InvalidArgument",
    "LRUPreferenceCache",
    "NicheProfile",
    "PipelineFailure",
    "PreferenceCache",
    "ProfileLoadFailure",
    "RankedProduct",
    "RankingConfig",
    "RecommendationEngine",
    "RecommendationResult",
    "SessionConstraints",
    "SessionProfile",
    "UserHistory",
    "UserPreferences",
]
