"""Shared utilities for scoring and similarity."""

from .scores import (
    NEUTRAL_SCORE,
    category_overlap,
    days_since,
    listing_recency_score,
    normalize_percent,
    price_fit,
)
from .similarity import cosine_distance, cosine_similarity

__all__ = [
    "NEUTRAL_SCORE",
    "category_overlap",
    "cosine_distance",
    "cosine_similarity",
    "days_since",
    "listing_recency_score",
    "normalize_percent",
    "price_fit",
]
