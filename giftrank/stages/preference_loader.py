"""
Stage 1: Preference Profile Loader

Builds a per-user preference summary from interaction history.
Cache first; on miss, loads history from the InteractionSource and derives
category counts, price statistics, and brand counts from LIKE interactions.

Returns None for cold start (unknown user, no history, or a failed/slow load).
The public entry point is load_user_preferences.
"""

import asyncio
import logging
from collections import Counter
from typing import Dict, List, Optional

from giftrank.cache import PreferenceCache
from giftrank.errors import ProfileLoadFailure
from giftrank.models.config import RankingConfig
from giftrank.models.interaction import Interaction, InteractionAction, UserHistory
from giftrank.models.preferences import (
    BehaviorRates,
    PreferenceHistory,
    PriceRange,
    UserPreferences,
)
from giftrank.sources import InteractionSource

logger = logging.getLogger(__name__)

FAVORITE_CATEGORY_COUNT = 5


def _by_action(interactions: List[Interaction], action: InteractionAction) -> List[Interaction]:
    return [i for i in interactions if i.action == action]


def _count_categories(interactions: List[Interaction]) -> Dict[str, int]:
    """Count each category once per interaction on a product carrying it."""
    counts: Counter = Counter()
    for interaction in interactions:
        if interaction.product is None:
            continue
        counts.update(interaction.product.categories)
    return dict(counts)


def _count_brands(interactions: List[Interaction]) -> Dict[str, int]:
    counts: Counter = Counter()
    for interaction in interactions:
        if interaction.product is not None and interaction.product.brand:
            counts[interaction.product.brand] += 1
    return dict(counts)


def _price_range(likes: List[Interaction]) -> PriceRange:
    """Min/max/mean over liked prices; defaults when no liked product carries a price."""
    prices = [
        i.product.price
        for i in likes
        if i.product is not None and i.product.price
    ]
    if not prices:
        return PriceRange()
    return PriceRange(
        min=min(prices),
        max=max(prices),
        preferred=sum(prices) / len(prices),
    )


def _favorite_categories(categories: Dict[str, int]) -> List[str]:
    """Top categories by like count; ties broken by name for stable output."""
    ranked = sorted(categories.items(), key=lambda kv: (-kv[1], kv[0]))
    return [cat for cat, _ in ranked[:FAVORITE_CATEGORY_COUNT]]


def build_preferences(history: UserHistory) -> Optional[UserPreferences]:
    """
    Derive UserPreferences from a user's interaction history.

    Only LIKE interactions feed categories, price, and brands. DISLIKE
    categories are collected separately and are not folded into the positive
    counts. Returns None when the history is empty.
    """
    interactions = history.interactions
    if not interactions:
        return None

    likes = _by_action(interactions, InteractionAction.LIKE)
    dislikes = _by_action(interactions, InteractionAction.DISLIKE)
    saves = _by_action(interactions, InteractionAction.SAVE)

    categories = _count_categories(likes)
    total = len(interactions)

    return UserPreferences(
        user_id=history.user_id,
        categories=categories,
        price_range=_price_range(likes),
        brands=_count_brands(likes),
        demographics=history.demographics,
        disliked_categories=_count_categories(dislikes),
        behavior=BehaviorRates(
            click_rate=len(likes) / total,
            save_rate=len(saves) / total,
            purchase_rate=0.0,
        ),
        history=PreferenceHistory(
            total_interactions=total,
            favorite_categories=_favorite_categories(categories),
        ),
    )


async def _fetch_history(
    session_id: str,
    source: InteractionSource,
    config: RankingConfig,
) -> Optional[UserHistory]:
    try:
        return await asyncio.wait_for(
            source.get_user_history(session_id),
            timeout=config.data_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise ProfileLoadFailure(
            f"interaction history timed out after {config.data_timeout_seconds}s"
        ) from e
    except Exception as e:
        raise ProfileLoadFailure(str(e)) from e


async def load_user_preferences(
    session_id: str,
    source: InteractionSource,
    cache: PreferenceCache,
    config: RankingConfig,
) -> Optional[UserPreferences]:
    """
    Stage 1: Return the cached or freshly derived preferences for session_id.

    Never raises for data-layer problems: failures are logged and treated as
    cold start (None). Only successful, non-empty profiles are cached.
    """
    cached = cache.get(session_id)
    if cached is not None:
        return cached

    try:
        history = await _fetch_history(session_id, source, config)
    except ProfileLoadFailure as e:
        logger.error("[profile_load] FAILED session_id=%s error=%s", session_id, e)
        return None

    if history is None:
        logger.info("[profile_load] COLD_START_UNKNOWN_USER session_id=%s", session_id)
        return None

    preferences = build_preferences(history)
    if preferences is None:
        logger.info("[profile_load] COLD_START_NO_HISTORY session_id=%s", session_id)
        return None

    cache.set(session_id, preferences)
    return preferences
