"""
Stage 3: Multi-Signal Scorer

Sums weight * score over every enabled strategy into final_score and sorts
descending. Ties are broken by product id ascending so repeated calls return
the same order.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from giftrank.models.config import RankingConfig
from giftrank.models.preferences import UserPreferences
from giftrank.models.product import CandidateProduct, RankedProduct

from .strategies import DEFAULT_STRATEGIES, ScoringStrategy

logger = logging.getLogger(__name__)


def ranking_sort_key(product: RankedProduct):
    """final_score descending, then id ascending."""
    return (-product.final_score, product.id)


def sort_ranked(products: Iterable[RankedProduct]) -> List[RankedProduct]:
    return sorted(products, key=ranking_sort_key)


def _score_one(
    product: CandidateProduct,
    preferences: Optional[UserPreferences],
    strategies: Sequence[ScoringStrategy],
    config: RankingConfig,
) -> RankedProduct:
    total = 0.0
    weight_sum = 0.0
    signal_scores = {}
    for strategy in strategies:
        if not strategy.enabled(config):
            continue
        raw = strategy.score(product, preferences, config)
        weight = strategy.weight(config)
        signal_scores[strategy.name] = raw
        total += raw * weight
        if not getattr(strategy, "penalty", False):
            weight_sum += weight

    if config.hybrid.renormalize_weights and weight_sum > 0:
        total /= weight_sum

    return RankedProduct(
        **product.model_dump(),
        final_score=total,
        rank=0,
        signal_scores=signal_scores,
    )


def score_candidates(
    candidates: List[CandidateProduct],
    preferences: Optional[UserPreferences],
    config: RankingConfig,
    strategies: Optional[Sequence[ScoringStrategy]] = None,
) -> List[RankedProduct]:
    """
    Stage 3: Score every candidate and return them sorted by final_score.

    preferences=None is cold start; strategies fall back to neutral scores.
    Weights are not renormalized unless hybrid.renormalize_weights is set.
    """
    strategies = DEFAULT_STRATEGIES if strategies is None else strategies
    ranked = [_score_one(p, preferences, strategies, config) for p in candidates]
    if preferences is None and ranked:
        logger.debug("[scoring] COLD_START neutral signals for %s candidates", len(ranked))
    return sort_ranked(ranked)
