"""
Pipeline orchestrator: runs the six stages in order for one request:

    preferences -> candidates -> scoring -> niche boost -> diversity -> page

Stages 1-2 recover from data-layer failures on their own (cold start / empty
candidates). Anything else escaping a stage is wrapped in PipelineFailure;
InvalidArgument is re-raised unchanged.
"""

import logging
from typing import Optional, Sequence

from giftrank.cache import PreferenceCache
from giftrank.errors import InvalidArgument, PipelineFailure
from giftrank.models.config import RankingConfig
from giftrank.models.results import RecommendationResult
from giftrank.models.session import SessionProfile
from giftrank.sources import CatalogSource, InteractionSource

from .candidate_retriever import retrieve_candidates
from .diversity import apply_diversity_and_novelty
from .niche_booster import apply_niche_boost
from .paginator import paginate
from .preference_loader import load_user_preferences
from .scoring import ScoringStrategy, score_candidates

logger = logging.getLogger(__name__)


def _validate_paging(page: int, page_size: int) -> None:
    if page < 0:
        raise InvalidArgument(f"page must be >= 0, got {page}")
    if page_size < 0:
        raise InvalidArgument(f"page_size must be >= 0, got {page_size}")


async def run_pipeline(
    session: SessionProfile,
    page: int,
    page_size: int,
    catalog: CatalogSource,
    interactions: InteractionSource,
    cache: PreferenceCache,
    config: RankingConfig,
    strategies: Optional[Sequence[ScoringStrategy]] = None,
) -> RecommendationResult:
    """
    Produce one page of recommendations for session.

    Returns:
        RecommendationResult(page, has_more, products); products empty and
        has_more False when no candidates could be retrieved.
    """
    _validate_paging(page, page_size)
    try:
        # 1) Preference profile (None = cold start)
        preferences = await load_user_preferences(
            session.session_id, interactions, cache, config
        )

        # 2) Candidate set, 3x the page size
        limit = page_size * config.candidate_multiplier
        candidates = await retrieve_candidates(session, catalog, limit, config)

        # 3) Weighted multi-signal scoring
        ranked = score_candidates(candidates, preferences, config, strategies)

        # 4) Niche bonus
        ranked = apply_niche_boost(ranked, preferences, config)

        # 5) Diversity / novelty, seen-set exclusion, cap
        diversified = apply_diversity_and_novelty(
            ranked, session.constraints.seen_ids, config
        )

        # 6) Page slice
        products, has_more = paginate(diversified, page, page_size)
    except InvalidArgument:
        raise
    except Exception as e:
        logger.exception(
            "[pipeline] FAILED session_id=%s page=%s page_size=%s",
            session.session_id, page, page_size,
        )
        raise PipelineFailure(f"recommendation pipeline failed: {e}") from e

    logger.info(
        "[pipeline] session_id=%s cold_start=%s candidates=%s diversified=%s page=%s returned=%s",
        session.session_id, preferences is None, len(candidates), len(diversified),
        page, len(products),
    )
    return RecommendationResult(page=page, has_more=has_more, products=products)
