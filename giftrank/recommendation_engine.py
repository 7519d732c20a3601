"""
Gift recommendation engine: facade over the ranking pipeline.

Holds the collaborators (catalog, interaction history, preference cache,
config) and exposes the three operations route handlers call:
get_recommendations, update_user_preferences, get_niche_profiles.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from giftrank.cache import LRUPreferenceCache, PreferenceCache
from giftrank.models.config import RankingConfig, resolve_config
from giftrank.models.interaction import InteractionAction
from giftrank.models.niche import NicheProfile
from giftrank.models.results import RecommendationResult
from giftrank.models.session import SessionProfile, ensure_session
from giftrank.sources import CatalogSource, InteractionSource
from giftrank.stages.niche_profiles import get_niche_profiles
from giftrank.stages.orchestrator import run_pipeline
from giftrank.stages.scoring import ScoringStrategy

logger = logging.getLogger(__name__)


class RecommendationEngine:
    """Multi-signal product ranking over a catalog and per-user interaction history."""

    def __init__(
        self,
        catalog: CatalogSource,
        interactions: InteractionSource,
        config: Optional[RankingConfig] = None,
        cache: Optional[PreferenceCache] = None,
        strategies: Optional[Sequence[ScoringStrategy]] = None,
    ):
        self.config = resolve_config(config)
        self.catalog = catalog
        self.interactions = interactions
        self.cache = cache if cache is not None else LRUPreferenceCache(
            self.config.preference_cache_size
        )
        self.strategies = strategies

    async def get_recommendations(
        self,
        session: Union[SessionProfile, Dict[str, Any]],
        page: int = 0,
        page_size: Optional[int] = None,
    ) -> RecommendationResult:
        """
        Rank catalog products for session and return the requested page.

        Raises:
            InvalidArgument: negative page or page_size.
            PipelineFailure: unrecovered error inside the pipeline.
        """
        session = ensure_session(session)
        size = self.config.default_page_size if page_size is None else page_size
        return await run_pipeline(
            session,
            page,
            size,
            self.catalog,
            self.interactions,
            self.cache,
            self.config,
            self.strategies,
        )

    async def update_user_preferences(
        self,
        session_id: str,
        product_id: str,
        action: Union[InteractionAction, str],
    ) -> None:
        """
        React to a new interaction. Currently drops the cached profile so the
        next request rebuilds it from history; errors are logged, not raised.
        """
        try:
            action = InteractionAction(action)
            logger.info(
                "[preferences] UPDATE session_id=%s product_id=%s action=%s",
                session_id, product_id, action.value,
            )
            self.cache.invalidate(session_id)
        except Exception as e:
            logger.error(
                "[preferences] UPDATE_FAILED session_id=%s product_id=%s error=%s",
                session_id, product_id, e,
            )

    async def get_niche_profiles(self, limit: int = 20) -> List[NicheProfile]:
        """Per-category aggregates over the approved catalog."""
        return await get_niche_profiles(self.catalog, self.config, limit=limit)
