"""
Stage 4: Niche Booster

Adds niche_targeting.niche_bonus to products whose categories overlap the
user's learned categories by at least niche_threshold. No-op for cold start.
"""

from typing import List, Optional

from giftrank.models.config import RankingConfig
from giftrank.models.preferences import UserPreferences
from giftrank.models.product import RankedProduct
from giftrank.utils.scores import category_overlap


def apply_niche_boost(
    products: List[RankedProduct],
    preferences: Optional[UserPreferences],
    config: RankingConfig,
) -> List[RankedProduct]:
    """Return products with the niche bonus applied; order is left unchanged."""
    niche = config.niche_targeting
    if not niche.enabled or preferences is None:
        return products
    user_categories = preferences.categories.keys()
    boosted = []
    for product in products:
        ratio = category_overlap(product.categories, user_categories)
        bonus = niche.niche_bonus if ratio >= niche.niche_threshold else 0.0
        boosted.append(
            product.model_copy(update={"final_score": product.final_score + bonus})
        )
    return boosted
