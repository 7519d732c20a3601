"""
Stage 5: Diversity / Novelty Re-ranker

Single greedy pass over the score-sorted list:
- drops products in the session's seen set (and repeated ids);
- boosts a product that introduces a category or retailer not seen earlier in the pass;
- boosts recently listed products (recency_score above the novelty threshold);
- stops at max_diversified products.

Earlier (higher-scored) products get first claim on "new category" credit.
The result is re-sorted by boosted score and ranked 1..n.
"""

from typing import Iterable, List, Set

from giftrank.models.config import RankingConfig
from giftrank.models.product import RankedProduct

from .scoring import sort_ranked

UNKNOWN_RETAILER = "unknown"


def apply_diversity_and_novelty(
    products: List[RankedProduct],
    seen_ids: Iterable[str],
    config: RankingConfig,
) -> List[RankedProduct]:
    """
    Stage 5: Boost diverse and novel products, drop seen ones, cap, and re-sort.

    Args:
        products: Ranked products, sorted by final_score (desc). Not mutated.
        seen_ids: Product ids the session has already shown.
        config: Supplies diversity_boost, novelty_boost, and max_diversified.

    Returns:
        Up to max_diversified products with unique ids, sorted by final_score
        (desc, id asc) and rank set to the 1-based position.
    """
    niche = config.niche_targeting
    excluded: Set[str] = set(seen_ids)
    seen_categories: Set[str] = set()
    seen_retailers: Set[str] = set()
    diversified: List[RankedProduct] = []

    for product in products:
        if product.id in excluded:
            continue

        score = product.final_score
        introduces_category = any(cat not in seen_categories for cat in product.categories)
        introduces_retailer = (product.retailer or UNKNOWN_RETAILER) not in seen_retailers
        if introduces_category or introduces_retailer:
            score += niche.diversity_boost
        if product.recency_score and product.recency_score > niche.novelty_recency_threshold:
            score += niche.novelty_boost

        diversified.append(product.model_copy(update={"final_score": score}))
        excluded.add(product.id)

        seen_categories.update(product.categories)
        if product.retailer:
            seen_retailers.add(product.retailer)

        if len(diversified) >= config.max_diversified:
            break

    ranked = sort_ranked(diversified)
    return [p.model_copy(update={"rank": i}) for i, p in enumerate(ranked, start=1)]
