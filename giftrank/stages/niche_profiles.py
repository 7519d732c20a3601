"""
Niche profiles: per-category aggregates over the approved catalog.

Computed on demand; behavior and growth figures are catalog-wide defaults
until per-niche analytics are tracked.
"""

import asyncio
import logging
from collections import Counter, defaultdict
from typing import Dict, List

from giftrank.errors import InvalidArgument
from giftrank.models.config import RankingConfig
from giftrank.models.niche import (
    NichePopularity,
    NichePriceRange,
    NicheProfile,
)
from giftrank.models.product import STATUS_APPROVED, CatalogProduct
from giftrank.sources import CatalogSource

logger = logging.getLogger(__name__)

SUBCATEGORY_LIMIT = 5


def _check_limit(limit: int) -> None:
    if limit < 0:
        raise InvalidArgument(f"limit must be >= 0, got {limit}")


def build_niche_profiles(products: List[CatalogProduct], limit: int = 20) -> List[NicheProfile]:
    """
    Group products by category (a product counts toward each of its categories).

    Subcategories are the categories most often listed alongside this one.
    Sorted by product count (desc), then category name.
    """
    _check_limit(limit)
    by_category: Dict[str, List[CatalogProduct]] = defaultdict(list)
    for product in products:
        for category in set(product.categories):
            by_category[category].append(product)

    profiles = []
    for category, members in by_category.items():
        prices = [p.price for p in members if p.price]
        ratings = [p.rating for p in members if p.rating is not None]
        co_occurring: Counter = Counter()
        for p in members:
            co_occurring.update(c for c in set(p.categories) if c != category)
        subcategories = [
            c for c, _ in sorted(co_occurring.items(), key=lambda kv: (-kv[1], kv[0]))
        ][:SUBCATEGORY_LIMIT]

        profiles.append(
            NicheProfile(
                category=category,
                subcategories=subcategories,
                price_range=(
                    NichePriceRange(min=min(prices), max=max(prices))
                    if prices
                    else NichePriceRange()
                ),
                popularity=NichePopularity(total_users=len(members)),
                avg_price=sum(prices) / len(prices) if prices else 0.0,
                avg_rating=sum(ratings) / len(ratings) if ratings else 0.0,
            )
        )

    profiles.sort(key=lambda n: (-n.popularity.total_users, n.category))
    return profiles[:limit]


async def get_niche_profiles(
    catalog: CatalogSource,
    config: RankingConfig,
    limit: int = 20,
) -> List[NicheProfile]:
    """
    Load approved products and aggregate them. Catalog errors are logged and
    give []; a negative limit raises InvalidArgument.
    """
    _check_limit(limit)
    try:
        products = await asyncio.wait_for(
            catalog.list_products(status=STATUS_APPROVED),
            timeout=config.data_timeout_seconds,
        )
    except Exception as e:
        logger.error("[niches] FAILED error=%s", e)
        return []
    return build_niche_profiles(products, limit=limit)
