"""
Shared fixtures: in-memory catalog and interaction sources plus product factories.
"""

import asyncio
from typing import Dict, List, Optional, Tuple

import pytest

from giftrank.models.config import RankingConfig
from giftrank.models.interaction import Interaction, InteractionAction, UserHistory
from giftrank.models.preferences import Demographics, PriceRange, UserPreferences
from giftrank.models.product import CandidateProduct, CatalogProduct, RankedProduct


def make_product(product_id: str, **overrides) -> CatalogProduct:
    data = {
        "id": product_id,
        "title": f"Product {product_id}",
        "price": 25.0,
        "categories": ["Home"],
        "retailer": "shop-a",
        "quality_score": 80.0,
        "popularity_score": 60.0,
        "recency_score": 0.5,
        "rating": 4.0,
    }
    data.update(overrides)
    return CatalogProduct.model_validate(data)


def make_candidate(product_id: str, similarity: float = 0.5, **overrides) -> CandidateProduct:
    return CandidateProduct.from_catalog(make_product(product_id, **overrides), similarity)


def make_ranked(product_id: str, final_score: float, **overrides) -> RankedProduct:
    candidate = make_candidate(product_id, **overrides)
    return RankedProduct(**candidate.model_dump(), final_score=final_score)


def make_history(
    user_id: str,
    actions: List[Tuple[InteractionAction, CatalogProduct]],
    demographics: Optional[Demographics] = None,
) -> UserHistory:
    return UserHistory(
        user_id=user_id,
        demographics=demographics or Demographics(),
        interactions=[
            Interaction(product_id=p.id, action=action, timestamp="2026-01-01T00:00:00Z", product=p)
            for action, p in actions
        ],
    )


def make_preferences(
    categories: Optional[Dict[str, int]] = None,
    price_range: Optional[PriceRange] = None,
    **overrides,
) -> UserPreferences:
    return UserPreferences(
        user_id=overrides.pop("user_id", "user-1"),
        categories=categories or {},
        price_range=price_range or PriceRange(),
        **overrides,
    )


class FakeCatalog:
    """In-memory CatalogSource; records the calls it receives."""

    def __init__(self, products: Optional[List[CatalogProduct]] = None, distances=None):
        self.products = list(products or [])
        self.distances: Dict[str, float] = dict(distances or {})
        self.calls: List[Tuple[str, dict]] = []

    async def search_similar(self, embedding, limit):
        self.calls.append(("search_similar", {"embedding": embedding, "limit": limit}))
        hits = [(p, self.distances.get(p.id, 0.5)) for p in self.products]
        hits.sort(key=lambda h: (h[1], h[0].id))
        return hits[:limit]

    async def filter_products(self, *, categories=None, min_price=None, max_price=None, limit=60):
        self.calls.append((
            "filter_products",
            {"categories": categories, "min_price": min_price, "max_price": max_price, "limit": limit},
        ))
        out = []
        for p in self.products:
            if min_price is not None and p.price < min_price:
                continue
            if max_price is not None and p.price > max_price:
                continue
            if categories and not set(categories) & set(p.categories):
                continue
            out.append(p)
        return out[:limit]

    async def list_products(self, status=None):
        self.calls.append(("list_products", {"status": status}))
        return [p for p in self.products if status is None or p.status == status]


class FailingCatalog(FakeCatalog):
    async def search_similar(self, embedding, limit):
        raise ConnectionError("catalog unavailable")

    async def filter_products(self, **kwargs):
        raise ConnectionError("catalog unavailable")

    async def list_products(self, status=None):
        raise ConnectionError("catalog unavailable")


class SlowCatalog(FakeCatalog):
    async def search_similar(self, embedding, limit):
        await asyncio.sleep(1.0)
        return []

    async def filter_products(self, **kwargs):
        await asyncio.sleep(1.0)
        return []


class FakeInteractions:
    """In-memory InteractionSource keyed by user id."""

    def __init__(self, histories: Optional[Dict[str, UserHistory]] = None):
        self.histories = dict(histories or {})
        self.calls: List[str] = []

    async def get_user_history(self, user_id):
        self.calls.append(user_id)
        return self.histories.get(user_id)


class FailingInteractions(FakeInteractions):
    async def get_user_history(self, user_id):
        self.calls.append(user_id)
        raise ConnectionError("history store unavailable")


class SlowInteractions(FakeInteractions):
    async def get_user_history(self, user_id):
        self.calls.append(user_id)
        await asyncio.sleep(1.0)
        return None


@pytest.fixture
def config() -> RankingConfig:
    return RankingConfig()


@pytest.fixture
def fast_timeout_config() -> RankingConfig:
    return RankingConfig(data_timeout_seconds=0.05)
