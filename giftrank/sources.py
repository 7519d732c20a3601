"""
Data-source protocols the pipeline reads from.

CatalogSource supplies products (vector search and attribute filtering);
InteractionSource supplies a user's interaction history. Implementations live in
giftrank_server.services (JSON file, Qdrant, Firestore); tests use in-memory fakes.
"""

from typing import List, Optional, Protocol, Tuple

from giftrank.models.interaction import UserHistory
from giftrank.models.product import CatalogProduct


class CatalogSource(Protocol):
    """Protocol for read access to the product catalog."""

    async def search_similar(
        self,
        embedding: List[float],
        limit: int,
    ) -> List[Tuple[CatalogProduct, float]]:
        """
        Nearest-neighbour search over recommendable products.

        Returns (product, distance) pairs ordered by ascending distance, where
        distance is cosine distance (0 = identical direction).
        """
        ...

    async def filter_products(
        self,
        *,
        categories: Optional[List[str]] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        limit: int = 60,
    ) -> List[CatalogProduct]:
        """
        Recommendable products matching any of categories and the price bounds,
        ordered by quality, popularity, then rating (all descending).
        """
        ...

    async def list_products(self, status: Optional[str] = None) -> List[CatalogProduct]:
        """All products, optionally restricted to one status."""
        ...


class CatalogSink(Protocol):
    """Protocol for catalog writes used by ingestion."""

    async def list_products(self, status: Optional[str] = None) -> List[CatalogProduct]:
        ...

    async def find_product(
        self,
        *,
        asin: Optional[str] = None,
        source_item_id: Optional[str] = None,
        url_canonical: Optional[str] = None,
        title: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
    ) -> Optional[CatalogProduct]:
        """Return the first product matching every given field, or None."""
        ...

    async def create_product(self, product: CatalogProduct) -> CatalogProduct:
        ...

    async def update_product(self, product_id: str, product: CatalogProduct) -> CatalogProduct:
        ...


class InteractionSource(Protocol):
    """Protocol for interaction-history reads."""

    async def get_user_history(self, user_id: str) -> Optional[UserHistory]:
        """Return the user's history with joined product attributes, or None if unknown."""
        ...
