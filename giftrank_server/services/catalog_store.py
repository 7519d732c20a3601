"""
JSON catalog store.

Products held in memory, loaded from (and optionally persisted to) a JSON file
containing either a list of products or {"products": [...]}. Vector search is a
brute-force cosine scan over products that carry an embedding.

Implements both CatalogSource (ranking reads) and CatalogSink (ingestion writes).
"""

import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from giftrank.models.product import CatalogProduct, ensure_products
from giftrank.utils.similarity import cosine_distance

logger = logging.getLogger(__name__)


def _ranking_key(product: CatalogProduct) -> Tuple[float, float, float]:
    return (
        -(product.quality_score or 0.0),
        -(product.popularity_score or 0.0),
        -(product.rating or 0.0),
    )


class JsonCatalogStore:
    """In-memory catalog with optional JSON file persistence."""

    def __init__(
        self,
        path: Optional[Union[Path, str]] = None,
        products: Optional[List[Union[CatalogProduct, Dict[str, Any]]]] = None,
    ):
        self.path = Path(path) if path else None
        self._products: Dict[str, CatalogProduct] = {}
        if products is not None:
            for product in ensure_products(products):
                self._products[product.id] = product
        elif self.path and self.path.is_file():
            self._load()

    def _load(self) -> None:
        with open(self.path) as f:
            data = json.load(f)
        items = data.get("products", []) if isinstance(data, dict) else data
        for product in ensure_products(items):
            self._products[product.id] = product
        logger.info("[catalog] LOADED path=%s products=%d", self.path, len(self._products))

    def _persist(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump(
                {"products": [p.model_dump() for p in self._products.values()]},
                f,
                indent=2,
            )

    def __len__(self) -> int:
        return len(self._products)

    def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        return self._products.get(product_id)

    # CatalogSource

    async def search_similar(
        self,
        embedding: List[float],
        limit: int,
    ) -> List[Tuple[CatalogProduct, float]]:
        hits = [
            (product, cosine_distance(embedding, product.embedding))
            for product in self._products.values()
            if product.embedding and product.is_recommendable()
        ]
        hits.sort(key=lambda h: (h[1], h[0].id))
        return hits[:limit]

    async def filter_products(
        self,
        *,
        categories: Optional[List[str]] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        limit: int = 60,
    ) -> List[CatalogProduct]:
        wanted = set(categories or [])
        matches = []
        for product in self._products.values():
            if not product.is_recommendable():
                continue
            if min_price is not None and product.price < min_price:
                continue
            if max_price is not None and product.price > max_price:
                continue
            if wanted and not wanted.intersection(product.categories):
                continue
            matches.append(product)
        matches.sort(key=lambda p: (_ranking_key(p), p.id))
        return matches[:limit]

    async def list_products(self, status: Optional[str] = None) -> List[CatalogProduct]:
        return [
            p for p in self._products.values()
            if status is None or p.status == status
        ]

    # CatalogSink

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
        for product in self._products.values():
            if asin is not None and product.asin != asin:
                continue
            if source_item_id is not None and product.source_item_id != source_item_id:
                continue
            if url_canonical is not None and product.url_canonical != url_canonical:
                continue
            if title is not None and product.title != title:
                continue
            if min_price is not None and product.price < min_price:
                continue
            if max_price is not None and product.price > max_price:
                continue
            return product
        return None

    async def create_product(self, product: CatalogProduct) -> CatalogProduct:
        if not product.id:
            product = product.model_copy(update={"id": uuid.uuid4().hex})
        self._products[product.id] = product
        self._persist()
        return product

    async def update_product(self, product_id: str, product: CatalogProduct) -> CatalogProduct:
        if product_id not in self._products:
            raise KeyError(f"Product not found: {product_id}")
        product = product.model_copy(update={"id": product_id})
        self._products[product_id] = product
        self._persist()
        return product

    async def get_products(self, product_ids: List[str]) -> Dict[str, CatalogProduct]:
        """Products by id; unknown ids are left out."""
        return {pid: self._products[pid] for pid in product_ids if pid in self._products}
