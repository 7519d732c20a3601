"""
Qdrant Catalog Store

Product catalog held in a Qdrant collection: one point per product, payload is
the product without its embedding, vector is stored under the named vector
"embedding" so products without an embedding can still be stored.

Point ids are UUID5 of the product id (Qdrant accepts only ints and UUIDs);
the product id itself lives in the payload.

Usage:
    store = QdrantCatalogStore(qdrant_url="http://localhost:6333", collection="products")
    hits = await store.search_similar(session_vector, limit=60)
"""

import logging
import os
import uuid
from typing import Any, Dict, List, Optional, Tuple

from qdrant_client import AsyncQdrantClient
from qdrant_client.http import models

from giftrank.models.product import (
    AVAILABILITY_IN_STOCK,
    STATUS_APPROVED,
    CatalogProduct,
)

logger = logging.getLogger(__name__)

VECTOR_NAME = "embedding"
SCROLL_BATCH = 256
_POINT_NAMESPACE = uuid.UUID("6f1c1f4e-3b8e-4c55-9a57-1e0a4c3b2d10")


def point_id_for(product_id: str) -> str:
    return str(uuid.uuid5(_POINT_NAMESPACE, product_id))


def _recommendable_conditions() -> List[models.FieldCondition]:
    return [
        models.FieldCondition(key="status", match=models.MatchValue(value=STATUS_APPROVED)),
        models.FieldCondition(key="in_stock", match=models.MatchValue(value=True)),
        models.FieldCondition(
            key="availability", match=models.MatchValue(value=AVAILABILITY_IN_STOCK)
        ),
    ]


def _price_condition(
    min_price: Optional[float],
    max_price: Optional[float],
) -> Optional[models.FieldCondition]:
    if min_price is None and max_price is None:
        return None
    return models.FieldCondition(
        key="price", range=models.Range(gte=min_price, lte=max_price)
    )


class QdrantCatalogStore:
    """Catalog backed by a Qdrant collection (cosine distance)."""

    def __init__(
        self,
        qdrant_url: Optional[str] = None,
        collection: str = "products",
        timeout: float = 30.0,
        client: Optional[AsyncQdrantClient] = None,
    ):
        self.qdrant_url = qdrant_url or os.environ.get("QDRANT_URL", "http://localhost:6333")
        self.collection = collection
        self._client = client or AsyncQdrantClient(url=self.qdrant_url, timeout=timeout)

    @property
    def client(self) -> AsyncQdrantClient:
        return self._client

    async def is_available(self) -> bool:
        try:
            await self.client.get_collections()
            return True
        except Exception:
            return False

    async def ensure_collection(self, vector_size: int) -> None:
        """Create the collection with a cosine named vector if it does not exist."""
        if await self.client.collection_exists(self.collection):
            return
        await self.client.create_collection(
            collection_name=self.collection,
            vectors_config={
                VECTOR_NAME: models.VectorParams(size=vector_size, distance=models.Distance.COSINE)
            },
        )
        logger.info("[qdrant] CREATED_COLLECTION name=%s size=%d", self.collection, vector_size)

    @staticmethod
    def _to_product(payload: Optional[Dict[str, Any]]) -> CatalogProduct:
        return CatalogProduct.model_validate(dict(payload or {}))

    async def _scroll(
        self,
        query_filter: Optional[models.Filter],
        limit: Optional[int] = None,
    ) -> List[CatalogProduct]:
        out: List[CatalogProduct] = []
        offset = None
        while True:
            points, offset = await self.client.scroll(
                collection_name=self.collection,
                scroll_filter=query_filter,
                limit=SCROLL_BATCH if limit is None else min(SCROLL_BATCH, limit - len(out)),
                offset=offset,
                with_payload=True,
                with_vectors=False,
            )
            out.extend(self._to_product(p.payload) for p in points)
            if offset is None or (limit is not None and len(out) >= limit):
                break
        return out

    # CatalogSource

    async def search_similar(
        self,
        embedding: List[float],
        limit: int,
    ) -> List[Tuple[CatalogProduct, float]]:
        response = await self.client.query_points(
            collection_name=self.collection,
            query=list(embedding),
            using=VECTOR_NAME,
            query_filter=models.Filter(must=_recommendable_conditions()),
            limit=limit,
            with_payload=True,
        )
        # Qdrant reports cosine similarity; callers expect distance.
        return [
            (self._to_product(hit.payload), 1.0 - hit.score)
            for hit in response.points
        ]

    async def filter_products(
        self,
        *,
        categories: Optional[List[str]] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        limit: int = 60,
    ) -> List[CatalogProduct]:
        must = _recommendable_conditions()
        if categories:
            must.append(
                models.FieldCondition(key="categories", match=models.MatchAny(any=list(categories)))
            )
        price = _price_condition(min_price, max_price)
        if price is not None:
            must.append(price)
        # Scroll order_by takes one key; the tie-broken order needs every match.
        products = await self._scroll(models.Filter(must=must))
        products.sort(key=lambda p: (
            -(p.quality_score or 0.0),
            -(p.popularity_score or 0.0),
            -(p.rating or 0.0),
            p.id,
        ))
        return products[:limit]

    async def list_products(self, status: Optional[str] = None) -> List[CatalogProduct]:
        query_filter = None
        if status is not None:
            query_filter = models.Filter(must=[
                models.FieldCondition(key="status", match=models.MatchValue(value=status))
            ])
        return await self._scroll(query_filter)

    async def count(self) -> int:
        result = await self.client.count(collection_name=self.collection, exact=True)
        return result.count

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
        must = [
            models.FieldCondition(key=key, match=models.MatchValue(value=value))
            for key, value in (
                ("asin", asin),
                ("source_item_id", source_item_id),
                ("url_canonical", url_canonical),
                ("title", title),
            )
            if value is not None
        ]
        price = _price_condition(min_price, max_price)
        if price is not None:
            must.append(price)
        if not must:
            return None
        found = await self._scroll(models.Filter(must=must), limit=1)
        return found[0] if found else None

    async def _upsert(self, product: CatalogProduct) -> CatalogProduct:
        vector: Dict[str, List[float]] = {}
        if product.embedding:
            await self.ensure_collection(len(product.embedding))
            vector[VECTOR_NAME] = list(product.embedding)
        await self.client.upsert(
            collection_name=self.collection,
            points=[
                models.PointStruct(
                    id=point_id_for(product.id),
                    vector=vector,
                    payload=product.model_dump(exclude={"embedding"}),
                )
            ],
        )
        return product

    async def create_product(self, product: CatalogProduct) -> CatalogProduct:
        if not product.id:
            product = product.model_copy(update={"id": uuid.uuid4().hex})
        return await self._upsert(product)

    async def update_product(self, product_id: str, product: CatalogProduct) -> CatalogProduct:
        return await self._upsert(product.model_copy(update={"id": product_id}))

    async def get_products(self, product_ids: List[str]) -> Dict[str, CatalogProduct]:
        """Products by id; unknown ids are left out."""
        if not product_ids:
            return {}
        points = await self.client.retrieve(
            collection_name=self.collection,
            ids=[point_id_for(pid) for pid in product_ids],
            with_payload=True,
        )
        products = [self._to_product(p.payload) for p in points]
        return {p.id: p for p in products}
