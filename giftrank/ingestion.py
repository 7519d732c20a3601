"""
Catalog ingestion: quality gating, duplicate detection, and upsert.

Incoming products from affiliate feeds carry a 0-1 quality estimate. Products
with an embedding get a bonus (they are reachable by vector retrieval); the
final score decides APPROVED / PENDING / REJECTED. Duplicates are matched
against the catalog in order: ASIN, source item id, canonical URL, then exact
title with price within 10%. A match is updated in place, otherwise created.

Usage:
    engine = IngestionEngine(catalog_store, embed=embedder)
    result = await engine.ingest_products(products)
    print(f"created={result.created} updated={result.updated} errors={result.errors}")
"""

import logging
import time
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from giftrank.models.product import (
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    CatalogProduct,
)
from giftrank.sources import CatalogSink
from giftrank.utils.scores import listing_recency_score

logger = logging.getLogger(__name__)

EMBEDDING_QUALITY_BONUS = 0.15
APPROVED_THRESHOLD = 0.80
PENDING_THRESHOLD = 0.60
TITLE_PRICE_TOLERANCE = 0.10
EMBED_TEXT_LIMIT = 1500

Embedder = Callable[[str], Awaitable[List[float]]]


class IncomingProduct(CatalogProduct):
    """
    Product as delivered by a feed: quality on a 0-1 scale, listing dates as
    ISO strings. id is empty until the catalog assigns one.
    """

    id: str = ""
    listing_start_at: Optional[str] = None


class IngestionResult(BaseModel):
    success: bool = True
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: int = 0
    product_ids: List[str] = Field(default_factory=list)
    error_messages: List[str] = Field(default_factory=list)
    duration_ms: int = 0


class DataCompleteness(BaseModel):
    """Percent of catalog products carrying each optional attribute."""

    with_images: float = 0.0
    with_shipping: float = 0.0
    with_delivery: float = 0.0
    in_stock: float = 0.0


class IngestionStats(BaseModel):
    total: int = 0
    approved: int = 0
    pending: int = 0
    rejected: int = 0
    avg_quality: float = 0.0
    data_completeness: DataCompleteness = Field(default_factory=DataCompleteness)


def _percent(count: int, total: int) -> float:
    return count / total * 100 if total > 0 else 0.0


def final_quality_score(quality: Optional[float], has_embedding: bool) -> float:
    """Feed quality (0-1) plus the embedding bonus, capped at 1.0."""
    score = quality or 0.0
    if has_embedding:
        score += EMBEDDING_QUALITY_BONUS
    return min(score, 1.0)


def status_for_quality(score: float) -> str:
    if score >= APPROVED_THRESHOLD:
        return STATUS_APPROVED
    if score >= PENDING_THRESHOLD:
        return STATUS_PENDING
    return STATUS_REJECTED


def embed_text(product: CatalogProduct) -> str:
    """Text sent to the embedder: title, description, and categories."""
    text = f"{product.title} {product.description or ''} {' '.join(product.categories)}"
    return text[:EMBED_TEXT_LIMIT]


async def find_duplicate(
    product: CatalogProduct,
    catalog: CatalogSink,
) -> Optional[CatalogProduct]:
    """First catalog product matching by ASIN, source item id, canonical URL, or title+price."""
    if product.asin:
        existing = await catalog.find_product(asin=product.asin)
        if existing:
            return existing
    if product.source_item_id:
        existing = await catalog.find_product(source_item_id=product.source_item_id)
        if existing:
            return existing
    if product.url_canonical:
        existing = await catalog.find_product(url_canonical=product.url_canonical)
        if existing:
            return existing
    return await catalog.find_product(
        title=product.title,
        min_price=product.price * (1 - TITLE_PRICE_TOLERANCE),
        max_price=product.price * (1 + TITLE_PRICE_TOLERANCE),
    )


class IngestionEngine:
    """Upserts feed products into a catalog with quality gating and deduplication."""

    def __init__(self, catalog: CatalogSink, embed: Optional[Embedder] = None):
        self.catalog = catalog
        self.embed = embed

    async def _embedding_for(self, product: IncomingProduct) -> List[float]:
        if product.embedding:
            return list(product.embedding)
        if self.embed is None:
            return []
        try:
            return list(await self.embed(embed_text(product)))
        except Exception as e:
            logger.warning("[ingest] EMBEDDING_FAILED title=%r error=%s", product.title[:60], e)
            return []

    def _prepare(self, product: IncomingProduct, embedding: List[float]) -> CatalogProduct:
        quality = final_quality_score(product.quality_score, bool(embedding))
        recency = product.recency_score
        if recency is None:
            recency = listing_recency_score(product.listing_start_at)
        data = product.model_dump(exclude={"listing_start_at"})
        data.update(
            embedding=embedding or None,
            status=status_for_quality(quality),
            # Catalog stores quality on the 0-100 scale the ranker reads.
            quality_score=round(quality * 100, 2),
            recency_score=recency,
            popularity_score=product.popularity_score or 0.0,
        )
        return CatalogProduct.model_validate(data)

    async def ingest_products(
        self,
        products: List[Union[IncomingProduct, Dict[str, Any]]],
    ) -> IngestionResult:
        """
        Ingest products one by one. A failure on one product is recorded and
        does not stop the batch. success is False when half or more failed.
        """
        start = time.monotonic()
        result = IngestionResult()
        for raw in products:
            title = raw.get("title", "") if isinstance(raw, dict) else raw.title
            try:
                product = (
                    IncomingProduct.model_validate(raw) if isinstance(raw, dict) else raw
                )
                embedding = await self._embedding_for(product)
                prepared = self._prepare(product, embedding)
                existing = await find_duplicate(prepared, self.catalog)
                if existing:
                    saved = await self.catalog.update_product(
                        existing.id, prepared.model_copy(update={"id": existing.id})
                    )
                    result.updated += 1
                    logger.info(
                        "[ingest] UPDATED id=%s title=%r quality=%.2f",
                        saved.id, product.title[:60], saved.quality_score or 0.0,
                    )
                else:
                    # Feed ids are not catalog ids; the catalog assigns one.
                    saved = await self.catalog.create_product(
                        prepared.model_copy(update={"id": ""})
                    )
                    result.created += 1
                    logger.info(
                        "[ingest] CREATED id=%s title=%r quality=%.2f",
                        saved.id, product.title[:60], saved.quality_score or 0.0,
                    )
                result.product_ids.append(saved.id)
            except Exception as e:
                result.errors += 1
                result.error_messages.append(f"{title}: {e}")
                logger.error("[ingest] FAILED title=%r error=%s", title, e)

        result.duration_ms = int((time.monotonic() - start) * 1000)
        result.success = result.errors < len(products) / 2 if products else True
        return result

    async def get_stats(self) -> IngestionStats:
        """Status counts, average quality, and data completeness over the whole catalog."""
        products = await self.catalog.list_products()
        total = len(products)
        qualities = [p.quality_score for p in products if p.quality_score is not None]
        return IngestionStats(
            total=total,
            approved=sum(1 for p in products if p.status == STATUS_APPROVED),
            pending=sum(1 for p in products if p.status == STATUS_PENDING),
            rejected=sum(1 for p in products if p.status == STATUS_REJECTED),
            avg_quality=sum(qualities) / len(qualities) if qualities else 0.0,
            data_completeness=DataCompleteness(
                with_images=_percent(sum(1 for p in products if p.images), total),
                with_shipping=_percent(
                    sum(1 for p in products if p.free_shipping or p.shipping_cost is not None),
                    total,
                ),
                with_delivery=_percent(
                    sum(1 for p in products if p.delivery_days is not None), total
                ),
                in_stock=_percent(sum(1 for p in products if p.in_stock), total),
            ),
        )
