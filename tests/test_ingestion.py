"""Tests for catalog ingestion: quality gating, duplicate detection, upsert."""

from datetime import datetime, timedelta, timezone

import pytest

from giftrank.ingestion import (
    IngestionEngine,
    IncomingProduct,
    final_quality_score,
    find_duplicate,
    status_for_quality,
)
from giftrank.models.product import STATUS_APPROVED, STATUS_PENDING, STATUS_REJECTED
from giftrank.utils.scores import listing_recency_score
from giftrank_server.services.catalog_store import JsonCatalogStore

from conftest import make_product


class BrokenSink(JsonCatalogStore):
    async def create_product(self, product):
        raise IOError("disk full")


def _incoming(title: str = "Ceramic Mug", **overrides) -> dict:
    data = {"title": title, "price": 20.0, "categories": ["Kitchen"], "quality_score": 0.7}
    data.update(overrides)
    return data


class TestQualityGate:

    @pytest.mark.parametrize("quality,has_embedding,expected", [
        (0.7, True, 0.85),
        (0.7, False, 0.7),
        (0.95, True, 1.0),
        (None, False, 0.0),
    ])
    def test_final_quality_score(self, quality, has_embedding, expected):
        assert final_quality_score(quality, has_embedding) == pytest.approx(expected)

    @pytest.mark.parametrize("score,status", [
        (0.80, STATUS_APPROVED),
        (0.79, STATUS_PENDING),
        (0.60, STATUS_PENDING),
        (0.59, STATUS_REJECTED),
    ])
    def test_status_thresholds(self, score, status):
        assert status_for_quality(score) == status


class TestListingRecency:

    def test_linear_over_thirty_days(self):
        now = datetime(2026, 3, 31, tzinfo=timezone.utc)
        start = (now - timedelta(days=15)).isoformat()
        assert listing_recency_score(start, now=now) == pytest.approx(0.5)

    def test_future_listing_is_fresh(self):
        now = datetime(2026, 3, 31, tzinfo=timezone.utc)
        assert listing_recency_score("2026-04-02T00:00:00Z", now=now) == 1.0

    def test_old_or_missing_listing(self):
        now = datetime(2026, 3, 31, tzinfo=timezone.utc)
        assert listing_recency_score("2025-01-01T00:00:00Z", now=now) == 0.0
        assert listing_recency_score(None, now=now) == 0.0
        assert listing_recency_score("not a date", now=now) == 0.0


class TestFindDuplicate:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.catalog = JsonCatalogStore(products=[
            make_product("by-asin", asin="B001", title="Other"),
            make_product("by-url", url_canonical="https://shop/mug", title="Other 2"),
            make_product("by-title", title="Ceramic Mug", price=20.0),
        ])

    @pytest.mark.asyncio
    async def test_asin_checked_first(self):
        product = IncomingProduct(
            title="Ceramic Mug", price=20.0, asin="B001", url_canonical="https://shop/mug"
        )
        found = await find_duplicate(product, self.catalog)
        assert found.id == "by-asin"

    @pytest.mark.asyncio
    async def test_url_before_title(self):
        product = IncomingProduct(title="Ceramic Mug", price=20.0, url_canonical="https://shop/mug")
        found = await find_duplicate(product, self.catalog)
        assert found.id == "by-url"

    @pytest.mark.asyncio
    async def test_title_with_price_within_ten_percent(self):
        near = IncomingProduct(title="Ceramic Mug", price=21.0)
        far = IncomingProduct(title="Ceramic Mug", price=25.0)
        assert (await find_duplicate(near, self.catalog)).id == "by-title"
        assert await find_duplicate(far, self.catalog) is None

    @pytest.mark.asyncio
    async def test_unmatched_asin_falls_through_to_title(self):
        product = IncomingProduct(title="Ceramic Mug", price=20.0, asin="B999")
        assert (await find_duplicate(product, self.catalog)).id == "by-title"


class TestIngestionEngine:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.catalog = JsonCatalogStore(products=[])
        self.engine = IngestionEngine(self.catalog)

    @pytest.mark.asyncio
    async def test_creates_with_percent_quality_and_status(self):
        result = await self.engine.ingest_products([_incoming(embedding=[0.1, 0.2])])

        assert result.success is True
        assert result.created == 1
        product = self.catalog.get_product(result.product_ids[0])
        assert product.quality_score == pytest.approx(85.0)
        assert product.status == STATUS_APPROVED
        assert product.popularity_score == 0.0

    @pytest.mark.asyncio
    async def test_without_embedding_is_pending(self):
        result = await self.engine.ingest_products([_incoming()])
        product = self.catalog.get_product(result.product_ids[0])
        assert product.status == STATUS_PENDING
        assert product.embedding is None

    @pytest.mark.asyncio
    async def test_duplicate_updates_in_place(self):
        first = await self.engine.ingest_products([_incoming(asin="B001", price=20.0)])
        second = await self.engine.ingest_products([_incoming(asin="B001", price=22.0)])

        assert second.created == 0
        assert second.updated == 1
        assert second.product_ids == first.product_ids
        assert len(self.catalog) == 1
        assert self.catalog.get_product(first.product_ids[0]).price == 22.0

    @pytest.mark.asyncio
    async def test_embedder_used_when_missing(self):
        calls = []

        async def embed(text):
            calls.append(text)
            return [0.3, 0.4]

        engine = IngestionEngine(self.catalog, embed=embed)
        result = await engine.ingest_products([_incoming(description="Glazed")])

        assert calls and calls[0].startswith("Ceramic Mug Glazed")
        product = self.catalog.get_product(result.product_ids[0])
        assert product.embedding == [0.3, 0.4]
        assert product.status == STATUS_APPROVED

    @pytest.mark.asyncio
    async def test_embedder_failure_keeps_product(self):
        async def embed(text):
            raise RuntimeError("embedding service down")

        engine = IngestionEngine(self.catalog, embed=embed)
        result = await engine.ingest_products([_incoming()])

        assert result.created == 1
        assert result.errors == 0
        assert self.catalog.get_product(result.product_ids[0]).status == STATUS_PENDING

    @pytest.mark.asyncio
    async def test_recency_from_listing_date(self):
        now = datetime.now(timezone.utc).isoformat()
        result = await self.engine.ingest_products([_incoming(listing_start_at=now)])
        product = self.catalog.get_product(result.product_ids[0])
        assert product.recency_score == pytest.approx(1.0, abs=0.01)

    @pytest.mark.asyncio
    async def test_per_product_errors_counted(self):
        engine = IngestionEngine(BrokenSink(products=[]))
        result = await engine.ingest_products([_incoming("A"), _incoming("B")])

        assert result.errors == 2
        assert result.created == 0
        assert result.success is False
        assert len(result.error_messages) == 2

    @pytest.mark.asyncio
    async def test_invalid_payload_recorded(self):
        result = await self.engine.ingest_products([
            _incoming("Mug"), _incoming("Bowl"), {"price": "not a number"},
        ])
        assert result.created == 2
        assert result.errors == 1
        assert result.success is True

    @pytest.mark.asyncio
    async def test_half_failed_is_unsuccessful(self):
        result = await self.engine.ingest_products([_incoming(), {"price": "not a number"}])
        assert result.errors == 1
        assert result.success is False

    @pytest.mark.asyncio
    async def test_feed_id_does_not_replace_catalog_product(self):
        catalog = JsonCatalogStore(products=[make_product("p01", title="Original Mug")])
        engine = IngestionEngine(catalog)

        result = await engine.ingest_products([
            _incoming("Brand New Lamp", id="p01", categories=["Lighting"], price=80.0),
        ])

        assert result.created == 1
        assert result.product_ids[0] != "p01"
        assert len(catalog) == 2
        assert catalog.get_product("p01").title == "Original Mug"
        assert catalog.get_product(result.product_ids[0]).title == "Brand New Lamp"

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        result = await self.engine.ingest_products([])
        assert result.success is True
        assert result.created == 0


class TestIngestionStats:

    @pytest.mark.asyncio
    async def test_counts_and_completeness(self):
        catalog = JsonCatalogStore(products=[
            make_product("a", quality_score=90.0, images=["a.jpg"], free_shipping=True,
                         delivery_days=3),
            make_product("b", quality_score=70.0, status=STATUS_PENDING, shipping_cost=4.99,
                         in_stock=False),
            make_product("c", quality_score=None, status=STATUS_REJECTED),
            make_product("d", quality_score=50.0, images=["d.jpg"], in_stock=False),
        ])

        stats = await IngestionEngine(catalog).get_stats()

        assert (stats.total, stats.approved, stats.pending, stats.rejected) == (4, 2, 1, 1)
        assert stats.avg_quality == pytest.approx(70.0)
        assert stats.data_completeness.with_images == pytest.approx(50.0)
        assert stats.data_completeness.with_shipping == pytest.approx(50.0)
        assert stats.data_completeness.with_delivery == pytest.approx(25.0)
        assert stats.data_completeness.in_stock == pytest.approx(50.0)

    @pytest.mark.asyncio
    async def test_empty_catalog(self):
        stats = await IngestionEngine(JsonCatalogStore(products=[])).get_stats()
        assert stats.total == 0
        assert stats.avg_quality == 0.0
        assert stats.data_completeness.in_stock == 0.0
