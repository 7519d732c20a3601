"""Tests for Stage 2: candidate retrieval."""

import pytest

from giftrank.models.product import STATUS_PENDING
from giftrank.models.session import SessionConstraints, SessionProfile
from giftrank.stages.candidate_retriever import retrieve_candidates

from conftest import FailingCatalog, FakeCatalog, SlowCatalog, make_product


class TestVectorPath:

    @pytest.fixture(autouse=True)
    def setup(self, config):
        self.config = config
        self.catalog = FakeCatalog(
            [make_product("a"), make_product("b"), make_product("c")],
            distances={"a": 0.1, "b": 0.3, "c": 0.6},
        )
        self.session = SessionProfile(session_id="s1", embedding=[0.1, 0.2, 0.3])

    @pytest.mark.asyncio
    async def test_similarity_is_one_minus_distance(self):
        candidates = await retrieve_candidates(self.session, self.catalog, 10, self.config)

        assert [c.id for c in candidates] == ["a", "b", "c"]
        assert [c.similarity for c in candidates] == pytest.approx([0.9, 0.7, 0.4])
        assert self.catalog.calls[0][0] == "search_similar"

    @pytest.mark.asyncio
    async def test_respects_limit(self):
        candidates = await retrieve_candidates(self.session, self.catalog, 2, self.config)
        assert len(candidates) == 2
        assert self.catalog.calls[0][1]["limit"] == 2

    @pytest.mark.asyncio
    async def test_non_recommendable_products_dropped(self):
        self.catalog.products.append(make_product("d", status=STATUS_PENDING))
        self.catalog.products.append(make_product("e", in_stock=False))
        candidates = await retrieve_candidates(self.session, self.catalog, 10, self.config)
        assert {c.id for c in candidates} == {"a", "b", "c"}

    @pytest.mark.asyncio
    async def test_candidates_drop_embedding_and_flag_vendor(self):
        self.catalog.products = [make_product("v", vendor_email="seller@example.com", embedding=[1.0])]
        candidates = await retrieve_candidates(self.session, self.catalog, 10, self.config)

        assert candidates[0].embedding is None
        assert candidates[0].is_vendor is True
        assert candidates[0].sponsored is False


class TestAttributePath:

    @pytest.fixture(autouse=True)
    def setup(self, config):
        self.config = config
        self.catalog = FakeCatalog([
            make_product("cheap", price=5.0, categories=["Books"]),
            make_product("mid", price=30.0, categories=["Books"]),
            make_product("toy", price=30.0, categories=["Toys"]),
            make_product("pricey", price=300.0, categories=["Books"]),
        ])

    @pytest.mark.asyncio
    async def test_filters_by_interests_and_price(self):
        session = SessionProfile(
            session_id="s1",
            constraints=SessionConstraints(interests=["Books"], min_price=10, max_price=100),
        )
        candidates = await retrieve_candidates(session, self.catalog, 10, self.config)

        assert [c.id for c in candidates] == ["mid"]
        assert candidates[0].similarity == 0.5
        name, kwargs = self.catalog.calls[0]
        assert name == "filter_products"
        assert kwargs["categories"] == ["Books"]
        assert kwargs["min_price"] == 10
        assert kwargs["max_price"] == 100

    @pytest.mark.asyncio
    async def test_no_interests_means_no_category_filter(self):
        session = SessionProfile(session_id="s1")
        candidates = await retrieve_candidates(session, self.catalog, 10, self.config)

        assert len(candidates) == 4
        assert self.catalog.calls[0][1]["categories"] is None

    @pytest.mark.asyncio
    async def test_empty_embedding_uses_attribute_path(self):
        session = SessionProfile(session_id="s1", embedding=[])
        await retrieve_candidates(session, self.catalog, 10, self.config)
        assert self.catalog.calls[0][0] == "filter_products"


class TestRetrievalFailures:

    @pytest.mark.asyncio
    async def test_catalog_error_gives_empty_list(self, config):
        session = SessionProfile(session_id="s1", embedding=[0.5, 0.5])
        assert await retrieve_candidates(session, FailingCatalog(), 10, config) == []

    @pytest.mark.asyncio
    async def test_attribute_error_gives_empty_list(self, config):
        session = SessionProfile(session_id="s1")
        assert await retrieve_candidates(session, FailingCatalog(), 10, config) == []

    @pytest.mark.asyncio
    async def test_timeout_gives_empty_list(self, fast_timeout_config):
        session = SessionProfile(session_id="s1", embedding=[0.5, 0.5])
        assert await retrieve_candidates(session, SlowCatalog(), 10, fast_timeout_config) == []
