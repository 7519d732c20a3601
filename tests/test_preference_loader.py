"""Tests for Stage 1: preference profile loading and derivation."""

import pytest

from giftrank.cache import LRUPreferenceCache
from giftrank.models.interaction import InteractionAction, UserHistory
from giftrank.models.preferences import Demographics, PriceRange
from giftrank.stages.preference_loader import build_preferences, load_user_preferences

from conftest import (
    FailingInteractions,
    FakeInteractions,
    SlowInteractions,
    make_history,
    make_preferences,
    make_product,
)

LIKE = InteractionAction.LIKE
DISLIKE = InteractionAction.DISLIKE
SAVE = InteractionAction.SAVE
CLICK = InteractionAction.CLICK


class TestBuildPreferences:

    @pytest.fixture(autouse=True)
    def setup(self):
        self.book = make_product("p1", categories=["Books", "Reading"], price=10.0, brand="Penguin")
        self.novel = make_product("p2", categories=["Books"], price=30.0, brand="Penguin")
        self.toy = make_product("p3", categories=["Toys"], price=50.0, brand="Lego")

    def test_empty_history_is_cold_start(self):
        assert build_preferences(UserHistory(user_id="u1")) is None

    def test_likes_feed_categories_price_and_brands(self):
        history = make_history("u1", [(LIKE, self.book), (LIKE, self.novel)])
        prefs = build_preferences(history)

        assert prefs.categories == {"Books": 2, "Reading": 1}
        assert prefs.brands == {"Penguin": 2}
        assert prefs.price_range.min == 10.0
        assert prefs.price_range.max == 30.0
        assert prefs.price_range.preferred == pytest.approx(20.0)

    def test_dislikes_do_not_count_as_positive(self):
        history = make_history("u1", [(LIKE, self.book), (DISLIKE, self.toy)])
        prefs = build_preferences(history)

        assert "Toys" not in prefs.categories
        assert prefs.disliked_categories == {"Toys": 1}
        assert "Lego" not in prefs.brands
        # Disliked price does not widen the liked range
        assert prefs.price_range.max == 10.0

    def test_no_liked_prices_keeps_default_range(self):
        history = make_history("u1", [(DISLIKE, self.toy), (CLICK, self.book)])
        prefs = build_preferences(history)
        assert prefs.price_range == PriceRange()

    def test_behavior_rates(self):
        history = make_history(
            "u1", [(LIKE, self.book), (SAVE, self.novel), (CLICK, self.toy), (DISLIKE, self.toy)]
        )
        prefs = build_preferences(history)

        assert prefs.behavior.click_rate == pytest.approx(0.25)
        assert prefs.behavior.save_rate == pytest.approx(0.25)
        assert prefs.behavior.purchase_rate == 0.0
        assert prefs.history.total_interactions == 4

    def test_favorite_categories_top_five_ties_by_name(self):
        products = [
            make_product(f"c{i}", categories=[name])
            for i, name in enumerate(["F", "E", "D", "C", "B", "A"])
        ]
        extra = make_product("x", categories=["F"])
        history = make_history("u1", [(LIKE, p) for p in products] + [(LIKE, extra)])
        prefs = build_preferences(history)

        assert prefs.history.favorite_categories == ["F", "A", "B", "C", "D"]

    def test_removed_product_is_ignored(self):
        history = make_history("u1", [(LIKE, self.book)])
        history.interactions[0].product = None
        prefs = build_preferences(history)

        assert prefs.categories == {}
        assert prefs.history.total_interactions == 1

    def test_demographics_carried_over(self):
        demo = Demographics(age_group="18-34", gender="f", location="US")
        prefs = build_preferences(make_history("u1", [(LIKE, self.book)], demographics=demo))
        assert prefs.demographics == demo


class TestLoadUserPreferences:

    @pytest.fixture(autouse=True)
    def setup(self, config):
        self.config = config
        self.cache = LRUPreferenceCache(max_size=8)
        book = make_product("p1", categories=["Books"], price=20.0)
        self.source = FakeInteractions({"u1": make_history("u1", [(LIKE, book)])})

    @pytest.mark.asyncio
    async def test_cache_hit_skips_source(self):
        cached = make_preferences({"Garden": 3})
        self.cache.set("u1", cached)

        prefs = await load_user_preferences("u1", self.source, self.cache, self.config)

        assert prefs is cached
        assert self.source.calls == []

    @pytest.mark.asyncio
    async def test_miss_loads_and_caches(self):
        prefs = await load_user_preferences("u1", self.source, self.cache, self.config)

        assert prefs.categories == {"Books": 1}
        assert self.cache.get("u1") is prefs

    @pytest.mark.asyncio
    async def test_unknown_user_is_cold_start_and_not_cached(self):
        prefs = await load_user_preferences("nobody", self.source, self.cache, self.config)

        assert prefs is None
        assert "nobody" not in self.cache

    @pytest.mark.asyncio
    async def test_empty_history_is_cold_start(self):
        self.source.histories["u2"] = UserHistory(user_id="u2")
        prefs = await load_user_preferences("u2", self.source, self.cache, self.config)

        assert prefs is None
        assert "u2" not in self.cache

    @pytest.mark.asyncio
    async def test_source_failure_degrades_to_cold_start(self):
        prefs = await load_user_preferences(
            "u1", FailingInteractions(), self.cache, self.config
        )
        assert prefs is None
        assert "u1" not in self.cache

    @pytest.mark.asyncio
    async def test_timeout_degrades_to_cold_start(self, fast_timeout_config):
        prefs = await load_user_preferences(
            "u1", SlowInteractions(), self.cache, fast_timeout_config
        )
        assert prefs is None
