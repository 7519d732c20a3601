"""Tests for Stage 5: diversity / novelty re-ranking."""

import pytest

from giftrank.models.config import RankingConfig
from giftrank.stages.diversity import apply_diversity_and_novelty

from conftest import make_ranked


class TestDiversity:

    @pytest.fixture(autouse=True)
    def setup(self, config):
        self.config = config

    def test_boosts_new_category_and_retailer_only(self):
        products = [
            make_ranked("a", 0.9, categories=["X"], retailer="r1"),
            make_ranked("b", 0.85, categories=["X"], retailer="r1"),
            make_ranked("c", 0.5, categories=["Y"], retailer="r1"),
            make_ranked("d", 0.4, categories=["X"], retailer="r2"),
        ]
        out = {p.id: p.final_score for p in apply_diversity_and_novelty(products, [], self.config)}

        assert out["a"] == pytest.approx(1.0)
        assert out["b"] == pytest.approx(0.85)
        assert out["c"] == pytest.approx(0.6)
        assert out["d"] == pytest.approx(0.5)

    def test_boost_applied_once_for_category_and_retailer(self):
        products = [make_ranked("a", 0.2, categories=["X"], retailer="r1")]
        out = apply_diversity_and_novelty(products, [], self.config)
        assert out[0].final_score == pytest.approx(0.3)

    def test_missing_retailer_counts_as_new(self):
        products = [
            make_ranked("a", 0.9, categories=["X"], retailer=None),
            make_ranked("b", 0.8, categories=["X"], retailer=None),
        ]
        out = {p.id: p.final_score for p in apply_diversity_and_novelty(products, [], self.config)}
        assert out["b"] == pytest.approx(0.9)

    def test_novelty_boost_above_recency_threshold(self):
        products = [
            make_ranked("fresh", 0.5, categories=["X"], retailer="r1", recency_score=0.9),
            make_ranked("edge", 0.5, categories=["X"], retailer="r1", recency_score=0.8),
        ]
        out = {p.id: p.final_score for p in apply_diversity_and_novelty(products, [], self.config)}
        # fresh: diversity 0.1 + novelty 0.15; edge: neither (threshold is exclusive)
        assert out["fresh"] == pytest.approx(0.75)
        assert out["edge"] == pytest.approx(0.5)

    def test_seen_ids_excluded(self):
        products = [make_ranked(pid, 0.5) for pid in ("a", "b", "c")]
        out = apply_diversity_and_novelty(products, ["b"], self.config)
        assert [p.id for p in out] == ["a", "c"]

    def test_duplicate_ids_kept_once(self):
        products = [make_ranked("a", 0.9), make_ranked("a", 0.3), make_ranked("b", 0.5)]
        out = apply_diversity_and_novelty(products, [], self.config)
        assert sorted(p.id for p in out) == ["a", "b"]

    def test_cap_at_max_diversified(self):
        products = [make_ranked(f"p{i:03d}", 1.0 - i / 1000) for i in range(150)]
        out = apply_diversity_and_novelty(products, [], self.config)
        assert len(out) == 100

    def test_cap_is_configurable(self):
        config = RankingConfig(max_diversified=3)
        products = [make_ranked(f"p{i}", 0.5) for i in range(10)]
        assert len(apply_diversity_and_novelty(products, [], config)) == 3

    def test_resorted_and_ranked_from_one(self):
        products = [
            make_ranked("a", 0.50, categories=["X"], retailer="r1"),
            make_ranked("b", 0.45, categories=["Y"], retailer="r1"),
        ]
        out = apply_diversity_and_novelty(products, [], self.config)
        # a: 0.6, b: 0.55
        assert [p.id for p in out] == ["a", "b"]
        assert [p.rank for p in out] == [1, 2]

    def test_boost_can_reorder(self):
        products = [
            make_ranked("a", 0.50, categories=["X"], retailer="r1"),
            make_ranked("b", 0.48, categories=["X"], retailer="r1"),
            make_ranked("c", 0.45, categories=["Y"], retailer="r1"),
        ]
        out = apply_diversity_and_novelty(products, [], self.config)
        assert [p.id for p in out] == ["a", "c", "b"]

    def test_empty_input(self):
        assert apply_diversity_and_novelty([], ["a"], self.config) == []
