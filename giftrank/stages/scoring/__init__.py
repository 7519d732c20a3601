"""
Stage 3 scoring: weighted blend of content, collaborative-proxy, deep-learning
placeholder, demographic, and (optional) dislike signals.

Public API: score_candidates, sort_ranked, and the strategy classes.
"""

from .core import ranking_sort_key, score_candidates, sort_ranked
from .strategies import (
    DEFAULT_STRATEGIES,
    CollaborativeProxyStrategy,
    ContentBasedStrategy,
    DemographicStrategy,
    DislikePenaltyStrategy,
    NeutralStrategy,
    ScoringStrategy,
)

__all__ = [
    "DEFAULT_STRATEGIES",
    "CollaborativeProxyStrategy",
    "ContentBasedStrategy",
    "DemographicStrategy",
    "DislikePenaltyStrategy",
    "NeutralStrategy",
    "ScoringStrategy",
    "ranking_sort_key",
    "score_candidates",
    "sort_ranked",
]
