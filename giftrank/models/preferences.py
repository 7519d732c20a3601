"""
User preference model: aggregate derived from a user's interaction history.

Built fresh on each preference-cache miss; never persisted.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

UNKNOWN = "unknown"


class PriceRange(BaseModel):
    min: float = 0.0
    max: float = 1000.0
    preferred: float = 50.0


class Demographics(BaseModel):
    age_group: str = UNKNOWN
    gender: str = UNKNOWN
    location: str = UNKNOWN


class BehaviorRates(BaseModel):
    click_rate: float = 0.0
    save_rate: float = 0.0
    purchase_rate: float = 0.0


class PreferenceHistory(BaseModel):
    total_interactions: int = 0
    favorite_categories: List[str] = Field(default_factory=list)


class UserPreferences(BaseModel):
    """Per-user preference summary used by the scorer and niche booster."""

    user_id: str
    categories: Dict[str, int] = Field(default_factory=dict)
    price_range: PriceRange = Field(default_factory=PriceRange)
    brands: Dict[str, int] = Field(default_factory=dict)
    demographics: Demographics = Field(default_factory=Demographics)
    # Collected from DISLIKE interactions; only read by DislikePenaltyStrategy.
    disliked_categories: Dict[str, int] = Field(default_factory=dict)
    behavior: BehaviorRates = Field(default_factory=BehaviorRates)
    history: PreferenceHistory = Field(default_factory=PreferenceHistory)
