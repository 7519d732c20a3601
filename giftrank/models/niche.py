"""Niche profile model: aggregate over a category cluster of the catalog."""

from typing import Dict, List

from pydantic import BaseModel, Field


class NichePriceRange(BaseModel):
    min: float = 0.0
    max: float = 1000.0


class NicheDemographics(BaseModel):
    age_groups: List[str] = Field(default_factory=list)
    genders: List[str] = Field(default_factory=list)
    locations: List[str] = Field(default_factory=list)


class NicheBehavior(BaseModel):
    avg_click_rate: float = 0.1
    avg_save_rate: float = 0.05
    avg_purchase_rate: float = 0.02


class NichePopularity(BaseModel):
    total_users: int = 0
    growth_rate: float = 0.1
    seasonality: Dict[str, float] = Field(default_factory=dict)


class NicheProfile(BaseModel):
    category: str
    subcategories: List[str] = Field(default_factory=list)
    price_range: NichePriceRange = Field(default_factory=NichePriceRange)
    demographics: NicheDemographics = Field(default_factory=NicheDemographics)
    behavior: NicheBehavior = Field(default_factory=NicheBehavior)
    popularity: NichePopularity = Field(default_factory=NichePopularity)
    avg_price: float = 0.0
    avg_rating: float = 0.0
