"""Result models returned by the engine facade."""

from typing import List

from pydantic import BaseModel, Field

from .product import RankedProduct


class RecommendationResult(BaseModel):
    """One page of ranked recommendations."""

    page: int
    has_more: bool
    products: List[RankedProduct] = Field(default_factory=list)
