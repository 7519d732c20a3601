"""
Interaction model: a user's swipe/click on a product, with the product snapshot.

Used by the preference loader to build UserPreferences.
Built from store dicts via Interaction.model_validate(d) or ensure_interactions().
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .preferences import Demographics
from .product import CatalogProduct


class InteractionAction(str, Enum):
    LIKE = "LIKE"
    DISLIKE = "DISLIKE"
    SAVE = "SAVE"
    CLICK = "CLICK"


class Interaction(BaseModel):
    """
    A single user interaction on a product.

    product: joined product attributes at interaction time; None when the
    product has since been removed from the catalog.
    """

    model_config = ConfigDict(extra="allow")

    product_id: str
    action: InteractionAction
    timestamp: str = ""
    product: Optional[CatalogProduct] = None


class UserHistory(BaseModel):
    """Everything the interaction source knows about one user."""

    user_id: str
    demographics: Demographics = Field(default_factory=Demographics)
    interactions: List[Interaction] = Field(default_factory=list)


def ensure_interactions(
    items: List[Union[Dict[str, Any], Interaction]],
) -> List[Interaction]:
    """Convert list of dicts or Interactions to list of Interaction models."""
    return [
        Interaction.model_validate(i) if isinstance(i, dict) else i
        for i in items
    ]
