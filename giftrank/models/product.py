"""
Product models: catalog snapshot, retrieval candidate, and ranked result.

CatalogProduct mirrors what the catalog store returns. CandidateProduct adds the
retrieval similarity; RankedProduct adds the accumulated score.
Built from store dicts via CatalogProduct.model_validate(d) or ensure_products().
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

STATUS_APPROVED = "APPROVED"
STATUS_PENDING = "PENDING"
STATUS_REJECTED = "REJECTED"
AVAILABILITY_IN_STOCK = "IN_STOCK"


class CatalogProduct(BaseModel):
    """
    Product payload as held by the catalog.

    Scores follow the catalog's scales: quality_score and popularity_score are
    0-100, recency_score is 0-1.
    """

    model_config = ConfigDict(extra="allow")

    id: str
    title: str = ""
    description: Optional[str] = ""
    price: float = 0.0
    currency: str = "USD"
    categories: List[str] = Field(default_factory=list)
    retailer: Optional[str] = None
    brand: Optional[str] = None
    source: Optional[str] = None
    status: str = STATUS_APPROVED
    in_stock: bool = True
    availability: str = AVAILABILITY_IN_STOCK
    vendor_email: Optional[str] = None
    quality_score: Optional[float] = None
    popularity_score: Optional[float] = None
    recency_score: Optional[float] = None
    rating: Optional[float] = None
    embedding: Optional[List[float]] = None
    images: List[str] = Field(default_factory=list)
    free_shipping: bool = False
    shipping_cost: Optional[float] = None
    delivery_days: Optional[int] = None

    # Identity fields used by ingestion duplicate detection
    asin: Optional[str] = None
    source_item_id: Optional[str] = None
    url_canonical: Optional[str] = None

    def is_recommendable(self) -> bool:
        """Approved, in stock, and marked available."""
        return (
            self.status == STATUS_APPROVED
            and self.in_stock
            and self.availability == AVAILABILITY_IN_STOCK
        )


class CandidateProduct(CatalogProduct):
    """A catalog product fetched for possible recommendation."""

    similarity: float = 0.5
    is_vendor: bool = False
    sponsored: bool = False

    @classmethod
    def from_catalog(cls, product: CatalogProduct, similarity: float) -> "CandidateProduct":
        data = product.model_dump(
            exclude={"embedding", "similarity", "is_vendor", "sponsored",
                     "final_score", "rank", "signal_scores"}
        )
        return cls(
            **data,
            similarity=similarity,
            is_vendor=bool(product.vendor_email),
            sponsored=False,
        )


class RankedProduct(CandidateProduct):
    """Candidate with its accumulated score. rank is 1-based after final ordering, 0 before."""

    final_score: float = 0.0
    rank: int = 0
    signal_scores: Dict[str, float] = Field(default_factory=dict)


def ensure_products(
    items: List[Union[Dict[str, Any], CatalogProduct]],
) -> List[CatalogProduct]:
    """Convert list of dicts or CatalogProducts to CatalogProduct models."""
    return [
        CatalogProduct.model_validate(p) if isinstance(p, dict) else p
        for p in items
    ]
