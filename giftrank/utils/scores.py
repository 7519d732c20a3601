"""
Score helpers: normalization, overlap, price fit, and recency used across stages.
"""

import math
from datetime import datetime, timezone
from typing import Iterable, List, Optional

NEUTRAL_SCORE = 0.5


def normalize_percent(value: Optional[float]) -> float:
    """Catalog 0-100 score to 0-1. Missing counts as 0."""
    return (value or 0.0) / 100.0


def category_overlap(product_categories: List[str], reference: Iterable[str]) -> float:
    """Fraction of product_categories present in reference (0 when the product has none)."""
    ref = set(reference)
    matched = sum(1 for cat in product_categories if cat in ref)
    return matched / max(len(product_categories), 1)


def price_fit(price: float, low: float, high: float, preferred: float) -> float:
    """
    1 - |price - preferred| / (high - low) inside [low, high], else 0.

    A degenerate range (high == low) has no spread to measure against; an
    in-range price then scores NEUTRAL_SCORE.
    """
    if price < low or price > high:
        return 0.0
    spread = high - low
    if spread <= 0:
        return NEUTRAL_SCORE
    return 1.0 - abs(price - preferred) / spread


def days_since(date_str: str, now: Optional[datetime] = None) -> Optional[float]:
    """Fractional days since an ISO date string; None when missing or unparseable."""
    if not date_str:
        return None
    try:
        dt = datetime.fromisoformat(date_str.replace("Z", "+00:00"))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return (now - dt).total_seconds() / 86400.0


def listing_recency_score(
    listing_start_at: Optional[str],
    window_days: float = 30.0,
    now: Optional[datetime] = None,
) -> float:
    """Linear recency: 1.0 for listings starting now or later, 0 after window_days."""
    days = days_since(listing_start_at or "", now)
    if days is None or math.isnan(days):
        return 0.0
    if days <= 0:
        return 1.0
    if days > window_days:
        return 0.0
    return max(0.0, 1.0 - days / window_days)
