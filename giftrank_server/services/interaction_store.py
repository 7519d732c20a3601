"""
Interaction Store abstraction.

Supplies a user's interaction history (joined with current product attributes)
to the preference loader and persists new interactions. Implementations: JSON
file (local/dev), Firestore (production). Swap via DATA_SOURCE.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from giftrank.models.interaction import (
    Interaction,
    InteractionAction,
    UserHistory,
    ensure_interactions,
)
from giftrank.models.preferences import Demographics
from giftrank.models.product import CatalogProduct

logger = logging.getLogger(__name__)


class ProductLookup(Protocol):
    """Catalog read used to join interaction rows with product attributes."""

    async def get_products(self, product_ids: List[str]) -> Dict[str, CatalogProduct]:
        ...


class InteractionStore(Protocol):
    """Protocol for interaction read/write. Satisfies giftrank.sources.InteractionSource."""

    async def get_user_history(self, user_id: str) -> Optional[UserHistory]:
        ...

    async def record_interaction(
        self,
        user_id: str,
        product_id: str,
        action: InteractionAction,
        timestamp: Optional[str] = None,
    ) -> None:
        """Persist one interaction."""
        ...


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def join_products(
    rows: List[Dict[str, Any]],
    catalog: Optional[ProductLookup],
) -> List[Interaction]:
    """
    Interaction models with product snapshots; removed products join as None.
    Rows with an unknown action are logged and skipped.
    """
    known = []
    for r in rows:
        if r.get("action") in InteractionAction._value2member_map_:
            known.append(r)
        else:
            logger.warning(
                "[interactions] SKIP_UNKNOWN_ACTION product_id=%s action=%r",
                r.get("product_id"), r.get("action"),
            )
    rows = known
    products: Dict[str, CatalogProduct] = {}
    if catalog is not None and rows:
        products = await catalog.get_products(sorted({r["product_id"] for r in rows}))
    return ensure_interactions([
        {**r, "timestamp": r.get("timestamp") or "", "product": products.get(r["product_id"])}
        for r in rows
    ])


class JsonInteractionStore:
    """
    Interaction store kept in memory, optionally persisted to a JSON file:
        {"users": {"<user_id>": {"demographics": {...}, "interactions": [
            {"product_id": "...", "action": "LIKE", "timestamp": "..."}]}}}
    """

    def __init__(
        self,
        path: Optional[Union[Path, str]] = None,
        catalog: Optional[ProductLookup] = None,
        users: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.path = Path(path) if path else None
        self.catalog = catalog
        self._users: Dict[str, Dict[str, Any]] = {}
        if users is not None:
            self._users = {uid: dict(u) for uid, u in users.items()}
        elif self.path and self.path.is_file():
            with open(self.path) as f:
                self._users = json.load(f).get("users", {})
            logger.info("[interactions] LOADED path=%s users=%d", self.path, len(self._users))

    def _persist(self) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w") as f:
            json.dump({"users": self._users}, f, indent=2)

    async def get_user_history(self, user_id: str) -> Optional[UserHistory]:
        user = self._users.get(user_id)
        if user is None:
            return None
        rows = user.get("interactions", [])
        return UserHistory(
            user_id=user_id,
            demographics=Demographics.model_validate(user.get("demographics") or {}),
            interactions=await join_products(rows, self.catalog),
        )

    async def record_interaction(
        self,
        user_id: str,
        product_id: str,
        action: InteractionAction,
        timestamp: Optional[str] = None,
    ) -> None:
        user = self._users.setdefault(user_id, {"interactions": []})
        user.setdefault("interactions", []).append({
            "product_id": product_id,
            "action": InteractionAction(action).value,
            "timestamp": timestamp or utc_timestamp(),
        })
        self._persist()
