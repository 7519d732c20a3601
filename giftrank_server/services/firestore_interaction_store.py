"""
Firestore interaction store: per-user interactions in users/{user_id}/interactions.

Used when DATA_SOURCE=firebase. The users/{user_id} document holds demographics
(age_group, gender, location). Reads and writes go through
google.cloud.firestore.AsyncClient so history fetches do not block the event loop.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union

from google.cloud.firestore import AsyncClient
from google.cloud.firestore_v1.query import Query as FirestoreQuery
from google.oauth2 import service_account

from giftrank.models.interaction import InteractionAction, UserHistory
from giftrank.models.preferences import Demographics

from .interaction_store import ProductLookup, join_products, utc_timestamp

logger = logging.getLogger(__name__)

# Limit for get_user_history (most recent N)
INTERACTIONS_READ_LIMIT = 500


def _project_id_from_credentials_file(credentials_path: Union[Path, str]) -> Optional[str]:
    """Read project_id from a Google service account JSON file if present."""
    try:
        path = Path(credentials_path)
        if not path.is_file():
            return None
        with open(path) as f:
            data = json.load(f)
        return data.get("project_id") or data.get("projectId")
    except (OSError, ValueError):
        return None


class FirestoreInteractionStore:
    """
    Interaction store backed by Firestore subcollection users/{user_id}/interactions.
    Each document: { product_id, action, timestamp }. Document ID: auto-generated.
    """

    def __init__(
        self,
        project_id: Optional[str] = None,
        credentials_path: Optional[Union[Path, str]] = None,
        catalog: Optional[ProductLookup] = None,
        client: Optional[AsyncClient] = None,
    ):
        self.catalog = catalog
        if client is not None:
            self._db = client
            return
        if not credentials_path:
            raise ValueError("FirestoreInteractionStore requires credentials_path")
        cred_path = str(Path(credentials_path).resolve())
        creds = service_account.Credentials.from_service_account_file(cred_path)
        proj = project_id or _project_id_from_credentials_file(cred_path)
        self._db = AsyncClient(project=proj, credentials=creds)

    def _user_ref(self, user_id: str):
        return self._db.collection("users").document(user_id)

    async def get_user_history(self, user_id: str) -> Optional[UserHistory]:
        """
        History for user_id, most recent first (limit 500).
        None when neither the user document nor any interactions exist.
        """
        if not user_id or not user_id.strip():
            return None
        uid = user_id.strip()
        user_doc = await self._user_ref(uid).get()
        query = (
            self._user_ref(uid)
            .collection("interactions")
            .order_by("timestamp", direction=FirestoreQuery.DESCENDING)
            .limit(INTERACTIONS_READ_LIMIT)
        )
        rows = []
        async for doc in query.stream():
            d = doc.to_dict()
            rows.append({
                "product_id": d.get("product_id", ""),
                "action": d.get("action", ""),
                "timestamp": d.get("timestamp", ""),
            })

        if not user_doc.exists and not rows:
            return None
        user_data = (user_doc.to_dict() or {}) if user_doc.exists else {}
        return UserHistory(
            user_id=uid,
            demographics=Demographics.model_validate(user_data.get("demographics") or {}),
            interactions=await join_products(rows, self.catalog),
        )

    async def record_interaction(
        self,
        user_id: str,
        product_id: str,
        action: InteractionAction,
        timestamp: Optional[str] = None,
    ) -> None:
        """Persist one interaction to users/{user_id}/interactions."""
        uid = user_id.strip()
        data = {
            "product_id": product_id,
            "action": InteractionAction(action).value,
            "timestamp": timestamp or utc_timestamp(),
        }
        try:
            await self._user_ref(uid).collection("interactions").add(data)
        except Exception as e:
            logger.error("[firestore] RECORD_FAILED user_id=%s error=%s", uid, e)
            raise
