"""Application state: stores, ranking config, and the engines built on them."""

import logging
from typing import Any, Optional

from giftrank.ingestion import IngestionEngine
from giftrank.models.config import RankingConfig
from giftrank.recommendation_engine import RecommendationEngine

from .config import ServerConfig, get_config
from .services import (
    FirestoreInteractionStore,
    JsonCatalogStore,
    JsonInteractionStore,
    QdrantCatalogStore,
)

logger = logging.getLogger(__name__)


class AppState:
    """Global application state."""

    def __init__(
        self,
        config: ServerConfig,
        catalog: Optional[Any] = None,
        interactions: Optional[Any] = None,
        ranking_config: Optional[RankingConfig] = None,
    ):
        self.config = config
        self.ranking_config = ranking_config or config.load_ranking_config()

        self.catalog = catalog if catalog is not None else self._create_catalog(config)
        logger.info("[startup] Catalog store: %s", type(self.catalog).__name__)

        self.interactions = (
            interactions if interactions is not None
            else self._create_interaction_store(config, self.catalog)
        )
        logger.info("[startup] Interaction store: %s", type(self.interactions).__name__)

        self.engine = RecommendationEngine(
            self.catalog, self.interactions, config=self.ranking_config
        )
        self.ingestion = IngestionEngine(self.catalog)

    @staticmethod
    def _create_catalog(config: ServerConfig) -> Any:
        """Qdrant when DATA_SOURCE=qdrant, else the JSON catalog file."""
        if config.data_source == "qdrant" and config.qdrant_url:
            return QdrantCatalogStore(
                qdrant_url=config.qdrant_url,
                collection=config.qdrant_collection,
            )
        return JsonCatalogStore(config.catalog_json_path)

    @staticmethod
    def _create_interaction_store(config: ServerConfig, catalog: Any) -> Any:
        """Firestore when DATA_SOURCE=firebase and credentials exist, else the JSON file."""
        if config.data_source == "firebase":
            cred = config.firebase_credentials_path
            if cred and cred.is_file():
                try:
                    return FirestoreInteractionStore(
                        project_id=config.firebase_project_id,
                        credentials_path=cred,
                        catalog=catalog,
                    )
                except Exception as e:
                    logger.warning(
                        "[startup] Firestore interaction store init failed: %s, using JSON", e
                    )
            else:
                logger.warning(
                    "[startup] Firestore interaction store skipped: credentials not found: %s", cred
                )
        return JsonInteractionStore(config.interactions_json_path, catalog=catalog)


_state: Optional[AppState] = None


def get_state() -> AppState:
    global _state
    if _state is None:
        config = get_config()
        _state = AppState(config)
    return _state


def set_state(state: Optional[AppState]) -> None:
    """Replace the global state (None resets it to be rebuilt from config)."""
    global _state
    _state = state
