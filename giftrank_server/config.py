"""
Server Configuration

Loads configuration from environment variables and provides defaults.
A .env file at the project root is loaded with python-dotenv when present.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from giftrank.models.config import RankingConfig

BASE_DIR = Path(__file__).resolve().parent.parent

root_env = BASE_DIR / ".env"
if root_env.exists():
    load_dotenv(root_env)

DATA_SOURCES = ("json", "qdrant", "firebase")


@dataclass
class ServerConfig:
    """Server configuration."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # Data source: "json" (files) | "qdrant" (catalog in Qdrant) | "firebase" (interactions in Firestore)
    data_source: str = "json"

    # JSON stores
    catalog_json_path: Path = BASE_DIR / "data" / "catalog.json"
    interactions_json_path: Path = BASE_DIR / "data" / "interactions.json"

    # Qdrant catalog
    qdrant_url: Optional[str] = None
    qdrant_collection: str = "products"

    # Firestore interaction history
    firebase_credentials_path: Optional[Path] = None
    firebase_project_id: Optional[str] = None

    # Ranking config overrides (JSON, merged onto RankingConfig defaults)
    ranking_config_path: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        data_source = os.getenv("DATA_SOURCE", "").strip().lower() or "json"
        if data_source not in DATA_SOURCES:
            data_source = "json"

        def _path_env(key: str, default: Optional[Path] = None) -> Optional[Path]:
            v = os.getenv(key)
            if not v:
                return default
            p = Path(v)
            return p if p.is_absolute() else (BASE_DIR / p).resolve()

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            data_source=data_source,
            catalog_json_path=_path_env("CATALOG_JSON_PATH", BASE_DIR / "data" / "catalog.json"),
            interactions_json_path=_path_env(
                "INTERACTIONS_JSON_PATH", BASE_DIR / "data" / "interactions.json"
            ),
            qdrant_url=os.getenv("QDRANT_URL") or None,
            qdrant_collection=os.getenv("QDRANT_COLLECTION", "products"),
            firebase_credentials_path=(
                _path_env("FIREBASE_CREDENTIALS_PATH")
                or _path_env("GOOGLE_APPLICATION_CREDENTIALS")
            ),
            firebase_project_id=os.getenv("FIREBASE_PROJECT_ID") or None,
            ranking_config_path=_path_env("RANKING_CONFIG_PATH"),
        )

    def validate(self) -> tuple[bool, list[str]]:
        """
        Validate the configuration.

        Returns:
            (is_valid, list_of_errors)
        """
        errors = []

        if self.data_source == "qdrant" and not self.qdrant_url:
            errors.append("DATA_SOURCE=qdrant requires QDRANT_URL")

        if self.data_source == "firebase":
            cred = self.firebase_credentials_path
            if not cred or not cred.is_file():
                errors.append(f"Firebase credentials file not found: {cred}")

        if self.ranking_config_path and not self.ranking_config_path.is_file():
            errors.append(f"Ranking config not found: {self.ranking_config_path}")

        return len(errors) == 0, errors

    def load_ranking_config(self) -> RankingConfig:
        """RankingConfig from ranking_config_path, or defaults when unset."""
        if not self.ranking_config_path:
            return RankingConfig()
        with open(self.ranking_config_path) as f:
            return RankingConfig.from_dict(json.load(f))


# Global config instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def reload_config() -> ServerConfig:
    """Reload configuration from environment."""
    global _config
    _config = None
    return get_config()
