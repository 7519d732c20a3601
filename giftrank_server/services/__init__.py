"""Catalog and interaction stores backing the API."""

from .catalog_store import JsonCatalogStore
from .firestore_interaction_store import FirestoreInteractionStore
from .interaction_store import (
    InteractionStore,
    JsonInteractionStore,
    ProductLookup,
    join_products,
)
from .qdrant_catalog import QdrantCatalogStore

__all__ = [
    "FirestoreInteractionStore",
    "InteractionStore",
    "JsonCatalogStore",
    "JsonInteractionStore",
    "ProductLookup",
    "QdrantCatalogStore",
    "join_products",
]
