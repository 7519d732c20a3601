"""Pydantic request/response models for the API."""

from .catalog import IngestRequest
from .interactions import InteractionRequest, InteractionResponse
from .recommendations import RecommendRequest

__all__ = [
    "IngestRequest",
    "InteractionRequest",
    "InteractionResponse",
    "RecommendRequest",
]
