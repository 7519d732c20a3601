"""
Session model: request-scoped profile passed to the pipeline.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SessionConstraints(BaseModel):
    """Quiz answers and paging state that constrain retrieval and re-ranking."""

    model_config = ConfigDict(populate_by_name=True)

    interests: List[str] = Field(default_factory=list)
    min_price: Optional[float] = Field(None, alias="minPrice")
    max_price: Optional[float] = Field(None, alias="maxPrice")
    seen_ids: List[str] = Field(default_factory=list, alias="seenIds")


class SessionProfile(BaseModel):
    """A recommendation request's session: id, optional embedding, constraints."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    embedding: Optional[List[float]] = None
    constraints: SessionConstraints = Field(default_factory=SessionConstraints)

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)


def ensure_session(session: Union[Dict[str, Any], SessionProfile]) -> SessionProfile:
    """Convert a dict to SessionProfile; pass models through."""
    return SessionProfile.model_validate(session) if isinstance(session, dict) else session
