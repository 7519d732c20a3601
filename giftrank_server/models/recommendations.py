"""Recommendation request model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from giftrank.models.session import SessionProfile


class RecommendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session: SessionProfile
    # Negative values reach the engine and come back as 400.
    page: int = 0
    page_size: Optional[int] = Field(default=None, alias="pageSize")
