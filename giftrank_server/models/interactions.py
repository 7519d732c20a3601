"""Interaction-related Pydantic models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from giftrank.models.interaction import InteractionAction


class InteractionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId", min_length=1)
    product_id: str = Field(alias="productId", min_length=1)
    action: InteractionAction
    timestamp: Optional[str] = None


class InteractionResponse(BaseModel):
    status: str = "recorded"
    session_id: str
    product_id: str
    action: InteractionAction
