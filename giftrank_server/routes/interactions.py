"""Interaction endpoints: record a swipe/click and drop cached preferences."""

import logging

from fastapi import APIRouter, HTTPException

from ..models import InteractionRequest, InteractionResponse
from ..state import get_state

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=InteractionResponse)
async def record_interaction(request: InteractionRequest):
    """Persist the interaction, then let the engine refresh the session's preferences."""
    state = get_state()
    try:
        await state.interactions.record_interaction(
            request.session_id,
            request.product_id,
            request.action,
            timestamp=request.timestamp,
        )
    except Exception as e:
        logger.error(
            "[interactions] RECORD_FAILED session_id=%s product_id=%s error=%s",
            request.session_id, request.product_id, e,
        )
        raise HTTPException(status_code=500, detail=f"Failed to record interaction: {e}")
    await state.engine.update_user_preferences(
        request.session_id, request.product_id, request.action
    )
    return InteractionResponse(
        session_id=request.session_id,
        product_id=request.product_id,
        action=request.action,
    )


@router.delete("/preferences/{session_id}")
def invalidate_preferences(session_id: str):
    """Drop the cached preference profile for session_id."""
    state = get_state()
    state.engine.cache.invalidate(session_id)
    return {"status": "invalidated", "session_id": session_id}
