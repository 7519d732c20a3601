"""Recommendation endpoint."""

import logging

from fastapi import APIRouter, HTTPException

from giftrank.errors import InvalidArgument, PipelineFailure
from giftrank.models.results import RecommendationResult

from ..models import RecommendRequest
from ..state import get_state

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=RecommendationResult)
async def get_recommendations(request: RecommendRequest):
    """Ranked page of products for the session."""
    state = get_state()
    try:
        return await state.engine.get_recommendations(
            request.session,
            page=request.page,
            page_size=request.page_size,
        )
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PipelineFailure as e:
        raise HTTPException(status_code=500, detail=str(e))
