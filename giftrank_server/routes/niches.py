"""Niche profile endpoint."""

from typing import List

from fastapi import APIRouter, Query

from giftrank.models.niche import NicheProfile

from ..state import get_state

router = APIRouter()


@router.get("", response_model=List[NicheProfile])
async def list_niches(limit: int = Query(20, ge=1, le=100)):
    state = get_state()
    return await state.engine.get_niche_profiles(limit=limit)
