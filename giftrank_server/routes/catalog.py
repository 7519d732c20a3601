"""Catalog ingestion endpoint."""

from fastapi import APIRouter

from giftrank.ingestion import IngestionResult

from ..models import IngestRequest
from ..state import get_state

router = APIRouter()


@router.post("/ingest", response_model=IngestionResult)
async def ingest(request: IngestRequest):
    """Upsert feed products with quality gating and duplicate detection."""
    state = get_state()
    return await state.ingestion.ingest_products(request.products)
