"""Stats endpoint."""

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()


async def _catalog_size(catalog) -> int:
    """Product count (Qdrant count when available, else in-memory length)."""
    count = getattr(catalog, "count", None)
    if count is not None:
        return await count()
    return len(catalog)


@router.get("/stats")
async def get_stats():
    """Get current statistics."""
    state = get_state()
    cache = state.engine.cache
    return {
        "data_source": state.config.data_source,
        "catalog_products": await _catalog_size(state.catalog),
        "cached_profiles": len(cache) if hasattr(cache, "__len__") else None,
        "page_size": state.ranking_config.default_page_size,
        "ingestion": (await state.ingestion.get_stats()).model_dump(),
    }
