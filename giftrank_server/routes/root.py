"""Root and health endpoints."""

from typing import Tuple

from fastapi import APIRouter

from ..state import get_state

router = APIRouter()

API_VERSION = "1.0.0"


async def _catalog_available(state) -> Tuple[bool, str]:
    """Return (available, message) for the catalog store."""
    check = getattr(state.catalog, "is_available", None)
    if check is None:
        return True, "local"
    try:
        ok = await check()
        return ok, "connected" if ok else "not reachable"
    except Exception as e:
        return False, str(e)


@router.get("/")
def root():
    state = get_state()
    return {
        "name": "GiftRank Recommendation API",
        "version": API_VERSION,
        "data_source": state.config.data_source,
        "stores": {
            "catalog": type(state.catalog).__name__,
            "interactions": type(state.interactions).__name__,
        },
        "endpoints": {
            "recommendations": ["/api/recommendations"],
            "interactions": ["/api/interactions", "/api/interactions/preferences/{session_id}"],
            "niches": ["/api/niches"],
            "catalog": ["/api/catalog/ingest"],
            "stats": ["/api/stats"],
        },
    }


@router.get("/api/health")
async def health():
    state = get_state()
    catalog_ok, catalog_msg = await _catalog_available(state)
    return {
        "status": "healthy" if catalog_ok else "degraded",
        "catalog": {"available": catalog_ok, "message": catalog_msg},
    }
