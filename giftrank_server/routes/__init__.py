"""Register all route modules on the FastAPI app."""

from fastapi import FastAPI

from .catalog import router as catalog_router
from .interactions import router as interactions_router
from .niches import router as niches_router
from .recommendations import router as recommendations_router
from .root import router as root_router
from .stats import router as stats_router


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the app."""
    app.include_router(root_router)
    app.include_router(recommendations_router, prefix="/api/recommendations", tags=["recommendations"])
    app.include_router(interactions_router, prefix="/api/interactions", tags=["interactions"])
    app.include_router(niches_router, prefix="/api/niches", tags=["niches"])
    app.include_router(catalog_router, prefix="/api/catalog", tags=["catalog"])
    app.include_router(stats_router, prefix="/api", tags=["stats"])
