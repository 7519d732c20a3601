"""
GiftRank Recommendation API: FastAPI app factory.

Use: uvicorn giftrank_server.app:app
Or:  from giftrank_server import app
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .logging_config import configure_logging
from .routes import register_routes
from .state import get_state

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Build FastAPI app with CORS, routes, and startup."""
    config = get_config()
    configure_logging(config.log_level)

    app = FastAPI(
        title="GiftRank Recommendation API",
        description="Multi-signal gift recommendation ranking over a product catalog",
        version="1.0.0",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_routes(app)

    @app.on_event("startup")
    async def _startup_logging():
        ok, errors = config.validate()
        for err in errors:
            logger.warning("[startup] CONFIG %s", err)
        state = get_state()
        logger.info(
            "[startup] GiftRank API starting data_source=%s valid_config=%s page_size=%d",
            state.config.data_source, ok, state.ranking_config.default_page_size,
        )

    return app


app = create_app()
