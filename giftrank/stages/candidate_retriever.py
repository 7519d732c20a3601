"""
Stage 2: Candidate Retriever

Fetches a bounded candidate set from the catalog:
- vector path when the session carries an embedding (similarity = 1 - distance);
- attribute path otherwise (price bounds + any-of interest categories), with a
  neutral placeholder similarity.

Failures and timeouts are logged and produce an empty list.
The public entry point is retrieve_candidates.
"""

import asyncio
import logging
from typing import List

from giftrank.errors import CandidateRetrievalFailure
from giftrank.models.config import RankingConfig
from giftrank.models.product import CandidateProduct
from giftrank.models.session import SessionProfile
from giftrank.sources import CatalogSource
from giftrank.utils.scores import NEUTRAL_SCORE

logger = logging.getLogger(__name__)


async def _vector_candidates(
    session: SessionProfile,
    catalog: CatalogSource,
    limit: int,
) -> List[CandidateProduct]:
    """Nearest neighbours of the session embedding, closest first."""
    hits = await catalog.search_similar(list(session.embedding or []), limit)
    return [
        CandidateProduct.from_catalog(product, similarity=1.0 - distance)
        for product, distance in hits
        if product.is_recommendable()
    ][:limit]


async def _attribute_candidates(
    session: SessionProfile,
    catalog: CatalogSource,
    limit: int,
) -> List[CandidateProduct]:
    """Filter by price bounds and interest categories, ordered by the catalog's quality ranking."""
    constraints = session.constraints
    products = await catalog.filter_products(
        categories=constraints.interests or None,
        min_price=constraints.min_price,
        max_price=constraints.max_price,
        limit=limit,
    )
    return [
        CandidateProduct.from_catalog(product, similarity=NEUTRAL_SCORE)
        for product in products
        if product.is_recommendable()
    ][:limit]


async def _fetch_candidates(
    session: SessionProfile,
    catalog: CatalogSource,
    limit: int,
    config: RankingConfig,
    path: str,
) -> List[CandidateProduct]:
    fetch = _vector_candidates if path == "vector" else _attribute_candidates
    try:
        return await asyncio.wait_for(
            fetch(session, catalog, limit),
            timeout=config.data_timeout_seconds,
        )
    except asyncio.TimeoutError as e:
        raise CandidateRetrievalFailure(
            f"{path} query timed out after {config.data_timeout_seconds}s"
        ) from e
    except Exception as e:
        raise CandidateRetrievalFailure(f"{path} query failed: {e}") from e


async def retrieve_candidates(
    session: SessionProfile,
    catalog: CatalogSource,
    limit: int,
    config: RankingConfig,
) -> List[CandidateProduct]:
    """
    Stage 2: Return up to limit candidates for the session.

    Chooses the vector path when session.embedding is non-empty, else the
    attribute path. Never raises for data-layer problems.
    """
    path = "vector" if session.has_embedding else "attribute"
    try:
        candidates = await _fetch_candidates(session, catalog, limit, config, path)
    except CandidateRetrievalFailure as e:
        logger.error(
            "[candidates] FAILED session_id=%s path=%s error=%s",
            session.session_id, path, e,
        )
        return []

    logger.debug(
        "[candidates] session_id=%s path=%s count=%s limit=%s",
        session.session_id, path, len(candidates), limit,
    )
    return candidates
