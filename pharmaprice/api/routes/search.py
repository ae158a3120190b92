"""
Search API route - medicine price lookup across pharmacies.
"""

import logging
from typing import Literal

from fastapi import APIRouter, HTTPException, Query

from pharmaprice.schemas.search import SearchResponse
from pharmaprice.services.aggregator import BLANK_QUERY_MESSAGE, search_pharmacies

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.get("", response_model=SearchResponse)
async def search_medicines(
    query: str = Query("", description="Medicine name to look up"),
    sort: Literal["relevance", "price_asc", "price_desc"] = Query("relevance", description="Sort order"),
):
    """
    Search every enabled pharmacy in parallel.

    Results are cached for 3 hours per (pharmacy, query) combination.
    A blank query is rejected with 400; a missing source catalog with 503.
    An empty result list is a normal 200 response with a message.
    """
    response = await search_pharmacies(query, sort=sort)
    if response.error:
        status_code = 400 if response.error == BLANK_QUERY_MESSAGE else 503
        raise HTTPException(status_code=status_code, detail=response.error)
    return response
