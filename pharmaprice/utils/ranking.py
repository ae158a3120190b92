"""
Ordering of merged search results.
"""

import logging

from pharmaprice.schemas.search import ResultRecord
from pharmaprice.utils.normalization import price_value

logger = logging.getLogger(__name__)

SORT_OPTIONS = ("relevance", "price_asc", "price_desc")


def sort_records(records: list[ResultRecord], sort: str = "relevance") -> list[ResultRecord]:
    """
    Sort merged records.

    "relevance" keeps merge order (per-source best match first).
    Price sorts put records without a readable price last.
    """
    if sort == "relevance":
        return list(records)
    if sort not in SORT_OPTIONS:
        logger.warning(f"Unknown sort '{sort}', using relevance")
        return list(records)

    priced = [r for r in records if price_value(r.price) is not None]
    unpriced = [r for r in records if price_value(r.price) is None]
    priced.sort(key=lambda r: price_value(r.price), reverse=(sort == "price_desc"))
    return priced + unpriced
