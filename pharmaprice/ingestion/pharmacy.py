"""
Catalog-driven pharmacy connector.

One instance per SourceConfig. Fetches the source's search page for a
query, extracts name/price pairs with the configured selectors, keeps the
ones relevant to the query and turns them into ResultRecords.
"""

import logging
from urllib.parse import quote

from pharmaprice.ingestion.base import BaseConnector
from pharmaprice.schemas.search import ResultRecord, SourceConfig
from pharmaprice.utils.extraction import RawCandidate, extract_candidates
from pharmaprice.utils.links import resolve_link
from pharmaprice.utils.matching import match_candidates
from pharmaprice.utils.normalization import (
    NOT_AVAILABLE,
    compute_discount,
    normalize_price,
    placeholder_image_url,
)
from pharmaprice.utils.scraping import fetch_html

logger = logging.getLogger(__name__)


class PharmacyConnector(BaseConnector):
    """HTML scraper for a single pharmacy website."""

    def __init__(self, config: SourceConfig):
        super().__init__(config.id)
        self.config = config

    def build_url(self, query: str) -> str:
        return self.config.url_template.replace("{query}", quote(query.strip(), safe=""))

    async def search(self, query: str) -> list[ResultRecord]:
        """Fetch and parse one result page. FetchError propagates."""
        url = self.build_url(query)
        html, status = await fetch_html(url)

        candidates = extract_candidates(html, self.config)
        if not candidates:
            logger.info(f"{self.source_name}: page returned 0 candidates")
            return []

        matched = match_candidates(candidates, query)
        logger.info(f"{self.source_name}: {len(matched)}/{len(candidates)} candidates matched '{query}'")
        return [self._to_record(candidate, url) for candidate in matched]

    def _to_record(self, candidate: RawCandidate, page_url: str) -> ResultRecord:
        price = normalize_price(candidate.price_text)
        original_price = normalize_price(candidate.original_price_text)
        if original_price == NOT_AVAILABLE:
            original_price = None
        return ResultRecord(
            source_id=self.source_name,
            pharmacy_name=self.config.name,
            drug_name=candidate.text,
            price=price,
            link=resolve_link(candidate, self.config, page_url=page_url),
            image_url=placeholder_image_url(candidate.text),
            original_price=original_price,
            discount=compute_discount(price, original_price),
            availability=candidate.availability_text or None,
        )
