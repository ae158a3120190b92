"""
Multi-pharmacy price aggregation.

Fans one medicine query out to every enabled pharmacy concurrently, serving
each source from the result cache when possible, and merges whatever comes
back. A slow or broken pharmacy never fails the whole search: only a blank
query or a missing catalog does.
"""

import asyncio
import logging

from pharmaprice.config import settings
from pharmaprice.data.source_catalog import get_catalog_error, load_catalog
from pharmaprice.ingestion import get_all_connectors
from pharmaprice.ingestion.base import BaseConnector
from pharmaprice.ingestion.retry import run_with_retries
from pharmaprice.schemas.search import ResultRecord, SearchResponse, SourceStatus
from pharmaprice.utils.cache import ResultCache
from pharmaprice.utils.normalization import normalize_query
from pharmaprice.utils.ranking import sort_records

logger = logging.getLogger(__name__)

BLANK_QUERY_MESSAGE = "Please enter a medicine name to search."
CATALOG_UNAVAILABLE_MESSAGE = (
    "Pharmacy price search is unavailable right now because no pharmacy sources are configured. "
    "Please try again later."
)


class SearchError(Exception):
    """A search that could not be attempted at all."""


class QueryValidationError(SearchError):
    """The query is blank."""


class CatalogUnavailableError(SearchError):
    """No pharmacy sources could be loaded."""


def no_results_message(query: str, source_count: int) -> str:
    plural = "pharmacy" if source_count == 1 else "pharmacies"
    return (
        f'No results found for "{query}" across {source_count} {plural}. '
        "Check the spelling or try a different medicine name."
    )


class PriceAggregator:
    """Concurrent fan-out over pharmacy connectors with per-source caching."""

    def __init__(
        self,
        connectors: list[BaseConnector] | None = None,
        cache: ResultCache | None = None,
        deadline_seconds: float | None = None,
    ):
        self._connectors = connectors
        self.cache = cache if cache is not None else ResultCache()
        self.deadline_seconds = settings.search_deadline_seconds if deadline_seconds is None else deadline_seconds

    def _resolve_connectors(self) -> list[BaseConnector]:
        if self._connectors is not None:
            connectors = self._connectors
        else:
            if not load_catalog():
                raise CatalogUnavailableError(get_catalog_error() or "Source catalog is empty")
            connectors = get_all_connectors()
        if not connectors:
            raise CatalogUnavailableError("No enabled pharmacy sources")
        return connectors

    async def _run_source(self, connector: BaseConnector, query: str) -> tuple[list[ResultRecord], SourceStatus]:
        """Cache lookup, then the retried pipeline on a miss, then cache write."""
        source = connector.source_name
        cached = self.cache.get(source, query)
        if cached is not None:
            logger.info(f"Serving cached {source} result ({len(cached)} records)")
            return cached, SourceStatus(source=source, status="cached", result_count=len(cached))

        outcome = await run_with_retries(connector, query)
        # Failed sources are cached as empty too, until the TTL runs out
        self.cache.put(source, query, outcome.records)
        return outcome.records, SourceStatus(
            source=source,
            status=outcome.status,
            details=outcome.details or "Success",
            result_count=len(outcome.records),
            attempts=outcome.attempts,
        )

    async def search_with_status(self, query: str) -> tuple[list[ResultRecord], list[SourceStatus]]:
        """
        Search every enabled source and merge the results.

        Raises QueryValidationError or CatalogUnavailableError before any
        network activity. Sources still running at the deadline are
        cancelled and reported as "timeout".
        """
        normalized = normalize_query(query)
        if not normalized:
            raise QueryValidationError(BLANK_QUERY_MESSAGE)

        connectors = self._resolve_connectors()
        tasks = [asyncio.create_task(self._run_source(c, normalized)) for c in connectors]
        done, pending = await asyncio.wait(tasks, timeout=self.deadline_seconds)

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
            logger.warning(f"{len(pending)} source(s) still running after {self.deadline_seconds}s deadline")

        results: list[ResultRecord] = []
        statuses: list[SourceStatus] = []
        for connector, task in zip(connectors, tasks):
            source = connector.source_name
            if task not in done:
                statuses.append(
                    SourceStatus(source=source, status="timeout", details=f"Timed out after {self.deadline_seconds}s")
                )
                continue
            try:
                records, status = task.result()
            except Exception as e:
                logger.error(f"Error querying {source}: {e}")
                statuses.append(SourceStatus(source=source, status="error", details=str(e)))
                continue
            results.extend(records)
            statuses.append(status)

        logger.info(f"Search '{normalized}': {len(results)} results from {len(connectors)} sources")
        return results, statuses

    async def search(self, query: str) -> list[ResultRecord]:
        """Merged results for query. See search_with_status."""
        results, _ = await self.search_with_status(query)
        return results


_default_aggregator: PriceAggregator | None = None


def get_aggregator() -> PriceAggregator:
    """Process-wide aggregator sharing one result cache."""
    global _default_aggregator
    if _default_aggregator is None:
        _default_aggregator = PriceAggregator()
    return _default_aggregator


async def search_pharmacies(
    query: str,
    sort: str = "relevance",
    aggregator: PriceAggregator | None = None,
) -> SearchResponse:
    """
    Entry point for the UI layer. Never raises.

    Exactly one of these holds on return:
    - error is set (blank query or no configured sources) and results is empty
    - error is None and results holds the (possibly empty) merged list;
      an empty list comes with a "no results" message
    """
    aggregator = aggregator or get_aggregator()
    normalized = normalize_query(query)
    try:
        results, statuses = await aggregator.search_with_status(normalized)
    except QueryValidationError as e:
        return SearchResponse(query=normalized, error=str(e))
    except CatalogUnavailableError as e:
        logger.error(f"Search unavailable: {e}")
        return SearchResponse(query=normalized, error=CATALOG_UNAVAILABLE_MESSAGE)

    response = SearchResponse(
        query=normalized,
        results=sort_records(results, sort),
        sources_queried=statuses,
    )
    if not results:
        response.message = no_results_message(normalized, len(statuses))
    return response
