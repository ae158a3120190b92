"""
Bounded retries around one connector's fetch-extract-match pipeline.

Only fetch failures are retried. A page that loads but yields nothing is
final, and any other error is logged and treated as a failed source.
Nothing raised here reaches the aggregator.
"""

import asyncio
import logging
from dataclasses import dataclass, field

from pharmaprice.config import settings
from pharmaprice.ingestion.base import BaseConnector
from pharmaprice.schemas.search import ResultRecord
from pharmaprice.utils.scraping import FetchError

logger = logging.getLogger(__name__)


@dataclass
class SourceOutcome:
    """What one source produced for one query."""

    source: str
    records: list[ResultRecord] = field(default_factory=list)
    status: str = "ok"  # "ok", "empty" or "error"
    details: str | None = None
    attempts: int = 0


async def _backoff(delay: float) -> None:
    await asyncio.sleep(delay)


async def run_with_retries(
    connector: BaseConnector,
    query: str,
    max_retries: int | None = None,
    backoff: float | None = None,
) -> SourceOutcome:
    """
    Run connector.search with up to max_retries extra attempts.

    Attempt N+1 starts after waiting N * backoff seconds (1s, then 2s by
    default). Exhausted retries give an empty "error" outcome.
    """
    max_retries = settings.max_retries if max_retries is None else max_retries
    backoff = settings.retry_backoff_seconds if backoff is None else backoff
    source = connector.source_name

    last_error: FetchError | None = None
    for attempt in range(max_retries + 1):
        if attempt:
            wait = attempt * backoff
            logger.info(f"Retry {attempt}/{max_retries} for {source} after {wait:.1f}s ({last_error})")
            await _backoff(wait)

        try:
            records = await connector.search(query)
        except FetchError as e:
            last_error = e
            logger.warning(f"{source} attempt {attempt + 1} failed ({e.kind}): {e}")
            continue
        except Exception as e:
            logger.exception(f"Unexpected error while scraping {source}")
            return SourceOutcome(source=source, status="error", details=str(e) or e.__class__.__name__, attempts=attempt + 1)

        return SourceOutcome(
            source=source,
            records=records,
            status="ok" if records else "empty",
            details=None if records else "No matching products",
            attempts=attempt + 1,
        )

    logger.error(f"{source} failed after {max_retries + 1} attempts: {last_error}")
    return SourceOutcome(
        source=source,
        status="error",
        details=str(last_error) if last_error else "Failed",
        attempts=max_retries + 1,
    )
