"""
Shared scraping utilities for pharmacy connectors.

Provides fetch_html with:
- Rotating modern User-Agents
- Browser-like headers
- Typed failures (timeout / non-2xx / connection) for the retry layer

fetch_html makes exactly one attempt; retries live in ingestion.retry.
"""

import logging
import random

import httpx

from pharmaprice.config import settings

logger = logging.getLogger(__name__)

# Modern desktop User-Agents (2025-era)
_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/130.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/18.2 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:134.0) Gecko/20100101 Firefox/134.0",
]


class FetchError(Exception):
    """Base class for a failed single fetch attempt."""

    kind = "error"

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


class FetchTimeoutError(FetchError):
    """The request did not complete within the timeout."""

    kind = "timeout"


class FetchStatusError(FetchError):
    """The server answered with a non-2xx status."""

    kind = "status"

    def __init__(self, url: str, status_code: int):
        super().__init__(url, f"HTTP {status_code} from {url}")
        self.status_code = status_code


class FetchConnectionError(FetchError):
    """DNS, TLS, connect, or protocol failure."""

    kind = "connection"


def get_random_ua() -> str:
    """Return a random desktop browser User-Agent."""
    return random.choice(_USER_AGENTS)


def default_headers() -> dict:
    """Return default browser-like headers."""
    return {
        "User-Agent": get_random_ua(),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8",
        "Accept-Language": "en-IN,en;q=0.9",
        "Accept-Encoding": "gzip, deflate, br",
        "DNT": "1",
        "Connection": "keep-alive",
        "Upgrade-Insecure-Requests": "1",
        "Sec-Fetch-Dest": "document",
        "Sec-Fetch-Mode": "navigate",
        "Sec-Fetch-Site": "none",
        "Sec-Fetch-User": "?1",
    }


async def fetch_html(
    url: str,
    headers: dict | None = None,
    timeout: float | None = None,
) -> tuple[str, int]:
    """
    Fetch HTML from a URL with browser-like headers. One attempt only.

    Returns (html_content, status_code).
    Raises FetchTimeoutError, FetchStatusError or FetchConnectionError.
    """
    merged_headers = default_headers()
    if headers:
        merged_headers.update(headers)

    try:
        async with httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.fetch_timeout,
            follow_redirects=True,
            headers=merged_headers,
            http2=True,
        ) as client:
            response = await client.get(url)
    except httpx.TimeoutException as e:
        raise FetchTimeoutError(url, f"Timed out fetching {url}") from e
    except httpx.HTTPError as e:
        raise FetchConnectionError(url, f"Could not fetch {url}: {e.__class__.__name__}") from e

    if not response.is_success:
        raise FetchStatusError(url, response.status_code)

    logger.debug(f"Fetched {url} ({response.status_code}, {len(response.text)} chars)")
    return response.text, response.status_code
