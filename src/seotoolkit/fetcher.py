"""Page fetcher - retrieves raw HTML for analysis."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import requests

from seotoolkit.config import settings
from seotoolkit.constants import (
    BATCH_DELAY_SECONDS,
    DEFAULT_FETCH_CONCURRENCY,
)
from seotoolkit.models import FetchedPage

logger = logging.getLogger(__name__)


class PageFetchError(Exception):
    """Raised when a page cannot be fetched well enough to analyze."""

    def __init__(self, url: str, message: str):
        super().__init__(message)
        self.url = url


def normalize_url(url: str) -> str:
    """Ensure the URL has a scheme, defaulting to https."""
    url = url.strip()
    if url.lower().startswith(('http://', 'https://')):
        return url
    return f"https://{url}"


class PageFetcher:
    """Fetches pages over HTTP, following redirects."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the fetcher.

        Args:
            user_agent: User agent string (defaults to settings.USER_AGENT)
            timeout: Request timeout in seconds (defaults to settings.FETCH_TIMEOUT)
            session: Optional pre-configured requests session
            sleep: Delay function used between batches
        """
        self.user_agent = user_agent or settings.USER_AGENT
        self.timeout = timeout or settings.FETCH_TIMEOUT
        self.sleep = sleep

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
        })

    def fetch(self, url: str) -> FetchedPage:
        """Fetch a single URL.

        Network failures are reported through ``FetchedPage.error`` rather
        than raised.

        Args:
            url: URL to fetch (https:// is assumed when no scheme is given)

        Returns:
            FetchedPage with the final URL after redirects
        """
        normalized = normalize_url(url)
        start_time = time.monotonic()

        try:
            response = self.session.get(
                normalized,
                timeout=self.timeout,
                allow_redirects=True,
            )
        except requests.exceptions.Timeout:
            error = f"Request timeout after {self.timeout}s"
        except requests.exceptions.ConnectionError as e:
            error = f"Connection error: {e}"
        except requests.exceptions.RequestException as e:
            error = str(e) or type(e).__name__
        else:
            load_time_ms = int((time.monotonic() - start_time) * 1000)
            logger.debug(f"Fetched {response.url} ({response.status_code}) in {load_time_ms}ms")
            return FetchedPage(
                url=response.url,
                html=response.text,
                status_code=response.status_code,
                headers=dict(response.headers),
                load_time_ms=load_time_ms,
            )

        logger.warning(f"Failed to fetch {normalized}: {error}")
        return FetchedPage(
            url=normalized,
            load_time_ms=int((time.monotonic() - start_time) * 1000),
            error=error,
        )

    def fetch_many(
        self, urls: list[str], concurrency: int = DEFAULT_FETCH_CONCURRENCY
    ) -> list[FetchedPage]:
        """Fetch several URLs concurrently in batches.

        Args:
            urls: URLs to fetch
            concurrency: Batch size (pages fetched in parallel)

        Returns:
            FetchedPage per URL, in input order
        """
        concurrency = max(1, concurrency)
        results: list[FetchedPage] = []

        with ThreadPoolExecutor(max_workers=concurrency) as executor:
            for i in range(0, len(urls), concurrency):
                batch = urls[i:i + concurrency]
                results.extend(executor.map(self.fetch, batch))

                # Small delay between batches to avoid rate limiting
                if i + concurrency < len(urls):
                    self.sleep(BATCH_DELAY_SECONDS)

        return results

    def fetch_for_analysis(self, url: str) -> FetchedPage:
        """Fetch a page that is about to be analyzed.

        Raises:
            PageFetchError: If the fetch failed or returned an HTTP error status
        """
        page = self.fetch(url)
        if page.error:
            raise PageFetchError(url, f"Failed to fetch page: {page.error}")
        if page.status_code >= 400:
            raise PageFetchError(url, f"Page returned status code {page.status_code}")
        return page


def fetch_page(url: str) -> FetchedPage:
    """Fetch a single URL with default settings."""
    return PageFetcher().fetch(url)
