"""
Search Suggestion Client

Queries the public search autocomplete endpoint for keyword suggestions.
The endpoint is unofficial and unauthenticated, so every failure is
treated as "no suggestions".

Response format: [query, [suggestion, ...]]
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import httpx

from seotoolkit.constants import SUGGEST_URL

logger = logging.getLogger(__name__)


class SuggestClient:
    """Client for the search autocomplete endpoint"""

    USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0"

    def __init__(
        self,
        timeout: float = 10.0,
        max_workers: int = 5,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the suggestion client.

        Args:
            timeout: Request timeout in seconds
            max_workers: Maximum concurrent suggestion queries
            client: Optional pre-configured httpx client
        """
        self.timeout = timeout
        self.max_workers = max_workers
        self.client = client or httpx.Client(
            timeout=timeout,
            headers={"User-Agent": self.USER_AGENT},
        )

    def suggestions(self, query: str) -> List[str]:
        """
        Get autocomplete suggestions for a query.

        Args:
            query: Search query

        Returns:
            Suggestions in endpoint order, or [] on any failure
        """
        try:
            response = self.client.get(SUGGEST_URL, params={"client": "firefox", "q": query})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            logger.warning(f"[Suggest] Request failed for {query!r}: {e}")
            return []
        except ValueError as e:
            logger.warning(f"[Suggest] Invalid response for {query!r}: {e}")
            return []

        if not isinstance(data, list) or len(data) < 2 or not isinstance(data[1], list):
            return []
        return [s for s in data[1] if isinstance(s, str)]

    def bulk_suggestions(self, queries: List[str]) -> List[List[str]]:
        """Fetch suggestions for several queries in parallel, preserving order."""
        if not queries:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(queries))) as executor:
            return list(executor.map(self.suggestions, queries))

    def close(self) -> None:
        self.client.close()
