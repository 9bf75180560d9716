"""Search rank lookup by scraping result pages.

Use responsibly: search engines may block excessive requests, so every
lookup waits a randomized delay before hitting the results page.
"""

import logging
import random
import time
from typing import Callable, Optional
from urllib.parse import quote, urlparse

import requests
from bs4 import BeautifulSoup

from seotoolkit.config import settings
from seotoolkit.constants import (
    GOOGLE_DOMAINS,
    SERP_BATCH_DELAY_BASE,
    SERP_BATCH_DELAY_JITTER,
    SERP_DELAY_BASE,
    SERP_DELAY_JITTER,
    SERP_EXCLUDED_HOSTS,
    SERP_MAX_RESULTS,
    SERP_TOP_RESULTS,
    SERP_USER_AGENTS,
)
from seotoolkit.models import RankCheckResult, SerpResult

logger = logging.getLogger(__name__)


def extract_domain(url: str) -> str:
    """Hostname of a URL without ``www.``; the input itself if unparseable."""
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return url
    if not hostname:
        return url
    return hostname.replace('www.', '', 1)


def build_search_url(keyword: str, country: str = 'IN', city: Optional[str] = None) -> str:
    """Localized search URL asking for up to 100 results."""
    google_domain = GOOGLE_DOMAINS.get(country.upper(), 'google.com')
    search_url = f"https://www.{google_domain}/search?q={quote(keyword, safe='')}&num=100&hl=en"
    if city:
        search_url += f"&near={quote(city, safe='')}"
    return search_url + f"&gl={country.lower()}"


def parse_serp_results(html: str) -> list[SerpResult]:
    """Organic result links from a results page, in page order.

    Titles and descriptions are left empty; result markup changes too often
    to extract them reliably.
    """
    soup = BeautifulSoup(html, "html.parser")

    urls: list[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if not href.startswith(('http://', 'https://')):
            continue
        if any(excluded in href for excluded in SERP_EXCLUDED_HOSTS):
            continue
        if href not in urls:
            urls.append(href)

    return [
        SerpResult(position=index, url=url, domain=extract_domain(url))
        for index, url in enumerate(urls[:SERP_MAX_RESULTS], start=1)
    ]


def find_position(results: list[SerpResult], target_domain: str) -> Optional[SerpResult]:
    """First result whose domain contains the target domain."""
    target = target_domain.replace('www.', '', 1).lower()
    for result in results:
        if target in result.domain.lower():
            return result
    return None


class RankTracker:
    """Checks where a domain ranks for keywords."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        timeout: Optional[int] = None,
    ):
        """Initialize the rank tracker.

        Args:
            session: Optional pre-configured requests session
            sleep: Delay function used for politeness waits
            rng: Randomness source for delays and user agent rotation
            timeout: Request timeout in seconds (defaults to settings.FETCH_TIMEOUT)
        """
        self.session = session or requests.Session()
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.timeout = timeout or settings.FETCH_TIMEOUT

    def _headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.rng.choice(SERP_USER_AGENTS),
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "DNT": "1",
            "Upgrade-Insecure-Requests": "1",
        }

    def check_rank(
        self,
        keyword: str,
        target_domain: str,
        country: str = 'IN',
        city: Optional[str] = None,
    ) -> RankCheckResult:
        """Look up the position of ``target_domain`` for ``keyword``.

        Never raises: any failure is logged and reported as position None.
        """
        location = f"{city}, {country}" if city else country
        search_url = build_search_url(keyword, country, city)

        try:
            self.sleep(SERP_DELAY_BASE + self.rng.random() * SERP_DELAY_JITTER)
            response = self.session.get(search_url, headers=self._headers(), timeout=self.timeout)
            if response.status_code >= 400:
                raise requests.HTTPError(f"Search returned {response.status_code}")
            results = parse_serp_results(response.text)
        except Exception as e:
            logger.error(f"Rank check failed for {keyword!r}: {e}")
            return RankCheckResult(
                keyword=keyword,
                target_domain=target_domain,
                position=None,
                url=None,
                location=location,
                country=country,
                city=city,
            )

        match = find_position(results, target_domain)
        if match:
            logger.info(f"{target_domain} ranks #{match.position} for {keyword!r}")
        else:
            logger.info(f"{target_domain} not found in top {len(results)} for {keyword!r}")

        return RankCheckResult(
            keyword=keyword,
            target_domain=target_domain,
            position=match.position if match else None,
            url=match.url if match else None,
            location=location,
            top_results=tuple(results[:SERP_TOP_RESULTS]),
            country=country,
            city=city,
        )

    def batch_check(
        self,
        keywords: list[str],
        target_domain: str,
        country: str = 'IN',
        city: Optional[str] = None,
    ) -> list[RankCheckResult]:
        """Check several keywords sequentially with longer pauses between them."""
        results = []
        for index, keyword in enumerate(keywords):
            results.append(self.check_rank(keyword, target_domain, country, city))
            if index < len(keywords) - 1:
                self.sleep(SERP_BATCH_DELAY_BASE + self.rng.random() * SERP_BATCH_DELAY_JITTER)
        return results


def lookup_rank(keyword: str, domain: str, country: Optional[str] = None) -> Optional[int]:
    """Position of ``domain`` for ``keyword``, or None when not found."""
    return RankTracker().check_rank(keyword, domain, country or settings.DEFAULT_COUNTRY).position
