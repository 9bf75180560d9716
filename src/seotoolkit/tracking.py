"""Tracked competitors and the history of rank checks and research."""

import logging
from typing import Optional

from seotoolkit.constants import DEFAULT_DEVICE, RANK_HISTORY_LIMIT
from seotoolkit.database import AbstractStore
from seotoolkit.keyword_gap import normalize_domain
from seotoolkit.models import (
    CompetitorPair,
    KeywordResearchResult,
    RankCheckResult,
    RankHistoryEntry,
)

logger = logging.getLogger(__name__)


class TrackingLog:
    """Reads and writes tracked competitors, rank checks and research.

    Wraps an ``AbstractStore``; the caller owns the store and closes it.
    """

    def __init__(self, store: AbstractStore):
        self.store = store

    # Competitors

    def add_competitor(self, your_domain: str, competitor_domain: str) -> CompetitorPair:
        """Start tracking a competitor for one of your domains.

        Raises:
            ValueError: If either domain is blank
        """
        yours = normalize_domain(your_domain)
        theirs = normalize_domain(competitor_domain)
        if not yours or not theirs:
            raise ValueError("Both domains are required")

        record_id = self.store.insert('competitors', {
            'your_domain': yours,
            'competitor_domain': theirs,
        })
        logger.info(f"Tracking competitor {theirs} for {yours} (id {record_id})")
        return self._competitor(self.store.select('competitors', id=record_id)[0])

    def list_competitors(self, your_domain: Optional[str] = None) -> list[CompetitorPair]:
        """Tracked competitors in the order they were added."""
        filters = {'your_domain': normalize_domain(your_domain)} if your_domain else {}
        return [self._competitor(row) for row in self.store.select('competitors', **filters)]

    def remove_competitor(self, competitor_id: int) -> bool:
        """Stop tracking a competitor. Returns False when the id is unknown."""
        removed = self.store.delete('competitors', competitor_id)
        if not removed:
            logger.warning(f"No tracked competitor with id {competitor_id}")
        return removed

    @staticmethod
    def _competitor(row: dict) -> CompetitorPair:
        return CompetitorPair(
            id=row['id'],
            your_domain=row['your_domain'],
            competitor_domain=row['competitor_domain'],
            added_at=row['created_at'],
        )

    # Rank history

    def record_rank(self, result: RankCheckResult, device: str = DEFAULT_DEVICE) -> int:
        """Store a rank check and return its id."""
        return self.store.insert('rank_tracking', {
            'keyword': result.keyword,
            'domain': result.target_domain,
            'position': result.position,
            'url': result.url,
            'location': result.location,
            'city': result.city,
            'country': result.country,
            'device': device,
            'created_at': result.checked_at,
        })

    def rank_history(
        self,
        domain: Optional[str] = None,
        limit: int = RANK_HISTORY_LIMIT,
    ) -> list[RankHistoryEntry]:
        """Most recent rank checks, newest first."""
        filters = {'domain': domain} if domain else {}
        rows = self.store.select('rank_tracking', newest_first=True, limit=limit, **filters)
        return [
            RankHistoryEntry(
                id=row['id'],
                keyword=row['keyword'],
                domain=row['domain'],
                position=row['position'],
                url=row['url'],
                location=row['location'] or '',
                # Rows without a city fall back to the full location string
                city=row['city'] or row['location'] or '',
                country=row['country'] or '',
                device=row['device'] or '',
                tracked_at=row['created_at'],
            )
            for row in rows
        ]

    def delete_rank(self, record_id: int) -> bool:
        """Delete a stored rank check. Returns False when the id is unknown."""
        removed = self.store.delete('rank_tracking', record_id)
        if not removed:
            logger.warning(f"No rank check with id {record_id}")
        return removed

    # Research

    def record_research(self, result: KeywordResearchResult) -> int:
        """Store a keyword research result and return its id."""
        return self.store.insert('keyword_research', {
            'keyword': result.keyword,
            'related_keywords': list(result.suggestions),
            'people_also_ask': list(result.questions),
        })
